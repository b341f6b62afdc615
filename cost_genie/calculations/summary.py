"""
Spending aggregation.

Reduces lists of cost records into yearly totals per category and
measures them against an income base. The needs list and the favorites
list are queried independently, so a record carrying both tags counts
toward both categories and toward the combined total twice.
"""

from decimal import Decimal
from typing import Iterable

from cost_genie.calculations.normalizer import (
    percentage_of_income,
    validate_income_base,
    yearly_equivalent,
)
from cost_genie.models.analysis import (
    CategoryTotals,
    CombinedTotals,
    FinancialSummary,
    IncomeBase,
)
from cost_genie.models.cost import CostEntry

_MONTHS = Decimal("12")


def calculate_yearly_total(entries: Iterable[CostEntry]) -> Decimal:
    """Sum of the yearly-equivalent cost of every entry."""
    return sum(
        (yearly_equivalent(entry.amount, entry.frequency) for entry in entries),
        Decimal("0"),
    )


def summarize_category(entries: Iterable[CostEntry], income_base: Decimal) -> CategoryTotals:
    items = list(entries)
    yearly_total = calculate_yearly_total(items)
    return CategoryTotals(
        items=items,
        yearly_total=yearly_total,
        monthly_average=yearly_total / _MONTHS,
        percentage_of_income=percentage_of_income(yearly_total, income_base),
    )


def summarize(
    needs: Iterable[CostEntry],
    favorites: Iterable[CostEntry],
    income: IncomeBase,
) -> FinancialSummary:
    """
    Build the financial summary for one user.

    Raises:
        InvalidIncomeBase: income.amount is zero, negative or not finite
    """
    base = validate_income_base(income.amount)

    needs_totals = summarize_category(needs, base)
    favorites_totals = summarize_category(favorites, base)

    combined_total = needs_totals.yearly_total + favorites_totals.yearly_total
    combined = CombinedTotals(
        yearly_total=combined_total,
        monthly_average=combined_total / _MONTHS,
        percentage_of_income=percentage_of_income(combined_total, base),
    )

    return FinancialSummary(
        income=income,
        needs=needs_totals,
        favorites=favorites_totals,
        combined=combined,
    )
