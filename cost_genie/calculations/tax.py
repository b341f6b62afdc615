"""
Income Tax Estimator

Estimates after-tax yearly income from a US state and a gross salary:

    after_tax = gross * (1 - state_rate/100 - FEDERAL_RATE/100 - FICA_RATE/100)

This is a flat-rate ESTIMATE. Federal and FICA rates are applied
uniformly regardless of bracket, so the result must be shown to users as
an estimate, never as a precise tax computation.

CRITICAL: An unknown state yields None ("unavailable"), never 0. A rate
of 0% is a real answer (Texas, Florida, ...) and must not be confused
with missing data.
"""

from decimal import Decimal
from types import MappingProxyType
from typing import Optional

from cost_genie.calculations.normalizer import Number, validate_income
from cost_genie.models.analysis import IncomeBase, IncomeBasis

FEDERAL_RATE = Decimal("12.00")  # Effective average federal income tax rate
FICA_RATE = Decimal("7.65")      # Social Security + Medicare

ESTIMATE_DISCLAIMER = (
    "After-tax income is an estimate using a flat state rate, a "
    f"{FEDERAL_RATE}% federal rate and a {FICA_RATE}% FICA rate. "
    "It is not a precise tax calculation."
)

_HUNDRED = Decimal("100")

STATE_INCOME_TAX_RATES = MappingProxyType({
    "Alabama": Decimal("5.00"),
    "Alaska": Decimal("0.00"),
    "Arizona": Decimal("2.50"),
    "Arkansas": Decimal("4.40"),
    "California": Decimal("13.30"),
    "Colorado": Decimal("4.40"),
    "Connecticut": Decimal("6.99"),
    "Delaware": Decimal("6.60"),
    "Florida": Decimal("0.00"),
    "Georgia": Decimal("5.39"),
    "Hawaii": Decimal("11.00"),
    "Idaho": Decimal("5.80"),
    "Illinois": Decimal("4.95"),
    "Indiana": Decimal("3.05"),
    "Iowa": Decimal("6.00"),
    "Kansas": Decimal("5.70"),
    "Kentucky": Decimal("5.00"),
    "Louisiana": Decimal("4.25"),
    "Maine": Decimal("7.15"),
    "Maryland": Decimal("5.75"),
    "Massachusetts": Decimal("5.00"),
    "Michigan": Decimal("4.25"),
    "Minnesota": Decimal("9.85"),
    "Mississippi": Decimal("5.00"),
    "Missouri": Decimal("5.40"),
    "Montana": Decimal("6.75"),
    "Nebraska": Decimal("6.84"),
    "Nevada": Decimal("0.00"),
    "New Hampshire": Decimal("0.00"),  # No tax on earned income
    "New Jersey": Decimal("10.75"),
    "New Mexico": Decimal("5.90"),
    "New York": Decimal("10.90"),
    "North Carolina": Decimal("4.50"),
    "North Dakota": Decimal("2.90"),
    "Ohio": Decimal("3.99"),
    "Oklahoma": Decimal("5.00"),
    "Oregon": Decimal("9.90"),
    "Pennsylvania": Decimal("3.07"),
    "Rhode Island": Decimal("5.99"),
    "South Carolina": Decimal("7.00"),
    "South Dakota": Decimal("0.00"),
    "Tennessee": Decimal("0.00"),
    "Texas": Decimal("0.00"),
    "Utah": Decimal("4.55"),
    "Vermont": Decimal("8.75"),
    "Virginia": Decimal("5.75"),
    "Washington": Decimal("0.00"),
    "West Virginia": Decimal("6.50"),
    "Wisconsin": Decimal("7.65"),
    "Wyoming": Decimal("0.00"),
})


def get_state_names() -> list[str]:
    """All state names known to the tax table, in table (alphabetical) order."""
    return list(STATE_INCOME_TAX_RATES)


def get_state_rate(state: Optional[str]) -> Optional[Decimal]:
    """Flat state income tax rate in percent, or None if the state is unknown."""
    if state is None:
        return None
    return STATE_INCOME_TAX_RATES.get(state)


def estimate_after_tax(state: Optional[str], gross_yearly_income: Number) -> Optional[Decimal]:
    """
    Estimate after-tax yearly income.

    Args:
        state: US state name, exactly as it appears in the tax table
        gross_yearly_income: Gross yearly income

    Returns:
        The after-tax estimate, or None when `state` is not in the table.
        Zero or negative gross income is not special-cased: the formula
        is linear and yields a zero or negative estimate.

    Raises:
        InvalidIncome: gross_yearly_income is not a finite number
    """
    gross = validate_income(gross_yearly_income)

    state_rate = get_state_rate(state)
    if state_rate is None:
        return None

    return gross * (
        1
        - state_rate / _HUNDRED
        - FEDERAL_RATE / _HUNDRED
        - FICA_RATE / _HUNDRED
    )


def resolve_income_base(yearly_salary: Number, state: Optional[str] = None) -> IncomeBase:
    """
    Pick the income figure percentages should be measured against.

    After-tax when `state` is in the tax table, gross salary otherwise.
    """
    gross = validate_income(yearly_salary)
    after_tax = estimate_after_tax(state, gross)

    if after_tax is None:
        return IncomeBase(
            amount=gross,
            basis=IncomeBasis.GROSS,
            gross_income=gross,
            state=state,
        )

    return IncomeBase(
        amount=after_tax,
        basis=IncomeBasis.AFTER_TAX,
        gross_income=gross,
        state=state,
    )
