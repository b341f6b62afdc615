"""
Frequency Normalizer

Turns a single cost into comparable projections across time buckets and
expresses each one as a percentage of yearly income.

Conversion factors are fixed:

    one_time            x 1    (never annualized)
    daily               x 365
    weekly              x 52
    monthly             x 12
    every_four_months   x 3
    yearly              x 12   (same figure as the monthly bucket)

Percentages are `bucket_amount / income_base * 100` with no rounding.
Rounding and currency formatting belong to the presentation layer.

Everything here is a pure function of its arguments.
"""

from decimal import Decimal, InvalidOperation
from typing import Union

from cost_genie.calculations.exceptions import (
    InvalidAmount,
    InvalidIncome,
    InvalidIncomeBase,
)
from cost_genie.models.analysis import BucketProjection, CostAnalysis
from cost_genie.models.cost import Frequency, TimeBucket

Number = Union[Decimal, int, float, str]

HUNDRED = Decimal("100")

BUCKET_FACTORS: dict[TimeBucket, Decimal] = {
    TimeBucket.ONE_TIME: Decimal("1"),
    TimeBucket.DAILY: Decimal("365"),
    TimeBucket.WEEKLY: Decimal("52"),
    TimeBucket.MONTHLY: Decimal("12"),
    TimeBucket.EVERY_FOUR_MONTHS: Decimal("3"),
    TimeBucket.YEARLY: Decimal("12"),
}

# How many times per year a stored record of each frequency is paid.
# A one-off cost counts once toward the yearly total.
YEARLY_OCCURRENCES: dict[Frequency, Decimal] = {
    Frequency.ONCE: Decimal("1"),
    Frequency.DAILY: Decimal("365"),
    Frequency.WEEKLY: Decimal("52"),
    Frequency.MONTHLY: Decimal("12"),
    Frequency.YEARLY: Decimal("1"),
}


def to_decimal(value: Number) -> Decimal:
    """
    Convert a number to Decimal.

    Floats go through their string form so 0.1 stays 0.1.
    Raises InvalidOperation (or TypeError) for anything unparseable.
    """
    if isinstance(value, bool):
        raise TypeError("Booleans are not amounts")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def validate_amount(amount: Number) -> Decimal:
    try:
        value = to_decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(amount)
    if not value.is_finite() or value < 0:
        raise InvalidAmount(amount)
    return value


def validate_income(income: Number) -> Decimal:
    """Any finite income, zero and negative included."""
    try:
        value = to_decimal(income)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidIncome(income)
    if not value.is_finite():
        raise InvalidIncome(income)
    return value


def validate_income_base(income_base: Number) -> Decimal:
    try:
        value = to_decimal(income_base)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidIncomeBase(income_base)
    if not value.is_finite() or value <= 0:
        raise InvalidIncomeBase(income_base)
    return value


def percentage_of_income(amount: Number, income_base: Number) -> Decimal:
    """
    Share of `income_base` taken by `amount`, in percent.

    Raises:
        InvalidAmount: amount is negative or not finite
        InvalidIncomeBase: income_base is zero, negative or not finite
    """
    value = validate_amount(amount)
    base = validate_income_base(income_base)
    return (value / base) * HUNDRED


def normalize(amount: Number, income_base: Number) -> CostAnalysis:
    """
    Project `amount` into every time bucket.

    Args:
        amount: The cost, as entered by the user
        income_base: Yearly income to measure against (gross or after-tax,
                     chosen by the caller)

    Returns:
        CostAnalysis with one {amount, percentage} pair per bucket

    Raises:
        InvalidAmount: amount is negative or not finite
        InvalidIncomeBase: income_base is zero, negative or not finite
    """
    value = validate_amount(amount)
    base = validate_income_base(income_base)

    projections = {}
    for bucket, factor in BUCKET_FACTORS.items():
        bucket_amount = value * factor
        projections[bucket.value] = BucketProjection(
            amount=bucket_amount,
            percentage=(bucket_amount / base) * HUNDRED,
        )

    return CostAnalysis(**projections)


def yearly_equivalent(amount: Number, frequency: Frequency) -> Decimal:
    """Yearly cost of a stored record paid `amount` at `frequency`."""
    value = validate_amount(amount)
    return value * YEARLY_OCCURRENCES[Frequency(frequency)]
