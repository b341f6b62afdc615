"""Calculation core: cost normalization, tax estimation and aggregation."""

from cost_genie.calculations.exceptions import (
    CalculationError,
    InvalidAmount,
    InvalidIncome,
    InvalidIncomeBase,
)
from cost_genie.calculations.normalizer import (
    BUCKET_FACTORS,
    YEARLY_OCCURRENCES,
    normalize,
    percentage_of_income,
    yearly_equivalent,
)
from cost_genie.calculations.summary import (
    calculate_yearly_total,
    summarize,
)
from cost_genie.calculations.tax import (
    ESTIMATE_DISCLAIMER,
    FEDERAL_RATE,
    FICA_RATE,
    STATE_INCOME_TAX_RATES,
    estimate_after_tax,
    get_state_names,
    get_state_rate,
    resolve_income_base,
)

__all__ = [
    # Exceptions
    "CalculationError",
    "InvalidAmount",
    "InvalidIncome",
    "InvalidIncomeBase",
    # Normalizer
    "BUCKET_FACTORS",
    "YEARLY_OCCURRENCES",
    "normalize",
    "percentage_of_income",
    "yearly_equivalent",
    # Aggregation
    "calculate_yearly_total",
    "summarize",
    # Tax
    "ESTIMATE_DISCLAIMER",
    "FEDERAL_RATE",
    "FICA_RATE",
    "STATE_INCOME_TAX_RATES",
    "estimate_after_tax",
    "get_state_names",
    "get_state_rate",
    "resolve_income_base",
]
