"""
Derived Analysis Models

Everything in this module is computed from cost records and income
profiles on demand. None of it is persisted and none of it has identity
or a lifecycle: recompute whenever an expense or income figure changes.

Models are frozen so a computed result cannot drift after the fact.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cost_genie.models.cost import CostEntry, Frequency, TimeBucket


# =============================================================================
# COST PROJECTION
# =============================================================================

class BucketProjection(BaseModel):
    """Amount for one time bucket and its share of income (0-100+, unrounded)."""
    model_config = ConfigDict(frozen=True)

    amount: Decimal
    percentage: Decimal


class CostAnalysis(BaseModel):
    """
    One cost projected into every time bucket.

    Buckets are reachable as attributes (`analysis.weekly`) or by
    `TimeBucket` (`analysis[TimeBucket.WEEKLY]`).
    """
    model_config = ConfigDict(frozen=True)

    one_time: BucketProjection
    daily: BucketProjection
    weekly: BucketProjection
    monthly: BucketProjection
    every_four_months: BucketProjection
    yearly: BucketProjection

    def __getitem__(self, bucket: TimeBucket) -> BucketProjection:
        return getattr(self, TimeBucket(bucket).value)

    def for_frequency(self, frequency: Frequency) -> BucketProjection:
        """The projection matching how often the cost actually recurs."""
        return self[frequency.bucket]

    def as_dict(self) -> dict[TimeBucket, BucketProjection]:
        return {bucket: self[bucket] for bucket in TimeBucket}


# =============================================================================
# INCOME
# =============================================================================

class IncomeBasis(str, Enum):
    """Which income figure percentages were computed against."""
    GROSS = "gross"
    AFTER_TAX = "after_tax"


class IncomeBase(BaseModel):
    """
    The yearly income used as the percentage denominator.

    `amount` is the after-tax estimate when the profile's state is in the
    tax table, otherwise the gross salary.
    """
    model_config = ConfigDict(frozen=True)

    amount: Decimal
    basis: IncomeBasis
    gross_income: Decimal
    state: Optional[str] = None

    @property
    def is_after_tax(self) -> bool:
        return self.basis is IncomeBasis.AFTER_TAX

    @property
    def monthly_amount(self) -> Decimal:
        return self.amount / 12


# =============================================================================
# AGGREGATES
# =============================================================================

class CategoryTotals(BaseModel):
    """Yearly-equivalent totals for one category of costs (needs or wants)."""
    model_config = ConfigDict(frozen=True)

    items: list[CostEntry] = Field(default_factory=list)
    yearly_total: Decimal
    monthly_average: Decimal
    percentage_of_income: Decimal

    @property
    def count(self) -> int:
        return len(self.items)


class CombinedTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    yearly_total: Decimal
    monthly_average: Decimal
    percentage_of_income: Decimal


class SpendingSnapshot(BaseModel):
    """
    Input of the recommendation engine.

    Percentages are shares of yearly income, counts are numbers of records.
    """
    model_config = ConfigDict(frozen=True)

    needs_pct: Decimal = Field(default=Decimal("0"))
    needs_count: int = Field(default=0, ge=0)
    favorites_pct: Decimal = Field(default=Decimal("0"))
    favorites_count: int = Field(default=0, ge=0)
    combined_pct: Decimal = Field(default=Decimal("0"))


class FinancialSummary(BaseModel):
    """Needs, wants and their combination, measured against one income base."""
    model_config = ConfigDict(frozen=True)

    income: IncomeBase
    needs: CategoryTotals
    favorites: CategoryTotals
    combined: CombinedTotals

    def to_snapshot(self) -> SpendingSnapshot:
        return SpendingSnapshot(
            needs_pct=self.needs.percentage_of_income,
            needs_count=self.needs.count,
            favorites_pct=self.favorites.percentage_of_income,
            favorites_count=self.favorites.count,
            combined_pct=self.combined.percentage_of_income,
        )


# =============================================================================
# ADVISORIES
# =============================================================================

class AdvisoryTier(str, Enum):
    """Severity of an advisory, highest priority first."""
    DANGER = "danger"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"

    @property
    def priority(self) -> int:
        return _TIER_PRIORITY[self]


_TIER_PRIORITY = {
    AdvisoryTier.DANGER: 0,
    AdvisoryTier.WARNING: 1,
    AdvisoryTier.INFO: 2,
    AdvisoryTier.SUCCESS: 3,
}


class Advisory(BaseModel):
    """A single piece of spending advice."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        description="Stable rule identifier (e.g. 'high-essentials')"
    )
    tier: AdvisoryTier
    title: str
    description: str
    action: Optional[str] = Field(
        default=None,
        description="Suggested next step, if any"
    )


# =============================================================================
# FLOW RESULTS
# =============================================================================

class AnalysisStatus(str, Enum):
    """
    Outcome of an analysis request.

    Anything other than OK comes with a message the presentation layer
    can show as-is.
    """
    OK = "ok"
    INCOME_NOT_SET = "income_not_set"
    INVALID_INCOME_BASE = "invalid_income_base"
    INVALID_AMOUNT = "invalid_amount"


class CostAnalysisView(BaseModel):
    """Result of analysing a single cost for a user."""
    model_config = ConfigDict(frozen=True)

    status: AnalysisStatus
    message: str = ""
    analysis: Optional[CostAnalysis] = None
    income: Optional[IncomeBase] = None

    @property
    def ok(self) -> bool:
        return self.status is AnalysisStatus.OK


class DashboardView(BaseModel):
    """Everything the summary screen needs for one user."""
    model_config = ConfigDict(frozen=True)

    status: AnalysisStatus
    message: str = ""
    summary: Optional[FinancialSummary] = None
    advisories: list[Advisory] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is AnalysisStatus.OK
