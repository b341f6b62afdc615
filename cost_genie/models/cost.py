"""
Cost Record and Income Profile Models

These models define the schemas for everything the storage collaborators
hand to the calculation core:
1. Expense records (amount, frequency, want/need tags)
2. Income profiles (gross salary, optional US state)
3. Partial updates for both

CRITICAL: The `favorite` (want) and `need` flags are independent booleans.
Storage never enforces that only one of them is set. Exclusivity is a
presentation policy applied by the orchestrator when asked to.

All money values are Decimal. Floats are accepted at the edges and
converted by pydantic.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TimeBucket(str, Enum):
    """
    Time buckets a single cost is projected into.

    Order matters: presentation code iterates buckets in this order.
    """
    ONE_TIME = "one_time"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    EVERY_FOUR_MONTHS = "every_four_months"
    YEARLY = "yearly"


class Frequency(str, Enum):
    """
    How often a recorded expense recurs.

    Closed set: anything else is rejected at model construction.
    """
    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def bucket(self) -> TimeBucket:
        """The time bucket a presentation layer highlights for this frequency."""
        if self is Frequency.ONCE:
            return TimeBucket.ONE_TIME
        return TimeBucket(self.value)


class CostTag(str, Enum):
    """The two independent tags a cost can carry."""
    FAVORITE = "favorite"  # a "want"
    NEED = "need"


# =============================================================================
# COST RECORDS
# =============================================================================

class CostEntry(BaseModel):
    """
    A single recorded expense.

    `created_at` is assigned when the entry is built and never changes.
    Every entry belongs to exactly one user.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique cost entry ID"
    )
    user_id: str = Field(
        ...,
        min_length=1,
        description="Owner of this entry"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="What the money was spent on"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount in currency units"
    )
    frequency: Frequency = Field(
        ...,
        description="How often this expense recurs"
    )
    favorite: bool = Field(
        default=False,
        description="Tagged as a want"
    )
    need: bool = Field(
        default=False,
        description="Tagged as an essential need"
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        description="When the entry was recorded"
    )

    @field_validator('amount')
    @classmethod
    def amount_must_be_finite(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("Amount must be a finite number")
        return v

    def has_tag(self, tag: CostTag) -> bool:
        return self.favorite if tag is CostTag.FAVORITE else self.need


class CostEntryUpdate(BaseModel):
    """
    Editable fields of a cost entry.

    Only fields that are set are applied. `id`, `user_id` and
    `created_at` are not editable.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    description: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=200,
    )
    amount: Optional[Decimal] = Field(
        default=None,
        ge=0,
    )
    frequency: Optional[Frequency] = None
    favorite: Optional[bool] = None
    need: Optional[bool] = None

    @field_validator('amount')
    @classmethod
    def amount_must_be_finite(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and not v.is_finite():
            raise ValueError("Amount must be a finite number")
        return v

    def apply_to(self, entry: CostEntry) -> CostEntry:
        """Return a copy of `entry` with the set fields replaced."""
        changes = self.model_dump(exclude_none=True)
        return entry.model_copy(update=changes)


# =============================================================================
# INCOME PROFILE
# =============================================================================

class UserProfile(BaseModel):
    """
    Income profile for a user.

    `state` is optional. When it does not match a key in the tax table,
    percentages fall back to gross income.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: str = Field(
        ...,
        min_length=1,
        description="User this profile belongs to"
    )
    email: Optional[str] = Field(
        default=None,
        max_length=254,
    )
    yearly_salary: Decimal = Field(
        ...,
        gt=0,
        description="Gross yearly salary"
    )
    state: Optional[str] = Field(
        default=None,
        max_length=50,
        description="US state name used for the tax estimate"
    )

    @field_validator('yearly_salary')
    @classmethod
    def salary_must_be_finite(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("Yearly salary must be a finite number")
        return v

    @field_validator('state')
    @classmethod
    def blank_state_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class ProfileUpdate(BaseModel):
    """
    Partial update of an income profile.

    An empty string for `state` clears it.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    yearly_salary: Optional[Decimal] = Field(default=None, gt=0)
    state: Optional[str] = Field(default=None, max_length=50)

    def apply_to(self, profile: UserProfile) -> UserProfile:
        changes = self.model_dump(exclude_none=True)
        if changes.get("state") == "":
            changes["state"] = None
        return profile.model_copy(update=changes)
