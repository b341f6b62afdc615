"""
Tests for Cost Genie

Test strategy:
1. Unit tests for individual components (models, calculations, rules)
2. Integration tests for flows (with in-memory storage)
3. No real API calls in tests (Google Sheets is never contacted)
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from cost_genie.models.cost import (
    CostEntry,
    CostEntryUpdate,
    CostTag,
    Frequency,
    ProfileUpdate,
    TimeBucket,
    UserProfile,
)
from cost_genie.models.analysis import (
    Advisory,
    AdvisoryTier,
    AnalysisStatus,
    DashboardView,
    IncomeBase,
    IncomeBasis,
)
from cost_genie.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from cost_genie.models.preferences import ThemePreference, resolve_theme


class TestCostModels:
    """Tests for cost record Pydantic models."""

    def test_cost_entry_creation(self):
        """Test CostEntry model creation with defaults."""
        entry = CostEntry(
            user_id="alice",
            description="Morning coffee",
            amount=Decimal("4.50"),
            frequency=Frequency.DAILY,
        )
        assert entry.amount == Decimal("4.50")
        assert entry.favorite is False
        assert entry.need is False
        assert entry.created_at.tzinfo is not None

    def test_cost_entry_strips_whitespace(self):
        """Test that whitespace is stripped from the description."""
        entry = CostEntry(
            user_id="alice",
            description="  Rent  ",
            amount=Decimal("1200"),
            frequency=Frequency.MONTHLY,
        )
        assert entry.description == "Rent"

    def test_cost_entry_accepts_float_amount(self):
        """Floats are converted to Decimal."""
        entry = CostEntry(
            user_id="alice",
            description="Snack",
            amount=2.5,
            frequency=Frequency.ONCE,
        )
        assert entry.amount == Decimal("2.5")

    def test_cost_entry_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            CostEntry(
                user_id="alice",
                description="Refund",
                amount=Decimal("-1"),
                frequency=Frequency.ONCE,
            )

    def test_cost_entry_rejects_nan_amount(self):
        with pytest.raises(ValidationError):
            CostEntry(
                user_id="alice",
                description="Broken",
                amount=Decimal("NaN"),
                frequency=Frequency.ONCE,
            )

    def test_cost_entry_rejects_empty_description(self):
        with pytest.raises(ValidationError):
            CostEntry(
                user_id="alice",
                description="   ",
                amount=Decimal("1"),
                frequency=Frequency.ONCE,
            )

    def test_cost_entry_rejects_unknown_frequency(self):
        with pytest.raises(ValidationError):
            CostEntry(
                user_id="alice",
                description="Gym",
                amount=Decimal("30"),
                frequency="fortnightly",
            )

    def test_both_tags_allowed(self):
        """Storage-level model does not enforce want/need exclusivity."""
        entry = CostEntry(
            user_id="alice",
            description="Groceries",
            amount=Decimal("80"),
            frequency=Frequency.WEEKLY,
            favorite=True,
            need=True,
        )
        assert entry.has_tag(CostTag.FAVORITE)
        assert entry.has_tag(CostTag.NEED)

    def test_cost_entry_update_applies_only_set_fields(self):
        entry = CostEntry(
            user_id="alice",
            description="Gym",
            amount=Decimal("30"),
            frequency=Frequency.MONTHLY,
            need=True,
        )
        updated = CostEntryUpdate(amount=Decimal("35")).apply_to(entry)

        assert updated.amount == Decimal("35")
        assert updated.description == "Gym"
        assert updated.need is True
        assert updated.id == entry.id
        assert updated.created_at == entry.created_at
        assert entry.amount == Decimal("30")


class TestFrequency:
    """Tests for frequency values and their time buckets."""

    def test_frequency_values(self):
        assert [f.value for f in Frequency] == ["once", "daily", "weekly", "monthly", "yearly"]

    def test_once_maps_to_one_time_bucket(self):
        assert Frequency.ONCE.bucket is TimeBucket.ONE_TIME

    def test_recurring_frequencies_map_to_same_named_bucket(self):
        assert Frequency.DAILY.bucket is TimeBucket.DAILY
        assert Frequency.WEEKLY.bucket is TimeBucket.WEEKLY
        assert Frequency.MONTHLY.bucket is TimeBucket.MONTHLY
        assert Frequency.YEARLY.bucket is TimeBucket.YEARLY


class TestProfileModels:
    """Tests for income profile models."""

    def test_profile_creation(self):
        profile = UserProfile(
            user_id="alice",
            yearly_salary=Decimal("85000"),
            state="Oregon",
        )
        assert profile.yearly_salary == Decimal("85000")
        assert profile.state == "Oregon"

    def test_blank_state_becomes_none(self):
        profile = UserProfile(user_id="alice", yearly_salary=50000, state="  ")
        assert profile.state is None

    def test_profile_rejects_zero_salary(self):
        with pytest.raises(ValidationError):
            UserProfile(user_id="alice", yearly_salary=0)

    def test_profile_update_clears_state(self):
        profile = UserProfile(user_id="alice", yearly_salary=50000, state="Texas")
        updated = ProfileUpdate(state="").apply_to(profile)
        assert updated.state is None
        assert updated.yearly_salary == Decimal("50000")


class TestAnalysisModels:
    """Tests for derived analysis models."""

    def test_income_base_monthly_amount(self):
        income = IncomeBase(
            amount=Decimal("60000"),
            basis=IncomeBasis.GROSS,
            gross_income=Decimal("60000"),
        )
        assert income.monthly_amount == Decimal("5000")
        assert not income.is_after_tax

    def test_advisory_tier_priority_order(self):
        tiers = sorted(AdvisoryTier, key=lambda t: t.priority)
        assert tiers == [
            AdvisoryTier.DANGER,
            AdvisoryTier.WARNING,
            AdvisoryTier.INFO,
            AdvisoryTier.SUCCESS,
        ]

    def test_advisory_is_frozen(self):
        advisory = Advisory(
            id="x",
            tier=AdvisoryTier.INFO,
            title="Title",
            description="Description",
        )
        with pytest.raises(ValidationError):
            advisory.title = "Changed"

    def test_dashboard_view_ok(self):
        assert DashboardView(status=AnalysisStatus.OK).ok
        assert not DashboardView(status=AnalysisStatus.INCOME_NOT_SET).ok


class TestThemePreference:
    """Tests for display mode resolution."""

    def test_explicit_modes(self):
        assert resolve_theme(ThemePreference.LIGHT, system_prefers_dark=True) == "light"
        assert resolve_theme(ThemePreference.DARK) == "dark"

    def test_system_follows_environment(self):
        assert resolve_theme(ThemePreference.SYSTEM) == "light"
        assert resolve_theme(ThemePreference.SYSTEM, system_prefers_dark=True) == "dark"

    def test_accepts_string_value(self):
        assert resolve_theme("dark") == "dark"


class TestAuditModels:
    """Tests for audit event models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.COST_ADDED,
            description="Test event",
        )
        assert event.event_type == AuditEventType.COST_ADDED
        assert event.severity == AuditSeverity.INFO
        assert event.event_id is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        correlation_id = uuid4()
        event = AuditEvent(
            event_type=AuditEventType.COST_DELETED,
            description="Cost deleted",
            correlation_id=correlation_id,
        )
        log_dict = event.to_log_dict()

        assert log_dict["event_type"] == "cost_deleted"
        assert log_dict["correlation_id"] == str(correlation_id)
        assert "timestamp" in log_dict

    def test_audit_event_to_sheets_row(self):
        """Test conversion to sheets row."""
        event = AuditEvent(
            event_type=AuditEventType.PROFILE_SAVED,
            description="Profile saved",
            details={"state": "Texas"},
        )
        row = event.to_sheets_row()

        assert len(row) == 12
        assert row[2] == "profile_saved"
        assert row[9] == '{"state": "Texas"}'
        assert row[11] == "False"

    def test_audit_event_builder_cost_added(self):
        """Test AuditEventBuilder for cost added."""
        cost_id = uuid4()
        event = AuditEventBuilder.cost_added(
            user_id="alice",
            cost_id=cost_id,
            description="Rent",
            amount="1200",
            frequency="monthly",
        )

        assert event.event_type == AuditEventType.COST_ADDED
        assert event.entity_type == "cost"
        assert event.entity_id == str(cost_id)
        assert event.is_user_action is True
        assert event.details["frequency"] == "monthly"

    def test_audit_event_builder_tag_toggled(self):
        """Favorite and need toggles map to their own event types."""
        cost_id = uuid4()
        favorite = AuditEventBuilder.tag_toggled("alice", cost_id, "favorite", True)
        need = AuditEventBuilder.tag_toggled("alice", cost_id, "need", False)

        assert favorite.event_type == AuditEventType.FAVORITE_TOGGLED
        assert need.event_type == AuditEventType.NEED_TOGGLED
        assert need.details == {"tag": "need", "value": False}

    def test_audit_event_builder_calculation_rejected(self):
        event = AuditEventBuilder.calculation_rejected(
            user_id="alice",
            reason="InvalidIncomeBase",
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.error_message == "InvalidIncomeBase"
