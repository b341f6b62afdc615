"""
Data Models Package

This package contains all Pydantic models used in Cost Genie.
All data flowing through the system must conform to these schemas.
"""

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
    BucketProjection,
    CategoryTotals,
    CombinedTotals,
    CostAnalysis,
    CostAnalysisView,
    DashboardView,
    FinancialSummary,
    IncomeBase,
    IncomeBasis,
    SpendingSnapshot,
)
from cost_genie.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from cost_genie.models.preferences import ThemePreference, resolve_theme

__all__ = [
    # Cost and profile models
    "CostEntry",
    "CostEntryUpdate",
    "CostTag",
    "Frequency",
    "ProfileUpdate",
    "TimeBucket",
    "UserProfile",
    # Analysis models
    "Advisory",
    "AdvisoryTier",
    "AnalysisStatus",
    "BucketProjection",
    "CategoryTotals",
    "CombinedTotals",
    "CostAnalysis",
    "CostAnalysisView",
    "DashboardView",
    "FinancialSummary",
    "IncomeBase",
    "IncomeBasis",
    "SpendingSnapshot",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Preferences
    "ThemePreference",
    "resolve_theme",
]
