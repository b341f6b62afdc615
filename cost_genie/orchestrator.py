"""
Main Orchestrator for Cost Genie

This module ties together storage, the calculation core and auditing,
and defines the end-to-end flows for:
1. Cost tracking (add → tag → edit → delete)
2. Income profile (save → update)
3. Analysis (single cost projection, financial summary + advisories)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Calculation errors never reach the presentation layer; they become
  an AnalysisStatus with a message the UI can show as-is
- Want/need exclusivity is applied here, never in storage
- Every mutation is audited
"""

from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

import structlog

from cost_genie.audit import AuditLogger, create_correlation_id
from cost_genie.calculations import (
    CalculationError,
    InvalidAmount,
    InvalidIncomeBase,
    normalize,
    resolve_income_base,
    summarize,
)
from cost_genie.config import get_settings
from cost_genie.models.analysis import (
    AnalysisStatus,
    CostAnalysisView,
    DashboardView,
)
from cost_genie.models.cost import (
    CostEntry,
    CostEntryUpdate,
    CostTag,
    Frequency,
    ProfileUpdate,
    UserProfile,
)
from cost_genie.recommendations import recommend
from cost_genie.services.storage import (
    AuditStorageInterface,
    CostStorageInterface,
    InMemoryAuditStorage,
    InMemoryCostStorage,
    InMemoryProfileStorage,
    NotFoundError,
    ProfileStorageInterface,
    StorageError,
)

logger = structlog.get_logger(__name__)

INCOME_NOT_SET_MESSAGE = "Set your yearly salary in your profile to see this analysis."
INVALID_INCOME_MESSAGE = "Your income must be greater than zero to calculate percentages."
INVALID_AMOUNT_MESSAGE = "Enter a cost of zero or more."


class CostTrackingFlow:
    """
    Orchestrates cost record changes.

    Flow:
    1. Add → validate via CostEntry, persist, audit
    2. Tag → toggle want/need, optionally keeping them exclusive
    3. Edit / Delete → persist, audit

    Storage errors propagate to the caller after being audited.
    """

    def __init__(
        self,
        cost_storage: CostStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        exclusive_tags: bool = True,
    ):
        self._cost_storage = cost_storage
        self._audit_logger = audit_logger
        self._exclusive_tags = exclusive_tags

    async def _storage_failed(
        self,
        operation: str,
        error: StorageError,
        user_id: Optional[str],
        correlation_id: UUID,
    ) -> None:
        if self._audit_logger:
            await self._audit_logger.log_storage_error(
                operation=operation,
                error_message=str(error),
                user_id=user_id,
                correlation_id=correlation_id,
            )

    async def add_cost(
        self,
        user_id: str,
        description: str,
        amount: Union[Decimal, int, float, str],
        frequency: Frequency,
        favorite: bool = False,
        need: bool = False,
        correlation_id: Optional[UUID] = None,
    ) -> CostEntry:
        """
        Record a new cost.

        Raises:
            pydantic.ValidationError: invalid description, amount or frequency
            StorageError: the backend refused the write
        """
        correlation_id = correlation_id or create_correlation_id()

        entry = CostEntry(
            user_id=user_id,
            description=description,
            amount=amount,
            frequency=frequency,
            favorite=favorite,
            need=need,
        )

        try:
            entry = await self._cost_storage.add_cost(entry)
        except StorageError as e:
            await self._storage_failed("add_cost", e, user_id, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_cost_added(
                user_id=user_id,
                cost_id=entry.id,
                description=entry.description,
                amount=str(entry.amount),
                frequency=entry.frequency.value,
                correlation_id=correlation_id,
            )

        return entry

    async def update_cost(
        self,
        cost_id: UUID,
        update: CostEntryUpdate,
        correlation_id: Optional[UUID] = None,
    ) -> CostEntry:
        """
        Apply an edit to an existing cost.

        Raises:
            NotFoundError: no cost with this ID
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            entry = await self._cost_storage.update_cost(cost_id, update)
        except StorageError as e:
            await self._storage_failed("update_cost", e, None, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_cost_updated(
                user_id=entry.user_id,
                cost_id=cost_id,
                changed_fields=sorted(update.model_dump(exclude_none=True)),
                correlation_id=correlation_id,
            )

        return entry

    async def delete_cost(
        self,
        cost_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Delete a cost.

        Returns False if it did not exist.
        """
        correlation_id = correlation_id or create_correlation_id()

        entry = await self._cost_storage.get_cost(cost_id)
        if entry is None:
            return False

        try:
            deleted = await self._cost_storage.delete_cost(cost_id)
        except StorageError as e:
            await self._storage_failed("delete_cost", e, entry.user_id, correlation_id)
            raise

        if deleted and self._audit_logger:
            await self._audit_logger.log_cost_deleted(
                user_id=entry.user_id,
                cost_id=cost_id,
                correlation_id=correlation_id,
            )

        return deleted

    async def toggle_tag(
        self,
        cost_id: UUID,
        tag: CostTag,
        correlation_id: Optional[UUID] = None,
    ) -> CostEntry:
        """
        Flip one tag of a cost.

        With exclusive tags on, switching a tag on switches the other
        one off. Switching a tag off never touches the other one.

        Raises:
            NotFoundError: no cost with this ID
        """
        correlation_id = correlation_id or create_correlation_id()
        tag = CostTag(tag)

        entry = await self._cost_storage.get_cost(cost_id)
        if entry is None:
            raise NotFoundError(f"Cost not found: {cost_id}")

        value = not entry.has_tag(tag)
        changes = {tag.value: value}

        other = CostTag.NEED if tag is CostTag.FAVORITE else CostTag.FAVORITE
        if value and self._exclusive_tags and entry.has_tag(other):
            changes[other.value] = False

        try:
            updated = await self._cost_storage.set_tags(cost_id, **changes)
        except StorageError as e:
            await self._storage_failed("set_tags", e, entry.user_id, correlation_id)
            raise

        if self._audit_logger:
            for changed_tag, changed_value in changes.items():
                await self._audit_logger.log_tag_toggled(
                    user_id=entry.user_id,
                    cost_id=cost_id,
                    tag=changed_tag,
                    value=changed_value,
                    correlation_id=correlation_id,
                )

        return updated

    async def toggle_favorite(
        self,
        cost_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> CostEntry:
        return await self.toggle_tag(cost_id, CostTag.FAVORITE, correlation_id)

    async def toggle_need(
        self,
        cost_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> CostEntry:
        return await self.toggle_tag(cost_id, CostTag.NEED, correlation_id)

    async def list_costs(
        self,
        user_id: str,
        favorite: Optional[bool] = None,
        need: Optional[bool] = None,
    ) -> list[CostEntry]:
        """A user's costs, newest first, optionally filtered by tag."""
        return await self._cost_storage.list_costs(user_id, favorite=favorite, need=need)


class ProfileFlow:
    """Orchestrates reads and writes of the income profile."""

    def __init__(
        self,
        profile_storage: ProfileStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._profile_storage = profile_storage
        self._audit_logger = audit_logger

    async def save_profile(
        self,
        user_id: str,
        yearly_salary: Union[Decimal, int, float, str],
        state: Optional[str] = None,
        email: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> UserProfile:
        """
        Create or replace a user's profile.

        Raises:
            pydantic.ValidationError: salary is not a positive number
        """
        correlation_id = correlation_id or create_correlation_id()

        profile = UserProfile(
            user_id=user_id,
            email=email,
            yearly_salary=yearly_salary,
            state=state,
        )
        profile = await self._profile_storage.save_profile(profile)

        if self._audit_logger:
            await self._audit_logger.log_profile_saved(
                user_id=user_id,
                state=profile.state,
                correlation_id=correlation_id,
            )

        return profile

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return await self._profile_storage.get_profile(user_id)

    async def update_profile(
        self,
        user_id: str,
        update: ProfileUpdate,
        correlation_id: Optional[UUID] = None,
    ) -> UserProfile:
        """
        Raises:
            NotFoundError: the user has no profile yet
        """
        correlation_id = correlation_id or create_correlation_id()

        profile = await self._profile_storage.update_profile(user_id, update)

        if self._audit_logger:
            await self._audit_logger.log_profile_updated(
                user_id=user_id,
                changed_fields=sorted(update.model_dump(exclude_none=True)),
                correlation_id=correlation_id,
            )

        return profile


class AnalysisFlow:
    """
    Orchestrates the read side: cost projections and the dashboard.

    CRITICAL BOUNDARIES:
    1. Income base resolved from the profile (after-tax or gross)
    2. Core calculations run on Decimal values only
    3. CalculationError is turned into an AnalysisStatus here

    Nothing in this flow writes user data.
    """

    def __init__(
        self,
        cost_storage: CostStorageInterface,
        profile_storage: ProfileStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        max_recommendations: Optional[int] = None,
    ):
        self._cost_storage = cost_storage
        self._profile_storage = profile_storage
        self._audit_logger = audit_logger
        self._max_recommendations = max_recommendations

    async def _rejected(
        self,
        user_id: Optional[str],
        error: CalculationError,
        correlation_id: UUID,
    ) -> None:
        if self._audit_logger:
            await self._audit_logger.log_calculation_rejected(
                user_id=user_id,
                reason=type(error).__name__,
                details={"error": str(error)},
                correlation_id=correlation_id,
            )

    async def analyze_cost(
        self,
        amount: Union[Decimal, int, float, str],
        profile: Optional[UserProfile],
        correlation_id: Optional[UUID] = None,
    ) -> CostAnalysisView:
        """
        Project a cost into every time bucket against the user's income.

        Used for the live preview while a cost is being entered, so the
        amount has not been validated by a CostEntry yet.
        """
        correlation_id = correlation_id or create_correlation_id()

        if profile is None:
            return CostAnalysisView(
                status=AnalysisStatus.INCOME_NOT_SET,
                message=INCOME_NOT_SET_MESSAGE,
            )

        income = resolve_income_base(profile.yearly_salary, profile.state)

        try:
            analysis = normalize(amount, income.amount)
        except InvalidAmount as e:
            await self._rejected(profile.user_id, e, correlation_id)
            return CostAnalysisView(
                status=AnalysisStatus.INVALID_AMOUNT,
                message=INVALID_AMOUNT_MESSAGE,
                income=income,
            )
        except InvalidIncomeBase as e:
            await self._rejected(profile.user_id, e, correlation_id)
            return CostAnalysisView(
                status=AnalysisStatus.INVALID_INCOME_BASE,
                message=INVALID_INCOME_MESSAGE,
                income=income,
            )

        return CostAnalysisView(
            status=AnalysisStatus.OK,
            analysis=analysis,
            income=income,
        )

    async def build_dashboard(
        self,
        user_id: str,
        max_recommendations: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> DashboardView:
        """
        Build the financial summary and advisories for a user.

        Args:
            user_id: Whose costs to summarize
            max_recommendations: Overrides the flow's default limit.
                                 None on both, or zero, means no limit.
        """
        correlation_id = correlation_id or create_correlation_id()
        limit = max_recommendations
        if limit is None:
            limit = self._max_recommendations

        profile = await self._profile_storage.get_profile(user_id)
        if profile is None:
            return DashboardView(
                status=AnalysisStatus.INCOME_NOT_SET,
                message=INCOME_NOT_SET_MESSAGE,
            )

        income = resolve_income_base(profile.yearly_salary, profile.state)
        if not income.is_after_tax and self._audit_logger:
            await self._audit_logger.log_tax_estimate_unavailable(
                user_id=user_id,
                state=profile.state,
                correlation_id=correlation_id,
            )

        needs = await self._cost_storage.list_costs(user_id, need=True)
        favorites = await self._cost_storage.list_costs(user_id, favorite=True)

        try:
            summary = summarize(needs, favorites, income)
        except InvalidIncomeBase as e:
            await self._rejected(user_id, e, correlation_id)
            return DashboardView(
                status=AnalysisStatus.INVALID_INCOME_BASE,
                message=INVALID_INCOME_MESSAGE,
            )
        except InvalidAmount as e:
            await self._rejected(user_id, e, correlation_id)
            return DashboardView(
                status=AnalysisStatus.INVALID_AMOUNT,
                message=INVALID_AMOUNT_MESSAGE,
            )

        advisories = recommend(summary.to_snapshot(), limit)

        if self._audit_logger:
            await self._audit_logger.log_dashboard_computed(
                user_id=user_id,
                basis=income.basis.value,
                advisory_ids=[a.id for a in advisories],
                correlation_id=correlation_id,
            )

        return DashboardView(
            status=AnalysisStatus.OK,
            summary=summary,
            advisories=advisories,
        )


def _create_storage(
    backend: str,
) -> tuple[CostStorageInterface, ProfileStorageInterface, AuditStorageInterface]:
    if backend == "google_sheets":
        # gspread is only needed when this backend is selected
        from cost_genie.services.storage.google_sheets import (
            GoogleSheetsAuditStorage,
            GoogleSheetsClient,
            GoogleSheetsCostStorage,
            GoogleSheetsProfileStorage,
        )

        client = GoogleSheetsClient()
        return (
            GoogleSheetsCostStorage(client),
            GoogleSheetsProfileStorage(client),
            GoogleSheetsAuditStorage(client),
        )

    return InMemoryCostStorage(), InMemoryProfileStorage(), InMemoryAuditStorage()


def create_app_components() -> tuple[CostTrackingFlow, ProfileFlow, AnalysisFlow]:
    """
    Factory function to create all application components.

    The storage backend comes from settings. If Google Sheets is selected
    but cannot be configured, falls back to in-memory storage.

    Returns:
        (cost_tracking_flow, profile_flow, analysis_flow)
    """
    app_settings = get_settings().app

    try:
        cost_storage, profile_storage, audit_storage = _create_storage(
            app_settings.storage_backend
        )
    except Exception as e:
        # Storage not configured - continue in memory
        logger.warning(
            "storage_not_configured",
            backend=app_settings.storage_backend,
            error=str(e),
        )
        cost_storage, profile_storage, audit_storage = _create_storage("memory")

    audit_logger = AuditLogger(audit_storage)

    cost_flow = CostTrackingFlow(
        cost_storage=cost_storage,
        audit_logger=audit_logger,
        exclusive_tags=app_settings.exclusive_tags,
    )
    profile_flow = ProfileFlow(
        profile_storage=profile_storage,
        audit_logger=audit_logger,
    )
    analysis_flow = AnalysisFlow(
        cost_storage=cost_storage,
        profile_storage=profile_storage,
        audit_logger=audit_logger,
        max_recommendations=app_settings.max_recommendations,
    )

    return cost_flow, profile_flow, analysis_flow
