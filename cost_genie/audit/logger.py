"""
Audit Logger

Every change to a user's data, and every calculation the core refused,
is logged:
1. Locally through structlog, at a level matching the event severity
2. To audit storage, when one is configured

A failing audit write is logged and reported, never raised: auditing
must not break the action being audited.
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from cost_genie.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from cost_genie.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and user visibility)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_cost_added(
        self,
        user_id: str,
        cost_id: UUID,
        description: str,
        amount: str,
        frequency: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.cost_added(
            user_id=user_id,
            cost_id=cost_id,
            description=description,
            amount=amount,
            frequency=frequency,
            correlation_id=correlation_id,
        ))

    async def log_cost_updated(
        self,
        user_id: str,
        cost_id: UUID,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.cost_updated(
            user_id=user_id,
            cost_id=cost_id,
            changed_fields=changed_fields,
            correlation_id=correlation_id,
        ))

    async def log_cost_deleted(
        self,
        user_id: str,
        cost_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.cost_deleted(
            user_id=user_id,
            cost_id=cost_id,
            correlation_id=correlation_id,
        ))

    async def log_tag_toggled(
        self,
        user_id: str,
        cost_id: UUID,
        tag: str,
        value: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a want/need flag change."""
        await self.log(AuditEventBuilder.tag_toggled(
            user_id=user_id,
            cost_id=cost_id,
            tag=tag,
            value=value,
            correlation_id=correlation_id,
        ))

    async def log_profile_saved(
        self,
        user_id: str,
        state: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.profile_saved(
            user_id=user_id,
            state=state,
            correlation_id=correlation_id,
        ))

    async def log_profile_updated(
        self,
        user_id: str,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.profile_updated(
            user_id=user_id,
            changed_fields=changed_fields,
            correlation_id=correlation_id,
        ))

    async def log_dashboard_computed(
        self,
        user_id: str,
        basis: str,
        advisory_ids: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.dashboard_computed(
            user_id=user_id,
            basis=basis,
            advisory_ids=advisory_ids,
            correlation_id=correlation_id,
        ))

    async def log_tax_estimate_unavailable(
        self,
        user_id: str,
        state: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.tax_estimate_unavailable(
            user_id=user_id,
            state=state,
            correlation_id=correlation_id,
        ))

    async def log_calculation_rejected(
        self,
        user_id: Optional[str],
        reason: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a calculation the core refused to run."""
        await self.log(AuditEventBuilder.calculation_rejected(
            user_id=user_id,
            reason=reason,
            details=details,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            user_id=user_id,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., saving a cost).
    Pass it through all subsequent operations.
    """
    return uuid4()
