"""
Audit Models for Cost Genie

Every change to a user's costs or income profile is recorded as an
audit event, along with calculations the core refused to run.

Audit logs are append-only. Events are never modified or deleted.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from cost_genie.models.cost import utcnow


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Cost records
    COST_ADDED = "cost_added"
    COST_UPDATED = "cost_updated"
    COST_DELETED = "cost_deleted"
    FAVORITE_TOGGLED = "favorite_toggled"
    NEED_TOGGLED = "need_toggled"

    # Income profile
    PROFILE_SAVED = "profile_saved"
    PROFILE_UPDATED = "profile_updated"

    # Calculations
    DASHBOARD_COMPUTED = "dashboard_computed"
    TAX_ESTIMATE_UNAVAILABLE = "tax_estimate_unavailable"
    CALCULATION_REJECTED = "calculation_rejected"

    # System events
    SYSTEM_ERROR = "system_error"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Who and what
    user_id: Optional[str] = Field(
        default=None,
        description="User whose data the event is about"
    )
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'cost', 'profile')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate the events of one user action"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, user_id, entity_type,
         entity_id, correlation_id, description, details_json,
         error_message, is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.user_id or "",
            self.entity_type or "",
            self.entity_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.cost_added(user_id, cost_id, "Rent", "1200", "monthly")
        event = AuditEventBuilder.tag_toggled(user_id, cost_id, "need", True)
    """

    @staticmethod
    def cost_added(
        user_id: str,
        cost_id: UUID,
        description: str,
        amount: str,
        frequency: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COST_ADDED,
            user_id=user_id,
            entity_type="cost",
            entity_id=str(cost_id),
            correlation_id=correlation_id,
            description=f"Cost added: {description} - {amount} ({frequency})",
            details={
                "amount": amount,
                "frequency": frequency,
            },
            is_user_action=True,
        )

    @staticmethod
    def cost_updated(
        user_id: str,
        cost_id: UUID,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COST_UPDATED,
            user_id=user_id,
            entity_type="cost",
            entity_id=str(cost_id),
            correlation_id=correlation_id,
            description=f"Cost updated: {', '.join(changed_fields) or 'no changes'}",
            details={"changed_fields": changed_fields},
            is_user_action=True,
        )

    @staticmethod
    def cost_deleted(
        user_id: str,
        cost_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COST_DELETED,
            user_id=user_id,
            entity_type="cost",
            entity_id=str(cost_id),
            correlation_id=correlation_id,
            description="Cost deleted",
            is_user_action=True,
        )

    @staticmethod
    def tag_toggled(
        user_id: str,
        cost_id: UUID,
        tag: str,
        value: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        event_type = (
            AuditEventType.FAVORITE_TOGGLED
            if tag == "favorite"
            else AuditEventType.NEED_TOGGLED
        )
        return AuditEvent(
            event_type=event_type,
            user_id=user_id,
            entity_type="cost",
            entity_id=str(cost_id),
            correlation_id=correlation_id,
            description=f"Cost {'marked' if value else 'unmarked'} as {tag}",
            details={"tag": tag, "value": value},
            is_user_action=True,
        )

    @staticmethod
    def profile_saved(
        user_id: str,
        state: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_SAVED,
            user_id=user_id,
            entity_type="profile",
            entity_id=user_id,
            correlation_id=correlation_id,
            description="Income profile saved",
            details={"state": state},
            is_user_action=True,
        )

    @staticmethod
    def profile_updated(
        user_id: str,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_UPDATED,
            user_id=user_id,
            entity_type="profile",
            entity_id=user_id,
            correlation_id=correlation_id,
            description=f"Income profile updated: {', '.join(changed_fields) or 'no changes'}",
            details={"changed_fields": changed_fields},
            is_user_action=True,
        )

    @staticmethod
    def dashboard_computed(
        user_id: str,
        basis: str,
        advisory_ids: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DASHBOARD_COMPUTED,
            severity=AuditSeverity.DEBUG,
            user_id=user_id,
            entity_type="summary",
            correlation_id=correlation_id,
            description=f"Summary computed against {basis} income with {len(advisory_ids)} advisories",
            details={"basis": basis, "advisories": advisory_ids},
        )

    @staticmethod
    def tax_estimate_unavailable(
        user_id: str,
        state: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TAX_ESTIMATE_UNAVAILABLE,
            severity=AuditSeverity.INFO,
            user_id=user_id,
            entity_type="profile",
            entity_id=user_id,
            correlation_id=correlation_id,
            description=(
                f"No tax rate for state {state!r}; using gross income"
                if state
                else "No state selected; using gross income"
            ),
            details={"state": state},
        )

    @staticmethod
    def calculation_rejected(
        user_id: Optional[str],
        reason: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CALCULATION_REJECTED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Calculation rejected: {reason}",
            error_message=reason,
            details=details or {},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
            correlation_id=correlation_id,
        )
