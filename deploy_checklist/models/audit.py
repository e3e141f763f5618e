"""
Audit Models for the Deploy Checklist

Every milestone of a checklist run is recorded as an AuditEvent so a CI log
shows exactly what the automation saw and what it wrote.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Each step of the collect → reconcile → publish pipeline has its own type.
    """
    # Input collection
    RUN_STARTED = "run_started"
    PREVIOUS_CHECKLIST_LOADED = "previous_checklist_loaded"
    CHECKLIST_BODY_UNPARSEABLE = "checklist_body_unparseable"
    CHANGES_COLLECTED = "changes_collected"
    BLOCKERS_COLLECTED = "blockers_collected"

    # Reconciliation
    CHECKLIST_RECONCILED = "checklist_reconciled"

    # Publishing
    CHECKLIST_CREATED = "checklist_created"
    CHECKLIST_UPDATED = "checklist_updated"

    # Failures
    TRACKER_ERROR = "tracker_error"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    Events of one run share a correlation id.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
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

    # Context - which tracker item is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'checklist', 'release')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Identifier of the entity (issue number, release tag)"
    )

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one checklist run"
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

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.run_started("1.0.2-1", correlation_id)
        event = AuditEventBuilder.checklist_updated(29, url, 5, correlation_id)
    """

    @staticmethod
    def run_started(
        release_tag: Optional[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RUN_STARTED,
            entity_type="release",
            entity_id=release_tag,
            correlation_id=correlation_id,
            description=f"Checklist run started for release {release_tag or '(unspecified)'}",
            details={"requested_tag": release_tag},
        )

    @staticmethod
    def previous_checklist_loaded(
        issue_number: Optional[int],
        release_tag: Optional[str],
        change_count: int,
        blocker_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        if issue_number is None:
            description = "No open checklist found, starting from an empty document"
        else:
            description = f"Loaded open checklist #{issue_number}"
        return AuditEvent(
            event_type=AuditEventType.PREVIOUS_CHECKLIST_LOADED,
            entity_type="checklist",
            entity_id=str(issue_number) if issue_number else None,
            correlation_id=correlation_id,
            description=description,
            details={
                "release_tag": release_tag,
                "change_count": change_count,
                "blocker_count": blocker_count,
            },
        )

    @staticmethod
    def checklist_body_unparseable(
        issue_number: Optional[int],
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHECKLIST_BODY_UNPARSEABLE,
            severity=AuditSeverity.WARNING,
            entity_type="checklist",
            entity_id=str(issue_number) if issue_number else None,
            correlation_id=correlation_id,
            description="Checklist body could not be parsed, using an empty document",
            error_message=reason,
        )

    @staticmethod
    def changes_collected(
        from_tag: Optional[str],
        to_tag: str,
        references: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHANGES_COLLECTED,
            entity_type="release",
            entity_id=to_tag,
            correlation_id=correlation_id,
            description=f"Collected {len(references)} merged pull requests",
            details={
                "from_tag": from_tag,
                "to_tag": to_tag,
                "references": references,
            },
        )

    @staticmethod
    def blockers_collected(
        references: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BLOCKERS_COLLECTED,
            entity_type="release",
            correlation_id=correlation_id,
            description=f"Collected {len(references)} open deploy blockers",
            details={"references": references},
        )

    @staticmethod
    def checklist_reconciled(
        release_tag: Optional[str],
        added: list[str],
        dropped: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHECKLIST_RECONCILED,
            entity_type="release",
            entity_id=release_tag,
            correlation_id=correlation_id,
            description=f"Reconciled checklist: {len(added)} added, {len(dropped)} dropped",
            details={"added": added, "dropped": dropped},
        )

    @staticmethod
    def checklist_created(
        issue_number: int,
        html_url: str,
        title: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHECKLIST_CREATED,
            entity_type="checklist",
            entity_id=str(issue_number),
            correlation_id=correlation_id,
            description=f"Created checklist #{issue_number}",
            details={"html_url": html_url, "title": title},
        )

    @staticmethod
    def checklist_updated(
        issue_number: int,
        html_url: str,
        entry_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CHECKLIST_UPDATED,
            entity_type="checklist",
            entity_id=str(issue_number),
            correlation_id=correlation_id,
            description=f"Updated checklist #{issue_number}",
            details={"html_url": html_url, "entry_count": entry_count},
        )

    @staticmethod
    def tracker_error(
        operation: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRACKER_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Issue tracker call failed: {operation}",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"System error: {error_type}",
            details={"error_type": error_type},
            error_message=error_message,
        )
