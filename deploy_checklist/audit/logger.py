"""
Audit Logger

Every milestone of a checklist run is logged as a structured JSON line, so
the CI log of a run is enough to reconstruct what the automation read from
the tracker and what it wrote back.

The audit logger:
- Renders events through structlog
- Keeps the events of the current run in memory for the run summary
- Supports correlation IDs to trace the events of one run
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from deploy_checklist.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditSeverity,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Configure stdlib logging and structlog for JSON output on stderr.

    Safe to call more than once; the last call wins.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )
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


configure_logging()


class AuditLogger:
    """
    Central audit logging service for one checklist run.
    """

    def __init__(self, correlation_id: Optional[UUID] = None):
        self._logger = structlog.get_logger("deploy_checklist.audit")
        self._events: list[AuditEvent] = []
        self.correlation_id = correlation_id or create_correlation_id()

    @property
    def events(self) -> list[AuditEvent]:
        """Events logged so far, oldest first."""
        return list(self._events)

    async def log(self, event: AuditEvent) -> None:
        """Log an audit event locally and remember it."""
        self._events.append(event)
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    async def log_run_started(self, release_tag: Optional[str]) -> None:
        """Log the start of a run."""
        await self.log(AuditEventBuilder.run_started(
            release_tag=release_tag,
            correlation_id=self.correlation_id,
        ))

    async def log_previous_checklist_loaded(
        self,
        issue_number: Optional[int],
        release_tag: Optional[str],
        change_count: int,
        blocker_count: int,
    ) -> None:
        await self.log(AuditEventBuilder.previous_checklist_loaded(
            issue_number=issue_number,
            release_tag=release_tag,
            change_count=change_count,
            blocker_count=blocker_count,
            correlation_id=self.correlation_id,
        ))

    async def log_body_unparseable(
        self,
        issue_number: Optional[int],
        reason: str,
    ) -> None:
        await self.log(AuditEventBuilder.checklist_body_unparseable(
            issue_number=issue_number,
            reason=reason,
            correlation_id=self.correlation_id,
        ))

    async def log_changes_collected(
        self,
        from_tag: Optional[str],
        to_tag: str,
        references: list[str],
    ) -> None:
        await self.log(AuditEventBuilder.changes_collected(
            from_tag=from_tag,
            to_tag=to_tag,
            references=references,
            correlation_id=self.correlation_id,
        ))

    async def log_blockers_collected(self, references: list[str]) -> None:
        await self.log(AuditEventBuilder.blockers_collected(
            references=references,
            correlation_id=self.correlation_id,
        ))

    async def log_checklist_reconciled(
        self,
        release_tag: Optional[str],
        added: list[str],
        dropped: list[str],
    ) -> None:
        await self.log(AuditEventBuilder.checklist_reconciled(
            release_tag=release_tag,
            added=added,
            dropped=dropped,
            correlation_id=self.correlation_id,
        ))

    async def log_checklist_created(
        self,
        issue_number: int,
        html_url: str,
        title: str,
    ) -> None:
        await self.log(AuditEventBuilder.checklist_created(
            issue_number=issue_number,
            html_url=html_url,
            title=title,
            correlation_id=self.correlation_id,
        ))

    async def log_checklist_updated(
        self,
        issue_number: int,
        html_url: str,
        entry_count: int,
    ) -> None:
        await self.log(AuditEventBuilder.checklist_updated(
            issue_number=issue_number,
            html_url=html_url,
            entry_count=entry_count,
            correlation_id=self.correlation_id,
        ))

    async def log_tracker_error(self, operation: str, error_message: str) -> None:
        """Log a failed tracker call."""
        await self.log(AuditEventBuilder.tracker_error(
            operation=operation,
            error_message=error_message,
            correlation_id=self.correlation_id,
        ))

    async def log_error(self, error_type: str, error_message: str) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            correlation_id=self.correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking the events of one run.
    """
    return uuid4()
