"""
Data Models Package

This package contains all Pydantic models used by the deploy checklist.
All data flowing between the tracker, the reconciler and the CLI conforms
to these schemas.
"""

from deploy_checklist.models.checklist import (
    BlockerEntry,
    ChangeEntry,
    ChecklistDocument,
    ChecklistEntry,
    ChecklistFormat,
    CreateIssuePayload,
    IssueState,
    PublishedIssue,
    PullRequestSummary,
    ReleaseInputs,
    TrackedIssue,
    UpdateIssuePayload,
)
from deploy_checklist.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Checklist models
    "BlockerEntry",
    "ChangeEntry",
    "ChecklistDocument",
    "ChecklistEntry",
    "ChecklistFormat",
    "CreateIssuePayload",
    "IssueState",
    "PublishedIssue",
    "PullRequestSummary",
    "ReleaseInputs",
    "TrackedIssue",
    "UpdateIssuePayload",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
