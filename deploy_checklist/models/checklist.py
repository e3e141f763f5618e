"""
Core Data Models for the Deploy Checklist

These models define the structured form of a staging deploy checklist issue
and of the tracker records the automation reads and writes.

DESIGN DECISION: A checklist issue body is only ever handled as text at the
edges (parser and serializer). Everything in between works on these models,
so checkbox state is never inferred from string matching at a call site.
"""

from enum import Enum
from typing import Iterable, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS
# =============================================================================

class IssueState(str, Enum):
    """State of an issue or pull request on the tracker."""
    OPEN = "open"
    CLOSED = "closed"


# =============================================================================
# CHECKLIST ENTRIES
# =============================================================================

class ChecklistEntry(BaseModel):
    """
    One referenced item in the checklist with its two checkboxes.

    The reference (a pull request or issue URL) is the identity key and
    stays stable across regenerations of the checklist.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    reference: str = Field(
        ...,
        min_length=1,
        description="Canonical URL of the pull request or issue"
    )
    qa_checked: bool = Field(
        default=False,
        description="State of the 'QA' checkbox"
    )
    accessibility_checked: bool = Field(
        default=False,
        description="State of the 'Accessibility' checkbox"
    )

    @property
    def is_complete(self) -> bool:
        return self.qa_checked and self.accessibility_checked


class ChangeEntry(ChecklistEntry):
    """A merged pull request included in the release."""
    pass


class BlockerEntry(ChecklistEntry):
    """An open item labeled as blocking the deploy."""
    pass


def _ensure_unique(entries: Iterable[ChecklistEntry], section: str) -> None:
    seen: set[str] = set()
    for entry in entries:
        if entry.reference in seen:
            raise ValueError(
                f"Duplicate reference in {section}: {entry.reference}"
            )
        seen.add(entry.reference)


# =============================================================================
# CHECKLIST DOCUMENT
# =============================================================================

class ChecklistDocument(BaseModel):
    """
    The full reconciled state of one checklist issue.

    `blocker_entries` is None when the checklist has no blockers section.
    An empty list is normalized to None so there is exactly one way to
    say "no blockers".
    """

    release_tag: Optional[str] = Field(
        default=None,
        description="Version identifier of the release, e.g. 1.0.2-1"
    )
    change_entries: list[ChangeEntry] = Field(
        default_factory=list,
        description="Merged pull requests, in first-seen order"
    )
    blocker_entries: Optional[list[BlockerEntry]] = Field(
        default=None,
        description="Deploy blockers, or None when there is no blockers section"
    )
    issue_number: Optional[int] = Field(
        default=None,
        ge=1,
        description="Tracker issue number, absent until first publish"
    )

    @field_validator('release_tag')
    @classmethod
    def blank_tag_is_missing(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v

    @field_validator('blocker_entries')
    @classmethod
    def empty_blockers_is_no_section(
        cls,
        v: Optional[list[BlockerEntry]],
    ) -> Optional[list[BlockerEntry]]:
        return v or None

    @model_validator(mode='after')
    def validate_unique_references(self) -> 'ChecklistDocument':
        _ensure_unique(self.change_entries, "change entries")
        if self.blocker_entries:
            _ensure_unique(self.blocker_entries, "blocker entries")
        return self

    @classmethod
    def empty(cls, issue_number: Optional[int] = None) -> 'ChecklistDocument':
        return cls(issue_number=issue_number)

    @property
    def has_blockers(self) -> bool:
        return self.blocker_entries is not None

    @property
    def is_empty(self) -> bool:
        return (
            self.release_tag is None
            and not self.change_entries
            and self.blocker_entries is None
        )

    def references(self) -> list[str]:
        """References of the change entries, in order."""
        return [entry.reference for entry in self.change_entries]

    def blocker_references(self) -> list[str]:
        """References of the blocker entries, in order."""
        return [entry.reference for entry in self.blocker_entries or []]


class ChecklistFormat(BaseModel):
    """
    Read-only rendering parameters for the checklist body.

    Passed explicitly to the serializer; built once per run from settings.
    """
    model_config = ConfigDict(frozen=True)

    compare_url: str = Field(
        ...,
        min_length=1,
        description="URL comparing production and staging"
    )
    reviewer_team: str = Field(
        ...,
        min_length=1,
        description="Team mentioned at the bottom of the checklist (without @)"
    )

    @field_validator('reviewer_team')
    @classmethod
    def strip_mention_prefix(cls, v: str) -> str:
        return v.strip().lstrip("@")


# =============================================================================
# TRACKER RECORDS
# =============================================================================

class TrackedIssue(BaseModel):
    """An issue (or pull request) as returned by the issue tracker."""

    number: int = Field(..., ge=1)
    title: str = ""
    body: str = ""
    state: IssueState = IssueState.OPEN
    html_url: str
    labels: list[str] = Field(default_factory=list)
    is_pull_request: bool = False

    @field_validator('body', mode='before')
    @classmethod
    def none_body_is_empty(cls, v: Optional[str]) -> str:
        return v or ""

    @property
    def is_open(self) -> bool:
        return self.state == IssueState.OPEN


class PublishedIssue(BaseModel):
    """Result of a create or update call."""

    number: int = Field(..., ge=1)
    html_url: str


class PullRequestSummary(BaseModel):
    """Minimal pull request record, used to spot automated pull requests."""

    number: int = Field(..., ge=1)
    html_url: str
    title: str = ""
    author_login: Optional[str] = None


# =============================================================================
# RUN INPUTS AND RESULTS
# =============================================================================

class ReleaseInputs(BaseModel):
    """Everything a run gathers before it reconciles."""

    previous: ChecklistDocument = Field(
        default_factory=ChecklistDocument,
        description="Document parsed from the open checklist, or empty"
    )
    current_issue: Optional[TrackedIssue] = Field(
        default=None,
        description="The open checklist issue, if any"
    )
    release_tag: str = Field(
        ...,
        min_length=1,
        description="Tag of the release being prepared"
    )
    from_tag: Optional[str] = Field(
        default=None,
        description="Tag of the last published checklist"
    )
    change_references: list[str] = Field(default_factory=list)
    blockers: list[BlockerEntry] = Field(default_factory=list)


class CreateIssuePayload(BaseModel):
    """Observable result of a run that created a new checklist issue."""

    action: Literal["create"] = "create"
    owner: str
    repo: str
    title: str
    body: str
    labels: list[str]
    assignees: list[str] = Field(default_factory=list)
    issue_number: int
    html_url: str

    def to_output_dict(self) -> dict:
        return self.model_dump()


class UpdateIssuePayload(BaseModel):
    """Observable result of a run that updated the open checklist issue."""

    action: Literal["update"] = "update"
    owner: str
    repo: str
    issue_number: int
    body: str
    html_url: str

    def to_output_dict(self) -> dict:
        return self.model_dump()
