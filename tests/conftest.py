"""
Shared fixtures and in-memory fakes.

No test talks to GitHub or runs git: the tracker and the change source are
replaced by the fakes below.
"""

from datetime import date
from typing import Optional

import pytest

from deploy_checklist.audit import AuditLogger
from deploy_checklist.config import ChecklistSettings, GitHubSettings
from deploy_checklist.models.checklist import (
    ChecklistFormat,
    IssueState,
    PublishedIssue,
    PullRequestSummary,
    TrackedIssue,
)
from deploy_checklist.orchestrator import StagingDeployFlow
from deploy_checklist.services.changes import ChangeSourceInterface
from deploy_checklist.services.tracker import IssueTrackerInterface, TrackerError


REPO_URL = "https://github.com/Expensify/App"
COMPARE_URL = f"{REPO_URL}/compare/production...staging"
CRLF = "\r\n"


def pr(number: int) -> str:
    return f"{REPO_URL}/pull/{number}"


def issue(number: int) -> str:
    return f"{REPO_URL}/issues/{number}"


def entry_text(reference: str, qa: bool = False, accessibility: bool = False) -> str:
    qa_box = "[x]" if qa else "[ ]"
    a11y_box = "[x]" if accessibility else "[ ]"
    return (
        f"- {reference}{CRLF}"
        f"  - {qa_box} QA{CRLF}"
        f"  - {a11y_box} Accessibility"
    )


def checklist_body(
    tag: str,
    changes: list[tuple[str, bool, bool]],
    blockers: Optional[list[tuple[str, bool, bool]]] = None,
) -> str:
    """Build a checklist body the way the serializer is expected to."""
    body = (
        f"**Release Version:** `{tag}`{CRLF}"
        f"**Compare Changes:** {COMPARE_URL}{CRLF}{CRLF}"
        "**This release contains changes from the following pull requests:**"
    )
    for reference, qa, a11y in changes:
        body += CRLF * 2 + entry_text(reference, qa, a11y)
    if blockers:
        body += CRLF * 3 + "**Deploy Blockers:**"
        for reference, qa, a11y in blockers:
            body += CRLF * 2 + entry_text(reference, qa, a11y)
    body += f"{CRLF * 2}cc @Expensify/applauseleads{CRLF}"
    return body


class InMemoryIssueTracker(IssueTrackerInterface):
    """Issue tracker fake keeping issues in a list, newest first."""

    def __init__(
        self,
        issues: Optional[list[TrackedIssue]] = None,
        automated_pull_requests: Optional[list[PullRequestSummary]] = None,
        fail_on: Optional[set[str]] = None,
    ):
        self.issues = list(issues or [])
        self.automated_pull_requests = list(automated_pull_requests or [])
        self.fail_on = fail_on or set()
        self.created: list[dict] = []
        self.updated: list[dict] = []

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise TrackerError(f"{operation} failed")

    async def list_issues(self, label: str, state: str = "all") -> list[TrackedIssue]:
        self._maybe_fail("list_issues")
        return [
            item for item in self.issues
            if label in item.labels and (state == "all" or item.state.value == state)
        ]

    async def create_issue(self, title, body, labels, assignees) -> PublishedIssue:
        self._maybe_fail("create_issue")
        number = max((item.number for item in self.issues), default=0) + 1
        html_url = issue(number)
        self.created.append({
            "title": title,
            "body": body,
            "labels": labels,
            "assignees": assignees,
        })
        self.issues.insert(0, TrackedIssue(
            number=number,
            title=title,
            body=body,
            html_url=html_url,
            labels=labels,
        ))
        return PublishedIssue(number=number, html_url=html_url)

    async def update_issue(self, number: int, body: str) -> PublishedIssue:
        self._maybe_fail("update_issue")
        self.updated.append({"number": number, "body": body})
        return PublishedIssue(number=number, html_url=issue(number))

    async def list_pull_requests_by_author(self, login: str) -> list[PullRequestSummary]:
        self._maybe_fail("list_pull_requests_by_author")
        return [
            item for item in self.automated_pull_requests
            if item.author_login == login
        ]


class StaticChangeSource(ChangeSourceInterface):
    """Change source fake answering from a {(from, to): [numbers]} table."""

    def __init__(self, ranges: Optional[dict[tuple[str, str], list[int]]] = None):
        self.ranges = ranges or {}
        self.calls: list[tuple[str, str]] = []

    async def list_merged_references(self, from_tag: str, to_tag: str) -> list[int]:
        self.calls.append((from_tag, to_tag))
        return list(self.ranges.get((from_tag, to_tag), []))


def tracked_checklist(
    number: int,
    body: str,
    state: IssueState = IssueState.OPEN,
) -> TrackedIssue:
    return TrackedIssue(
        number=number,
        title="Test StagingDeployCash",
        body=body,
        state=state,
        html_url=issue(number),
        labels=["StagingDeployCash"],
    )


def tracked_blocker(reference: str, number: int) -> TrackedIssue:
    return TrackedIssue(
        number=number,
        html_url=reference,
        labels=["DeployBlockerCash"],
        is_pull_request="/pull/" in reference,
    )


@pytest.fixture
def github_settings() -> GitHubSettings:
    return GitHubSettings(token="fake_token", repository="Expensify/App")


@pytest.fixture
def checklist_settings() -> ChecklistSettings:
    return ChecklistSettings()


@pytest.fixture
def checklist_format() -> ChecklistFormat:
    return ChecklistFormat(
        compare_url=COMPARE_URL,
        reviewer_team="Expensify/applauseleads",
    )


@pytest.fixture
def make_flow(github_settings, checklist_settings):
    """Build a StagingDeployFlow around the given fakes."""
    def _make(
        tracker: InMemoryIssueTracker,
        change_source: Optional[StaticChangeSource] = None,
    ) -> StagingDeployFlow:
        return StagingDeployFlow(
            tracker=tracker,
            change_source=change_source or StaticChangeSource(),
            github_settings=github_settings,
            checklist_settings=checklist_settings,
            audit_logger=AuditLogger(),
            today=lambda: date(2024, 3, 14),
        )
    return _make
