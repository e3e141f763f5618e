"""
Main Orchestrator for the Deploy Checklist

Ties the components together into one run:
1. Collect  (open checklist, last published tag, merged PRs, open blockers)
2. Reconcile (parse → merge → serialize, all pure)
3. Publish  (update the open checklist, or create a new one)

DESIGN DECISION: The orchestrator enforces the ordering boundaries:
- Every read happens before the reconciler runs
- The create/update call is the last step, so a failed read never leaves
  a half-written checklist behind
- Every step is audited
"""

from datetime import date
from typing import Awaitable, Callable, Optional, TypeVar, Union

from deploy_checklist.audit import AuditLogger
from deploy_checklist.checklist import (
    ChecklistConfigurationError,
    parse_checklist,
    reconcile,
    serialize_checklist,
    summarize_reconciliation,
)
from deploy_checklist.config import (
    ChecklistSettings,
    GitHubSettings,
    build_checklist_format,
    get_settings,
)
from deploy_checklist.models.checklist import (
    BlockerEntry,
    ChecklistDocument,
    CreateIssuePayload,
    ReleaseInputs,
    TrackedIssue,
    UpdateIssuePayload,
)
from deploy_checklist.services.changes import (
    ChangeSourceInterface,
    GitLogChangeSource,
)
from deploy_checklist.services.tracker import (
    GitHubIssueTracker,
    IssueTrackerInterface,
    TrackerError,
)

T = TypeVar("T")

RunResult = Union[CreateIssuePayload, UpdateIssuePayload]


class StagingDeployFlow:
    """
    Orchestrates one create-or-update run of the staging deploy checklist.

    The open checklist is the newest issue carrying the checklist label,
    if it is open. The last published checklist is the newest closed one;
    its tag is where the list of merged pull requests starts.
    """

    def __init__(
        self,
        tracker: IssueTrackerInterface,
        change_source: ChangeSourceInterface,
        github_settings: Optional[GitHubSettings] = None,
        checklist_settings: Optional[ChecklistSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        today: Callable[[], date] = date.today,
    ):
        self._tracker = tracker
        self._change_source = change_source
        self._github = github_settings or get_settings().github
        self._checklist = checklist_settings or get_settings().checklist
        self._audit_logger = audit_logger or AuditLogger()
        self._today = today
        self._format = build_checklist_format(self._github, self._checklist)

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def pull_request_url(self, number: int) -> str:
        return f"{self._github.server_url}/{self._github.repository}/pull/{number}"

    async def _tracker_call(self, operation: str, call: Awaitable[T]) -> T:
        """Await a tracker call, auditing the failure before re-raising it."""
        try:
            return await call
        except TrackerError as e:
            await self._audit_logger.log_tracker_error(operation, str(e))
            raise

    async def find_checklists(
        self,
    ) -> tuple[Optional[TrackedIssue], Optional[TrackedIssue]]:
        """
        Locate the checklist issues.

        Returns:
            (open_checklist, last_published_checklist)
        """
        issues = await self._tracker_call(
            "list_checklists",
            self._tracker.list_issues(self._checklist.label, state="all"),
        )
        issues = [issue for issue in issues if not issue.is_pull_request]

        current = issues[0] if issues and issues[0].is_open else None
        published = next((issue for issue in issues if not issue.is_open), None)
        return current, published

    async def _load_previous(self, current: Optional[TrackedIssue]) -> ChecklistDocument:
        if current is None:
            previous = ChecklistDocument.empty()
        else:
            previous = parse_checklist(current.body, issue_number=current.number)
            if previous.is_empty and current.body.strip():
                await self._audit_logger.log_body_unparseable(
                    issue_number=current.number,
                    reason="Open checklist body is not in checklist format",
                )

        await self._audit_logger.log_previous_checklist_loaded(
            issue_number=previous.issue_number,
            release_tag=previous.release_tag,
            change_count=len(previous.change_entries),
            blocker_count=len(previous.blocker_entries or []),
        )
        return previous

    async def _collect_change_references(
        self,
        from_tag: Optional[str],
        to_tag: str,
    ) -> list[str]:
        numbers = []
        if from_tag:
            numbers = await self._change_source.list_merged_references(from_tag, to_tag)

        if numbers and self._checklist.automation_login:
            automated = await self._tracker_call(
                "list_automated_pull_requests",
                self._tracker.list_pull_requests_by_author(self._checklist.automation_login),
            )
            skipped = {
                pr.number
                for pr in automated
                if pr.title.startswith(self._checklist.version_bump_title_prefix)
            }
            numbers = [number for number in numbers if number not in skipped]

        references = [self.pull_request_url(number) for number in sorted(set(numbers))]
        await self._audit_logger.log_changes_collected(from_tag, to_tag, references)
        return references

    async def _collect_blockers(self) -> list[BlockerEntry]:
        open_blockers = await self._tracker_call(
            "list_deploy_blockers",
            self._tracker.list_issues(self._checklist.blocker_label, state="open"),
        )
        blockers = [
            BlockerEntry(reference=item.html_url)
            for item in open_blockers
            if item.is_open
        ]
        await self._audit_logger.log_blockers_collected(
            [blocker.reference for blocker in blockers]
        )
        return blockers

    async def collect_inputs(self, release_tag: Optional[str] = None) -> ReleaseInputs:
        """
        Gather everything the reconciler needs.

        Raises:
            ChecklistConfigurationError: No tag was requested and there is
                no open checklist to take one from.
            TrackerError: A tracker call failed.
        """
        current, published = await self.find_checklists()
        previous = await self._load_previous(current)

        target_tag = release_tag or previous.release_tag
        if not target_tag:
            raise ChecklistConfigurationError(
                "No release version given and no open checklist to take it from"
            )

        from_tag = parse_checklist(published.body).release_tag if published else None

        return ReleaseInputs(
            previous=previous,
            current_issue=current,
            release_tag=target_tag,
            from_tag=from_tag,
            change_references=await self._collect_change_references(from_tag, target_tag),
            blockers=await self._collect_blockers(),
        )

    async def build_checklist(self, inputs: ReleaseInputs) -> tuple[ChecklistDocument, str]:
        """
        Reconcile the collected inputs and render the new body.

        Returns:
            (document, body)
        """
        document = reconcile(
            inputs.previous,
            inputs.change_references,
            inputs.blockers,
            release_tag=inputs.release_tag,
        )
        added, dropped = summarize_reconciliation(inputs.previous, document)
        await self._audit_logger.log_checklist_reconciled(
            release_tag=document.release_tag,
            added=added,
            dropped=dropped,
        )
        return document, serialize_checklist(document, self._format)

    async def publish(self, document: ChecklistDocument, body: str) -> RunResult:
        """
        Update the open checklist, or create one when none is open.
        """
        if document.issue_number is not None:
            published = await self._tracker_call(
                "update_checklist",
                self._tracker.update_issue(document.issue_number, body),
            )
            await self._audit_logger.log_checklist_updated(
                issue_number=published.number,
                html_url=published.html_url,
                entry_count=len(document.change_entries) + len(document.blocker_entries or []),
            )
            return UpdateIssuePayload(
                owner=self._github.owner,
                repo=self._github.repo,
                issue_number=published.number,
                body=body,
                html_url=published.html_url,
            )

        title = self._checklist.title_for(self._today().strftime("%Y-%m-%d"))
        labels = [self._checklist.label]
        assignees = self._checklist.assignee_list
        published = await self._tracker_call(
            "create_checklist",
            self._tracker.create_issue(title, body, labels, assignees),
        )
        await self._audit_logger.log_checklist_created(
            issue_number=published.number,
            html_url=published.html_url,
            title=title,
        )
        return CreateIssuePayload(
            owner=self._github.owner,
            repo=self._github.repo,
            title=title,
            body=body,
            labels=labels,
            assignees=assignees,
            issue_number=published.number,
            html_url=published.html_url,
        )

    async def run(self, release_tag: Optional[str] = None) -> RunResult:
        """
        Run the whole flow.

        Returns:
            The create or update payload sent to the tracker.
        """
        await self._audit_logger.log_run_started(release_tag)
        inputs = await self.collect_inputs(release_tag)
        document, body = await self.build_checklist(inputs)
        return await self.publish(document, body)


def create_staging_deploy_flow(
    repo_path: Optional[str] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> StagingDeployFlow:
    """
    Factory function wiring the GitHub tracker and the git change source.

    Args:
        repo_path: Local checkout to read merged pull requests from.
            Defaults to the configured repo path.
    """
    return StagingDeployFlow(
        tracker=GitHubIssueTracker(),
        change_source=GitLogChangeSource(repo_path=repo_path),
        audit_logger=audit_logger,
    )
