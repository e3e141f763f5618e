"""
Abstract Issue Tracker Interface

The checklist flow only talks to the tracker through this interface, so
tests can run against an in-memory tracker and the GitHub client stays the
only code that knows about REST endpoints.
"""

from abc import ABC, abstractmethod

from deploy_checklist.models.checklist import (
    PublishedIssue,
    PullRequestSummary,
    TrackedIssue,
)


class IssueTrackerInterface(ABC):
    """
    Abstract interface for issue tracker operations.
    """

    @abstractmethod
    async def list_issues(
        self,
        label: str,
        state: str = "all",
    ) -> list[TrackedIssue]:
        """
        List issues and pull requests carrying a label.

        Args:
            label: Label name to filter on
            state: "open", "closed" or "all"

        Returns:
            Matching items, most recently created first

        Raises:
            TrackerError: If the call fails
        """
        pass

    @abstractmethod
    async def create_issue(
        self,
        title: str,
        body: str,
        labels: list[str],
        assignees: list[str],
    ) -> PublishedIssue:
        """
        Create a new issue.

        Raises:
            TrackerError: If the call fails
        """
        pass

    @abstractmethod
    async def update_issue(self, number: int, body: str) -> PublishedIssue:
        """
        Replace the body of an existing issue.

        Raises:
            TrackerError: If the call fails
            TrackerNotFoundError: If the issue doesn't exist
        """
        pass

    @abstractmethod
    async def list_pull_requests_by_author(
        self,
        login: str,
    ) -> list[PullRequestSummary]:
        """
        List closed pull requests opened by an account.

        Used to leave automated pull requests out of the checklist.
        """
        pass


class TrackerError(Exception):
    """Base exception for issue tracker operations."""
    pass


class TrackerAuthError(TrackerError):
    """The tracker rejected our credentials."""
    pass


class TrackerNotFoundError(TrackerError):
    """Repository or issue not found on the tracker."""
    pass
