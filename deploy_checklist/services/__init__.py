"""Services package."""

from deploy_checklist.services.changes import (
    ChangeSourceInterface,
    GitLogChangeSource,
)
from deploy_checklist.services.tracker import (
    GitHubClient,
    GitHubIssueTracker,
    IssueTrackerInterface,
    TrackerAuthError,
    TrackerError,
    TrackerNotFoundError,
)

__all__ = [
    # Change sources
    "ChangeSourceInterface",
    "GitLogChangeSource",
    # Issue tracker
    "GitHubClient",
    "GitHubIssueTracker",
    "IssueTrackerInterface",
    "TrackerAuthError",
    "TrackerError",
    "TrackerNotFoundError",
]
