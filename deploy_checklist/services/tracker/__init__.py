"""
Issue Tracker Services Package

Provides the abstract tracker interface and its GitHub implementation.
"""

from deploy_checklist.services.tracker.interface import (
    IssueTrackerInterface,
    TrackerAuthError,
    TrackerError,
    TrackerNotFoundError,
)
from deploy_checklist.services.tracker.github import (
    GitHubClient,
    GitHubIssueTracker,
)

__all__ = [
    # Interfaces
    "IssueTrackerInterface",
    # Exceptions
    "TrackerAuthError",
    "TrackerError",
    "TrackerNotFoundError",
    # GitHub implementation
    "GitHubClient",
    "GitHubIssueTracker",
]
