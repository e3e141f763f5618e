"""
Change Source Services Package

Lists the pull requests merged between two release tags.
"""

from deploy_checklist.services.changes.interface import ChangeSourceInterface
from deploy_checklist.services.changes.git_log import (
    GitLogChangeSource,
    extract_pull_request_numbers,
)

__all__ = [
    "ChangeSourceInterface",
    "GitLogChangeSource",
    "extract_pull_request_numbers",
]
