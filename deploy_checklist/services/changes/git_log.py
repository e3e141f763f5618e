"""
Git Log Change Source

Reads merged pull request numbers from the commit subjects between two
tags of a local checkout.

Two subject shapes are recognized:
- merge commits: "Merge pull request #123 from owner/branch"
- squash merges: "Fix the thing (#123)"
"""

import re
import subprocess
from pathlib import Path
from typing import Optional

import structlog

from deploy_checklist.config import get_settings
from deploy_checklist.services.changes.interface import ChangeSourceInterface

logger = structlog.get_logger(__name__)

MERGE_SUBJECT_RE = re.compile(r"^Merge pull request #(\d+)\b")
SQUASH_SUBJECT_RE = re.compile(r"\(#(\d+)\)\s*$")


def extract_pull_request_numbers(subjects: list[str]) -> list[int]:
    """Pull request numbers mentioned in commit subjects, ascending, unique."""
    numbers: set[int] = set()
    for subject in subjects:
        match = MERGE_SUBJECT_RE.match(subject) or SQUASH_SUBJECT_RE.search(subject)
        if match:
            numbers.add(int(match.group(1)))
    return sorted(numbers)


class GitLogChangeSource(ChangeSourceInterface):
    """
    Change source backed by `git log` in a local checkout.

    Any git failure (unknown tag, not a repository, git missing) is logged
    and reported as "no merged pull requests".
    """

    def __init__(
        self,
        repo_path: Optional[str] = None,
        timeout_seconds: float = 60.0,
    ):
        self._repo_path = Path(repo_path or get_settings().app.repo_path)
        self._timeout = timeout_seconds

    def _git_log_subjects(self, from_tag: str, to_tag: str) -> list[str]:
        result = subprocess.run(
            ["git", "log", "--format=%s", f"{from_tag}...{to_tag}"],
            cwd=self._repo_path,
            capture_output=True,
            text=True,
            check=True,
            timeout=self._timeout,
        )
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    async def list_merged_references(
        self,
        from_tag: str,
        to_tag: str,
    ) -> list[int]:
        if not from_tag or not to_tag:
            return []

        try:
            subjects = self._git_log_subjects(from_tag, to_tag)
        except subprocess.CalledProcessError as e:
            logger.warning(
                "git_log_failed",
                from_tag=from_tag,
                to_tag=to_tag,
                stderr=(e.stderr or "").strip(),
            )
            return []
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(
                "git_log_unavailable",
                from_tag=from_tag,
                to_tag=to_tag,
                error=str(e),
            )
            return []

        numbers = extract_pull_request_numbers(subjects)
        logger.info(
            "merged_pull_requests_listed",
            from_tag=from_tag,
            to_tag=to_tag,
            count=len(numbers),
        )
        return numbers
