"""
Abstract Change Source Interface

A change source answers one question: which pull requests were merged
between two release tags?
"""

from abc import ABC, abstractmethod


class ChangeSourceInterface(ABC):
    """
    Abstract interface for listing merged pull requests.
    """

    @abstractmethod
    async def list_merged_references(
        self,
        from_tag: str,
        to_tag: str,
    ) -> list[int]:
        """
        List pull requests merged between two tags.

        Args:
            from_tag: Tag of the last published release
            to_tag: Tag of the release being prepared

        Returns:
            Pull request numbers in ascending order. An invalid range
            gives an empty list; this method does not raise.
        """
        pass
