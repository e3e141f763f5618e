"""
Checklist Reconciler

Merges freshly observed references into the previously published checklist.

CRITICAL: Human progress is never reset. A reference that is already on the
checklist keeps the checkbox states recorded there, whatever the incoming
data says. Only references seen for the first time take the incoming state.

Per entry list:
1. Known references keep their recorded states and relative order
2. New references are appended in input order
3. References no longer in the incoming set are dropped
4. An empty blocker set means "no blockers section"

The reconciler does no I/O and never mutates its inputs.
"""

from typing import Iterable, Optional, TypeVar, Union

from deploy_checklist.models.checklist import (
    BlockerEntry,
    ChangeEntry,
    ChecklistDocument,
    ChecklistEntry,
)

EntryT = TypeVar("EntryT", bound=ChecklistEntry)


def reconcile(
    previous: ChecklistDocument,
    change_references: Iterable[str],
    blocker_references: Iterable[Union[BlockerEntry, str]] = (),
    release_tag: Optional[str] = None,
) -> ChecklistDocument:
    """
    Reconcile a checklist with the current state of the release.

    Args:
        previous: Document parsed from the open checklist (possibly empty).
        change_references: Every pull request merged between the last
            published tag and the target tag, not just the ones new since
            the last run.
        blocker_references: Open deploy blockers. Bare references start
            with both boxes open.
        release_tag: Target tag. None keeps the previous document's tag.

    Returns:
        A new document with the same issue number as `previous`.
    """
    incoming_changes = [ChangeEntry(reference=ref) for ref in change_references]
    incoming_blockers = [_as_blocker(item) for item in blocker_references]

    tag = release_tag.strip() if release_tag and release_tag.strip() else None

    return ChecklistDocument(
        release_tag=tag or previous.release_tag,
        change_entries=_merge(previous.change_entries, incoming_changes),
        blocker_entries=_merge(previous.blocker_entries or [], incoming_blockers) or None,
        issue_number=previous.issue_number,
    )


def _as_blocker(item: Union[BlockerEntry, str]) -> BlockerEntry:
    if isinstance(item, BlockerEntry):
        return item
    return BlockerEntry(reference=item)


def _merge(recorded: list[EntryT], incoming: list[EntryT]) -> list[EntryT]:
    wanted: dict[str, EntryT] = {}
    for entry in incoming:
        wanted.setdefault(entry.reference, entry)

    known = {entry.reference for entry in recorded}
    kept = [entry.model_copy() for entry in recorded if entry.reference in wanted]
    added = [entry for ref, entry in wanted.items() if ref not in known]
    return kept + added


def summarize_reconciliation(
    previous: ChecklistDocument,
    merged: ChecklistDocument,
) -> tuple[list[str], list[str]]:
    """
    Compare two documents.

    Returns:
        (added, dropped) references, change entries first then blockers.
    """
    added: list[str] = []
    dropped: list[str] = []
    sections = (
        (previous.references(), merged.references()),
        (previous.blocker_references(), merged.blocker_references()),
    )
    for before, after in sections:
        added.extend(ref for ref in after if ref not in set(before))
        dropped.extend(ref for ref in before if ref not in set(after))
    return added, dropped
