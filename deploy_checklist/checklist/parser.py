"""
Checklist Body Parser

Recovers a ChecklistDocument from the markdown body of a checklist issue.

IMPORTANT: Parsing never fails. A missing or malformed body yields an empty
document, because the run must still be able to build a checklist from
scratch. The anomaly is logged, not raised.
"""

from typing import Optional, TypeVar

import structlog
from pydantic import ValidationError

from deploy_checklist.checklist.errors import ChecklistParseError
from deploy_checklist.checklist.markup import (
    BLOCKERS_HEADER,
    BULLET_RE,
    CHECKBOX_RE,
    LEGACY_BULLET_RE,
    RELEASE_VERSION_RE,
    is_closed_mark,
)
from deploy_checklist.models.checklist import (
    BlockerEntry,
    ChangeEntry,
    ChecklistDocument,
    ChecklistEntry,
)

logger = structlog.get_logger(__name__)

EntryT = TypeVar("EntryT", bound=ChecklistEntry)


def parse_checklist(
    body: Optional[str],
    issue_number: Optional[int] = None,
) -> ChecklistDocument:
    """
    Parse a checklist issue body.

    Args:
        body: Raw issue body, CRLF or LF terminated. None for no body.
        issue_number: Number of the issue the body belongs to.

    Returns:
        The parsed document, or an empty document carrying `issue_number`
        when the body is missing or does not look like a checklist.
    """
    if not body or not body.strip():
        return ChecklistDocument.empty(issue_number)

    try:
        return _parse(body, issue_number)
    except (ChecklistParseError, ValidationError) as e:
        logger.warning(
            "checklist_body_unparseable",
            issue_number=issue_number,
            error=str(e),
        )
        return ChecklistDocument.empty(issue_number)


def _parse(body: str, issue_number: Optional[int]) -> ChecklistDocument:
    text = body.replace("\r\n", "\n")

    match = RELEASE_VERSION_RE.search(text)
    if match is None:
        raise ChecklistParseError("Release version header not found")

    changes_text, header, blockers_text = text.partition(BLOCKERS_HEADER)

    return ChecklistDocument(
        release_tag=match.group("tag"),
        change_entries=_parse_entries(changes_text, ChangeEntry),
        blocker_entries=_parse_entries(blockers_text, BlockerEntry) if header else None,
        issue_number=issue_number,
    )


def _parse_entries(section: str, entry_cls: type[EntryT]) -> list[EntryT]:
    """
    Read one entry per bullet line.

    The first two indented checkbox lines after a bullet are its QA and
    Accessibility boxes; missing ones stay open. Repeated references keep
    their first occurrence.
    """
    entries: list[EntryT] = []
    seen: set[str] = set()
    reference: Optional[str] = None
    boxes: list[bool] = []

    def flush() -> None:
        if reference is None or reference in seen:
            return
        seen.add(reference)
        entries.append(entry_cls(
            reference=reference,
            qa_checked=boxes[0] if len(boxes) > 0 else False,
            accessibility_checked=boxes[1] if len(boxes) > 1 else False,
        ))

    for line in section.split("\n"):
        legacy = LEGACY_BULLET_RE.match(line)
        if legacy:
            flush()
            reference = legacy.group("reference")
            boxes = [is_closed_mark(legacy.group("mark"))]
            continue

        bullet = BULLET_RE.match(line)
        if bullet:
            flush()
            reference = bullet.group("reference")
            boxes = []
            continue

        box = CHECKBOX_RE.match(line)
        if box and reference is not None and len(boxes) < 2:
            boxes.append(is_closed_mark(box.group("mark")))

    flush()
    return entries
