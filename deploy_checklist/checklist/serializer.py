"""
Checklist Body Serializer

Renders a ChecklistDocument as the markdown body of the checklist issue.

The output is deterministic: the same document and format always give
byte-identical text, so an unchanged checklist produces an unchanged body.
"""

from deploy_checklist.checklist.markup import (
    ACCESSIBILITY_LABEL,
    BLOCK_SEPARATOR,
    BLOCKERS_HEADER,
    CHANGES_HEADER,
    COMPARE_CHANGES_LABEL,
    CRLF,
    QA_LABEL,
    RELEASE_VERSION_LABEL,
    checkbox,
)
from deploy_checklist.models.checklist import (
    ChecklistDocument,
    ChecklistEntry,
    ChecklistFormat,
)


def serialize_checklist(
    document: ChecklistDocument,
    checklist_format: ChecklistFormat,
) -> str:
    """Render the full issue body."""
    body = (
        f"{RELEASE_VERSION_LABEL} `{document.release_tag or ''}`{CRLF}"
        f"{COMPARE_CHANGES_LABEL} {checklist_format.compare_url}"
        f"{BLOCK_SEPARATOR}{CHANGES_HEADER}"
    )

    for entry in document.change_entries:
        body += BLOCK_SEPARATOR + render_entry(entry)

    # The blockers header sits one blank line further down than other blocks
    if document.blocker_entries is not None:
        body += BLOCK_SEPARATOR + CRLF + BLOCKERS_HEADER
        for entry in document.blocker_entries:
            body += BLOCK_SEPARATOR + render_entry(entry)

    body += f"{BLOCK_SEPARATOR}cc @{checklist_format.reviewer_team}{CRLF}"
    return body


def render_entry(entry: ChecklistEntry) -> str:
    """Render one bullet with its QA and Accessibility checkboxes."""
    return (
        f"- {entry.reference}{CRLF}"
        f"  - {checkbox(entry.qa_checked)} {QA_LABEL}{CRLF}"
        f"  - {checkbox(entry.accessibility_checked)} {ACCESSIBILITY_LABEL}"
    )
