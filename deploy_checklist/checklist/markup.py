"""
Markup of the checklist issue body.

Shared by the parser and the serializer so both sides agree on every
header, marker and line terminator.
"""

import re

CRLF = "\r\n"
BLOCK_SEPARATOR = CRLF * 2

RELEASE_VERSION_LABEL = "**Release Version:**"
COMPARE_CHANGES_LABEL = "**Compare Changes:**"
CHANGES_HEADER = "**This release contains changes from the following pull requests:**"
BLOCKERS_HEADER = "**Deploy Blockers:**"

OPEN_CHECKBOX = "[ ]"
CLOSED_CHECKBOX = "[x]"
QA_LABEL = "QA"
ACCESSIBILITY_LABEL = "Accessibility"

RELEASE_VERSION_RE = re.compile(
    r"^\*\*Release Version:\*\*\s*`(?P<tag>[^`]*)`",
    re.MULTILINE,
)

# "- https://github.com/owner/repo/pull/6"
BULLET_RE = re.compile(r"^-\s+(?!\[[ xX]?\])(?P<reference>\S.*?)\s*$")

# "- [x] https://github.com/owner/repo/pull/6" (single-checkbox checklists)
LEGACY_BULLET_RE = re.compile(r"^-\s+\[(?P<mark>[ xX]?)\]\s+(?P<reference>\S.*?)\s*$")

# "  - [x] QA"
CHECKBOX_RE = re.compile(r"^\s+-\s+\[(?P<mark>[ xX]?)\]")


def is_closed_mark(mark: str) -> bool:
    return mark in ("x", "X")


def checkbox(checked: bool) -> str:
    return CLOSED_CHECKBOX if checked else OPEN_CHECKBOX
