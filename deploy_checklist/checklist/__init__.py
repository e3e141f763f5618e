"""
Checklist Package

Parse, reconcile and serialize the body of a staging deploy checklist.
Everything here is pure: no I/O, no global state.
"""

from deploy_checklist.checklist.errors import (
    ChecklistConfigurationError,
    ChecklistParseError,
    DeployChecklistError,
)
from deploy_checklist.checklist.parser import parse_checklist
from deploy_checklist.checklist.reconciler import reconcile, summarize_reconciliation
from deploy_checklist.checklist.serializer import render_entry, serialize_checklist

__all__ = [
    # Exceptions
    "ChecklistConfigurationError",
    "ChecklistParseError",
    "DeployChecklistError",
    # Operations
    "parse_checklist",
    "reconcile",
    "render_entry",
    "serialize_checklist",
    "summarize_reconciliation",
]
