"""Configuration package."""

from deploy_checklist.config.settings import (
    AppSettings,
    ChecklistSettings,
    GitHubSettings,
    Settings,
    build_checklist_format,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ChecklistSettings",
    "GitHubSettings",
    "Settings",
    "build_checklist_format",
    "get_settings",
    "validate_all_settings",
]
