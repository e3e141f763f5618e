"""
Configuration Management for the Deploy Checklist

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here. The variables a
GitHub Actions runner already exports (GITHUB_TOKEN, GITHUB_REPOSITORY,
GITHUB_API_URL) are read under their usual names.
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from deploy_checklist.models.checklist import ChecklistFormat


class GitHubSettings(BaseSettings):
    """GitHub REST API configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GITHUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    token: str = Field(
        ...,
        min_length=1,
        description="Token used to authenticate against the GitHub API"
    )
    repository: str = Field(
        ...,
        description="Repository in owner/name form"
    )
    api_url: str = Field(
        default="https://api.github.com",
        description="Base URL of the GitHub REST API"
    )
    server_url: str = Field(
        default="https://github.com",
        description="Base URL of the GitHub web UI"
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout for a single API request"
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for idempotent read requests"
    )

    @field_validator('repository')
    @classmethod
    def validate_repository(cls, v: str) -> str:
        """Repository must look like owner/name."""
        owner, sep, name = v.strip().partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"Repository must be in owner/name form, got {v!r}")
        return f"{owner}/{name}"

    @field_validator('api_url', 'server_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.repository.split("/", 1)[1]


class ChecklistSettings(BaseSettings):
    """Labels, mentions and titles of the checklist issue."""

    model_config = SettingsConfigDict(
        env_prefix="CHECKLIST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    label: str = Field(
        default="StagingDeployCash",
        description="Label identifying checklist issues"
    )
    blocker_label: str = Field(
        default="DeployBlockerCash",
        description="Label identifying deploy blockers"
    )
    reviewer_team: str = Field(
        default="Expensify/applauseleads",
        description="Team mentioned at the bottom of the checklist"
    )
    assignees: str = Field(
        default="applausebot",
        description="Comma-separated logins assigned to a new checklist"
    )
    app_name: str = Field(
        default="New Expensify",
        description="Application name used in the checklist title"
    )
    compare_base: str = Field(
        default="production",
        description="Base ref of the compare link"
    )
    compare_head: str = Field(
        default="staging",
        description="Head ref of the compare link"
    )
    automation_login: str = Field(
        default="OSBotify",
        description="Account whose version-bump pull requests are left out"
    )
    version_bump_title_prefix: str = Field(
        default="Update version to",
        description="Title prefix of automated version-bump pull requests"
    )

    @property
    def assignee_list(self) -> list[str]:
        """Get assignees as a list."""
        return [login.strip() for login in self.assignees.split(",") if login.strip()]

    def title_for(self, day: str) -> str:
        return f"Deploy Checklist: {self.app_name} {day}"


class AppSettings(BaseSettings):
    """
    Run-level settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    release_version: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("RELEASE_VERSION", "NPM_VERSION"),
        description="Version tag of the release being deployed to staging"
    )
    repo_path: str = Field(
        default=".",
        description="Path of the git checkout used to list merged pull requests"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    @field_validator('release_version')
    @classmethod
    def blank_version_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Loaded lazily so a missing token only fails the parts that need it

    @property
    def github(self) -> GitHubSettings:
        return GitHubSettings()

    @property
    def checklist(self) -> ChecklistSettings:
        return ChecklistSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def build_checklist_format(
    github: GitHubSettings,
    checklist: ChecklistSettings,
) -> ChecklistFormat:
    """Snapshot the rendering parameters of the checklist body."""
    compare_url = (
        f"{github.server_url}/{github.repository}/compare/"
        f"{checklist.compare_base}...{checklist.compare_head}"
    )
    return ChecklistFormat(
        compare_url=compare_url,
        reviewer_team=checklist.reviewer_team,
    )


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an
    `<name>_error` entry for each failure. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("github", "checklist", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
