"""
Tests for configuration loading.
"""

import pytest

from deploy_checklist.config import (
    AppSettings,
    ChecklistSettings,
    GitHubSettings,
    build_checklist_format,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Run every test in an empty directory with no checklist variables set."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "GITHUB_TOKEN",
        "GITHUB_REPOSITORY",
        "GITHUB_API_URL",
        "GITHUB_SERVER_URL",
        "RELEASE_VERSION",
        "NPM_VERSION",
        "LOG_LEVEL",
        "CHECKLIST_ASSIGNEES",
        "CHECKLIST_LABEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestGitHubSettings:
    """Tests for GitHubSettings."""

    def test_reads_actions_environment(self, monkeypatch):
        """Test the variables exported by a GitHub Actions runner."""
        monkeypatch.setenv("GITHUB_TOKEN", "fake_token")
        monkeypatch.setenv("GITHUB_REPOSITORY", "Expensify/App")
        monkeypatch.setenv("GITHUB_API_URL", "https://api.github.com/")

        settings = GitHubSettings()

        assert settings.token == "fake_token"
        assert settings.owner == "Expensify"
        assert settings.repo == "App"
        assert settings.api_url == "https://api.github.com"

    @pytest.mark.parametrize("repository", ["Expensify", "/App", "Expensify/", "a/b/c"])
    def test_repository_must_be_owner_slash_name(self, repository):
        with pytest.raises(ValueError, match="owner/name"):
            GitHubSettings(token="t", repository=repository)

    def test_token_required(self, monkeypatch):
        """Test that a missing token fails validation."""
        monkeypatch.setenv("GITHUB_REPOSITORY", "Expensify/App")
        with pytest.raises(ValueError):
            GitHubSettings()


class TestChecklistSettings:
    """Tests for ChecklistSettings."""

    def test_defaults(self):
        settings = ChecklistSettings()
        assert settings.label == "StagingDeployCash"
        assert settings.blocker_label == "DeployBlockerCash"
        assert settings.assignee_list == ["applausebot"]
        assert settings.title_for("2024-03-14") == "Deploy Checklist: New Expensify 2024-03-14"

    def test_assignees_from_environment(self, monkeypatch):
        """Test comma-separated assignees."""
        monkeypatch.setenv("CHECKLIST_ASSIGNEES", "applausebot, qa-lead ,")
        assert ChecklistSettings().assignee_list == ["applausebot", "qa-lead"]

    def test_checklist_format_snapshot(self):
        """Test the compare URL and mention built from settings."""
        checklist_format = build_checklist_format(
            GitHubSettings(token="t", repository="Expensify/App"),
            ChecklistSettings(),
        )
        assert checklist_format.compare_url == (
            "https://github.com/Expensify/App/compare/production...staging"
        )
        assert checklist_format.reviewer_team == "Expensify/applauseleads"


class TestAppSettings:
    """Tests for AppSettings."""

    def test_release_version_from_npm_version(self, monkeypatch):
        """Test the NPM_VERSION fallback name."""
        monkeypatch.setenv("NPM_VERSION", "1.0.2-1")
        assert AppSettings().release_version == "1.0.2-1"

    def test_blank_release_version_is_unset(self, monkeypatch):
        monkeypatch.setenv("RELEASE_VERSION", "  ")
        assert AppSettings().release_version is None

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        with pytest.raises(ValueError, match="Unknown log level"):
            AppSettings()


class TestValidateAllSettings:
    """Tests for the startup check."""

    def test_reports_missing_github_settings(self):
        results = validate_all_settings()
        assert results["github"] is False
        assert "github_error" in results
        assert results["checklist"] is True
        assert results["app"] is True

    def test_all_valid(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "fake_token")
        monkeypatch.setenv("GITHUB_REPOSITORY", "Expensify/App")
        results = validate_all_settings()
        assert results == {"github": True, "checklist": True, "app": True}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
