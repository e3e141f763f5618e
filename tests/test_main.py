"""
Tests for the CI entry point.
"""

import json

import pytest

from app import main as cli
from deploy_checklist.config import get_settings
from deploy_checklist.models.checklist import IssueState
from tests.conftest import (
    InMemoryIssueTracker,
    StaticChangeSource,
    checklist_body,
    issue,
    pr,
    tracked_checklist,
)


CLOSED_CHECKLIST = tracked_checklist(
    28,
    checklist_body("1.0.1-0", changes=[(pr(1), True, True)]),
    state=IssueState.CLOSED,
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("RELEASE_VERSION", "NPM_VERSION", "GITHUB_OUTPUT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def use_flow(monkeypatch, make_flow):
    """Make the CLI run against the given fakes."""
    def _use(tracker, change_source=None):
        captured = {}

        def factory(repo_path=None, audit_logger=None):
            captured["repo_path"] = repo_path
            return make_flow(tracker, change_source)

        monkeypatch.setattr(cli, "create_staging_deploy_flow", factory)
        return captured
    return _use


class TestMain:
    """Tests for main()."""

    def test_create_run_writes_step_outputs(self, use_flow, tmp_path):
        """Test a successful run and the GITHUB_OUTPUT lines it writes."""
        tracker = InMemoryIssueTracker(issues=[CLOSED_CHECKLIST])
        use_flow(tracker, StaticChangeSource({("1.0.1-0", "1.0.2-1"): [6]}))
        output_file = tmp_path / "outputs.txt"

        exit_code = cli.main([
            "--release-version", "1.0.2-1",
            "--output-file", str(output_file),
        ])

        assert exit_code == 0
        lines = output_file.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "action=create"
        assert lines[1] == "issue_number=29"
        assert lines[2] == f"html_url={issue(29)}"
        payload = json.loads(lines[3].split("=", 1)[1])
        assert payload["labels"] == ["StagingDeployCash"]
        assert payload["body"] == checklist_body("1.0.2-1", changes=[(pr(6), False, False)])

    def test_release_version_from_environment(self, use_flow, monkeypatch, tmp_path):
        """Test the NPM_VERSION fallback and the GITHUB_OUTPUT variable."""
        output_file = tmp_path / "github_output"
        monkeypatch.setenv("NPM_VERSION", "1.0.2-1")
        monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))
        tracker = InMemoryIssueTracker(issues=[CLOSED_CHECKLIST])
        use_flow(tracker)

        assert cli.main([]) == 0
        assert "`1.0.2-1`" in tracker.created[0]["body"]
        assert output_file.read_text(encoding="utf-8").startswith("action=create\n")

    def test_repo_path_passed_to_factory(self, use_flow):
        tracker = InMemoryIssueTracker(issues=[CLOSED_CHECKLIST])
        captured = use_flow(tracker)

        assert cli.main(["--release-version", "1.0.2-1", "--repo-path", "/src/App"]) == 0
        assert captured["repo_path"] == "/src/App"

    def test_tracker_failure_exits_non_zero(self, use_flow, tmp_path):
        """Test that a tracker error fails the run without writing outputs."""
        tracker = InMemoryIssueTracker(issues=[CLOSED_CHECKLIST], fail_on={"create_issue"})
        use_flow(tracker)
        output_file = tmp_path / "outputs.txt"

        exit_code = cli.main([
            "--release-version", "1.0.2-1",
            "--output-file", str(output_file),
        ])

        assert exit_code == 1
        assert not output_file.exists()

    def test_missing_release_version_exits_non_zero(self, use_flow):
        tracker = InMemoryIssueTracker(issues=[CLOSED_CHECKLIST])
        use_flow(tracker)

        assert cli.main([]) == 1
        assert tracker.created == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
