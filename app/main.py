"""
CI Entry Point for the Deploy Checklist

Runs one create-or-update pass of the staging deploy checklist. Meant to be
called from a GitHub Actions step:

    python -m app.main --release-version 1.0.2-1

The release version falls back to the RELEASE_VERSION / NPM_VERSION
environment variables; the token and repository come from GITHUB_TOKEN and
GITHUB_REPOSITORY.

The run result is written to the step outputs (GITHUB_OUTPUT), not printed.
Any failure exits non-zero with the error logged.
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Optional, Sequence, Union

import structlog
from pydantic import ValidationError

from deploy_checklist.audit import AuditLogger, configure_logging
from deploy_checklist.checklist import DeployChecklistError
from deploy_checklist.config import get_settings
from deploy_checklist.models.checklist import CreateIssuePayload, UpdateIssuePayload
from deploy_checklist.orchestrator import create_staging_deploy_flow
from deploy_checklist.services.tracker import TrackerError

logger = structlog.get_logger("deploy_checklist.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Create or update the staging deploy checklist issue.",
    )
    parser.add_argument(
        "--release-version",
        help="Tag of the release deployed to staging (defaults to RELEASE_VERSION/NPM_VERSION)",
    )
    parser.add_argument(
        "--repo-path",
        help="Git checkout used to list merged pull requests (defaults to REPO_PATH or '.')",
    )
    parser.add_argument(
        "--output-file",
        type=Path,
        help="File to append step outputs to (defaults to GITHUB_OUTPUT)",
    )
    return parser


def write_outputs(
    result: Union[CreateIssuePayload, UpdateIssuePayload],
    output_file: Optional[Path],
) -> None:
    """Append the run result to a GitHub Actions output file."""
    if output_file is None:
        return

    payload = json.dumps(result.to_output_dict(), separators=(",", ":"))
    lines = [
        f"action={result.action}",
        f"issue_number={result.issue_number}",
        f"html_url={result.html_url}",
        f"payload={payload}",
    ]
    with output_file.open("a", encoding="utf-8") as handle:
        handle.write("\n".join(lines) + "\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        app_settings = get_settings().app
    except ValidationError as e:
        logger.error("invalid_configuration", error=str(e))
        return 1

    configure_logging(app_settings.log_level)

    release_version = args.release_version or app_settings.release_version
    output_file = args.output_file
    if output_file is None and os.environ.get("GITHUB_OUTPUT"):
        output_file = Path(os.environ["GITHUB_OUTPUT"])

    audit_logger = AuditLogger()
    try:
        flow = create_staging_deploy_flow(
            repo_path=args.repo_path,
            audit_logger=audit_logger,
        )
        result = asyncio.run(flow.run(release_version))
    except ValidationError as e:
        logger.error("invalid_configuration", error=str(e))
        return 1
    except (DeployChecklistError, TrackerError) as e:
        logger.error(
            "checklist_run_failed",
            error_type=type(e).__name__,
            error=str(e),
            correlation_id=str(audit_logger.correlation_id),
        )
        return 1

    write_outputs(result, output_file)
    logger.info(
        "checklist_run_finished",
        action=result.action,
        issue_number=result.issue_number,
        html_url=result.html_url,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
