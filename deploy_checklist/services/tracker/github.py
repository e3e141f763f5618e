"""
GitHub Issue Tracker Implementation

Talks to the GitHub REST API (v3) through a requests session.

TRADEOFFS:
- Read requests (GET) are retried on connection errors and timeouts
- Writes (POST/PATCH) are never retried, a lost response could otherwise
  create the checklist twice
- Pagination follows the Link header until the last page
"""

from typing import Any, Iterator, Optional

import requests
import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from deploy_checklist.config import GitHubSettings, get_settings
from deploy_checklist.models.checklist import (
    IssueState,
    PublishedIssue,
    PullRequestSummary,
    TrackedIssue,
)
from deploy_checklist.services.tracker.interface import (
    IssueTrackerInterface,
    TrackerAuthError,
    TrackerError,
    TrackerNotFoundError,
)

logger = structlog.get_logger(__name__)

TRANSIENT_ERRORS = (requests.ConnectionError, requests.Timeout)
PAGE_SIZE = 100


class GitHubClient:
    """
    Low-level GitHub REST client.

    Handles authentication, error mapping, retries and pagination.
    """

    def __init__(
        self,
        settings: Optional[GitHubSettings] = None,
        session: Optional[requests.Session] = None,
        wait: Optional[wait_base] = None,
    ):
        self._settings = settings or get_settings().github
        self._session = session or requests.Session()
        self._wait = wait if wait is not None else wait_exponential(multiplier=1, min=2, max=10)
        self._session.headers.update({
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._settings.token}",
            "User-Agent": "deploy-checklist",
            "X-GitHub-Api-Version": "2022-11-28",
        })

    @property
    def repository(self) -> str:
        return self._settings.repository

    def api_url(self, path: str) -> str:
        """Absolute URL of an API path."""
        return f"{self._settings.api_url}/{path.lstrip('/')}"

    def url(self, path: str) -> str:
        """Absolute URL of a repository-relative API path."""
        return self.api_url(f"repos/{self._settings.repository}/{path.lstrip('/')}")

    def _check(
        self,
        response: requests.Response,
        method: str,
        url: str,
    ) -> requests.Response:
        if response.status_code < 400:
            return response

        message = f"GitHub API error {response.status_code} for {method} {url}: {response.text}"
        if response.status_code in (401, 403):
            raise TrackerAuthError(message)
        if response.status_code == 404:
            raise TrackerNotFoundError(message)
        raise TrackerError(message)

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Send one request.

        GET requests are retried on transient network errors, other
        methods are sent exactly once.
        """
        logger.debug("github_request", method=method, url=url, params=kwargs.get("params"))
        attempts = self._settings.max_retries if method.upper() == "GET" else 1
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(attempts),
                wait=self._wait,
                retry=retry_if_exception_type(TRANSIENT_ERRORS),
                reraise=True,
            ):
                with attempt:
                    response = self._session.request(
                        method,
                        url,
                        timeout=self._settings.request_timeout_seconds,
                        **kwargs,
                    )
        except requests.RequestException as e:
            raise TrackerError(f"GitHub request failed: {method} {url}: {e}") from e
        return self._check(response, method, url)

    def paginate(
        self,
        url: str,
        params: Optional[dict] = None,
        data_key: Optional[str] = None,
    ) -> Iterator[dict]:
        """Yield the items of every page, following `Link: rel=next`."""
        params = dict(params) if params else None
        while url:
            response = self.request("GET", url, params=params)
            data = response.json()
            if data_key is None:
                if not isinstance(data, list):
                    raise TrackerError(
                        f"Expected list response for {url}, received {type(data).__name__}"
                    )
                items = data
            else:
                items = data.get(data_key, [])
            yield from items

            next_link = response.links.get("next")
            if not next_link:
                break
            url = next_link["url"]
            params = None


class GitHubIssueTracker(IssueTrackerInterface):
    """
    GitHub implementation of the issue tracker.

    Pull requests show up in issue listings too; they are flagged with
    `is_pull_request`.
    """

    def __init__(self, client: Optional[GitHubClient] = None):
        self._client = client or GitHubClient()

    @staticmethod
    def _to_tracked_issue(data: dict) -> TrackedIssue:
        return TrackedIssue(
            number=data["number"],
            title=data.get("title") or "",
            body=data.get("body"),
            state=IssueState(data.get("state", "open")),
            html_url=data["html_url"],
            labels=[label["name"] for label in data.get("labels", [])],
            is_pull_request="pull_request" in data,
        )

    @staticmethod
    def _to_published(data: dict) -> PublishedIssue:
        return PublishedIssue(number=data["number"], html_url=data["html_url"])

    async def list_issues(
        self,
        label: str,
        state: str = "all",
    ) -> list[TrackedIssue]:
        params = {
            "labels": label,
            "state": state,
            "sort": "created",
            "direction": "desc",
            "per_page": PAGE_SIZE,
        }
        return [
            self._to_tracked_issue(data)
            for data in self._client.paginate(self._client.url("issues"), params)
        ]

    async def create_issue(
        self,
        title: str,
        body: str,
        labels: list[str],
        assignees: list[str],
    ) -> PublishedIssue:
        response = self._client.request(
            "POST",
            self._client.url("issues"),
            json={
                "title": title,
                "body": body,
                "labels": labels,
                "assignees": assignees,
            },
        )
        return self._to_published(response.json())

    async def update_issue(self, number: int, body: str) -> PublishedIssue:
        response = self._client.request(
            "PATCH",
            self._client.url(f"issues/{number}"),
            json={"body": body},
        )
        return self._to_published(response.json())

    async def list_pull_requests_by_author(
        self,
        login: str,
    ) -> list[PullRequestSummary]:
        params = {
            "q": f"repo:{self._client.repository} is:pr is:closed author:{login}",
            "per_page": PAGE_SIZE,
        }
        search_url = self._client.api_url("search/issues")
        return [
            PullRequestSummary(
                number=data["number"],
                html_url=data["html_url"],
                title=data.get("title") or "",
                author_login=(data.get("user") or {}).get("login"),
            )
            for data in self._client.paginate(search_url, params, data_key="items")
        ]
