from __future__ import annotations

import logging

import requests

from reviewblame_core.errors import ProviderAPIError, TransportError
from reviewblame_core.models import ApprovalRecord, PullRequestRecord
from reviewblame_core.providers.base import REQUEST_TIMEOUT, ReviewClient, parse_timestamp

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"

# GitHub's maximum page size.
REVIEWS_PER_PAGE = 100

_SHAPE_ERRORS = (KeyError, TypeError, AttributeError, IndexError)


class GitHubClient(ReviewClient):
    """Review client for the GitHub REST API (pull requests and reviews)."""

    API_VERSION = "2022-11-28"
    APPROVED_STATE = "APPROVED"

    def __init__(self, token: str, api_url: str = DEFAULT_API_URL, timeout: float = REQUEST_TIMEOUT):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": self.API_VERSION,
            }
        )

    def _request(self, url: str, params: dict | None = None):
        """Issue one GET and return ``(response, decoded JSON)``."""
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"GitHub request to {url} failed: {e}") from e
        if not response.ok:
            raise ProviderAPIError(response.status_code, "GitHub", url)
        try:
            return response, response.json()
        except ValueError as e:
            raise TransportError(f"GitHub returned invalid JSON for {url}: {e}") from e

    def _get(self, path: str):
        _, payload = self._request(f"{self.api_url}{path}")
        return payload

    def _get_all(self, path: str, per_page: int) -> list:
        """Collect every page of a list endpoint by following ``Link: rel="next"``."""
        url = f"{self.api_url}{path}"
        params = {"per_page": per_page}
        items: list = []
        while url:
            response, page = self._request(url, params)
            if not isinstance(page, list):
                raise TransportError(f"GitHub returned {type(page).__name__} where a list was expected for {url}")
            items.extend(page)
            url = (response.links or {}).get("next", {}).get("url")
            # The next link already carries the query string.
            params = None
        return items

    def find_pull_request(self, owner: str, name: str, commit_hash: str) -> PullRequestRecord | None:
        pulls = self._get(f"/repos/{owner}/{name}/commits/{commit_hash}/pulls")
        if not pulls:
            return None
        try:
            # GitHub orders associated PRs by relevance; the first one is canonical.
            pr = pulls[0]
            return PullRequestRecord(
                number=pr["number"],
                title=pr.get("title") or "",
                state=pr.get("state") or "",
                author=(pr.get("user") or {}).get("login") or "",
                merged_at=parse_timestamp(pr.get("merged_at")),
            )
        except _SHAPE_ERRORS as e:
            raise TransportError(f"unexpected pull request payload for commit {commit_hash[:8]}: {e!r}") from e

    def get_approvals(self, owner: str, name: str, pr_number: int) -> list[ApprovalRecord]:
        reviews = self._get_all(f"/repos/{owner}/{name}/pulls/{pr_number}/reviews", REVIEWS_PER_PAGE)
        approvals = []
        try:
            for review in reviews:
                if (review.get("state") or "").upper() != self.APPROVED_STATE:
                    continue
                user = review.get("user") or {}
                login = user.get("login") or ""
                if not login:
                    # Deleted accounts come back as `user: null`.
                    logger.debug("Skipping approval on PR #%s with no user", pr_number)
                    continue
                approvals.append(
                    ApprovalRecord(
                        login=login,
                        email=user.get("email") or None,
                        submitted_at=parse_timestamp(review.get("submitted_at")),
                    )
                )
        except _SHAPE_ERRORS as e:
            raise TransportError(f"unexpected review payload for PR #{pr_number}: {e!r}") from e
        return approvals

    def close(self) -> None:
        self.session.close()
