"""GitLab merge-request client (gitlab.com and self-hosted instances).

GitLab has no review "state": a user either appears in a merge request's
``approved_by`` list or does not, so every entry there is an approval. The
merge request's ``iid`` (per-project number shown in the UI as !123) is what
gets mapped to PullRequestRecord.number, never the global ``id``.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import requests

from reviewblame_core.errors import ProviderAPIError, TransportError
from reviewblame_core.models import ApprovalRecord, PullRequestRecord
from reviewblame_core.providers.base import REQUEST_TIMEOUT, ReviewClient, parse_timestamp

logger = logging.getLogger(__name__)

_SHAPE_ERRORS = (KeyError, TypeError, AttributeError, IndexError)


class GitLabClient(ReviewClient):
    def __init__(self, token: str, host: str = "gitlab.com", timeout: float = REQUEST_TIMEOUT):
        self.host = host
        self.api_url = f"https://{host}/api/v4"
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "PRIVATE-TOKEN": token,
                "Accept": "application/json",
            }
        )

    @staticmethod
    def _project_path(owner: str, name: str) -> str:
        return quote(f"{owner}/{name}", safe="")

    def _get(self, path: str):
        url = f"{self.api_url}{path}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"GitLab request to {url} failed: {e}") from e
        if not response.ok:
            raise ProviderAPIError(response.status_code, "GitLab", url)
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"GitLab returned invalid JSON for {url}: {e}") from e

    def find_pull_request(self, owner: str, name: str, commit_hash: str) -> PullRequestRecord | None:
        project = self._project_path(owner, name)
        mrs = self._get(f"/projects/{project}/repository/commits/{commit_hash}/merge_requests")
        if not mrs:
            return None
        try:
            mr = mrs[0]
            return PullRequestRecord(
                number=mr["iid"],
                title=mr.get("title") or "",
                state=mr.get("state") or "",
                author=(mr.get("author") or {}).get("username") or "",
                merged_at=parse_timestamp(mr.get("merged_at")),
            )
        except _SHAPE_ERRORS as e:
            raise TransportError(f"unexpected merge request payload for commit {commit_hash[:8]}: {e!r}") from e

    def get_approvals(self, owner: str, name: str, pr_number: int) -> list[ApprovalRecord]:
        project = self._project_path(owner, name)
        data = self._get(f"/projects/{project}/merge_requests/{pr_number}/approvals") or {}
        approvals = []
        try:
            for entry in data.get("approved_by") or []:
                user = entry.get("user") or {}
                login = user.get("username") or ""
                if not login:
                    logger.debug("Skipping approval on !%s with no user", pr_number)
                    continue
                approvals.append(
                    ApprovalRecord(
                        login=login,
                        email=user.get("email") or None,
                        submitted_at=parse_timestamp(entry.get("created_at")),
                    )
                )
        except _SHAPE_ERRORS as e:
            raise TransportError(f"unexpected approvals payload for !{pr_number}: {e!r}") from e
        return approvals

    def close(self) -> None:
        self.session.close()
