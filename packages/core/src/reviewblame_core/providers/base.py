"""Review client contract shared by the GitHub and GitLab implementations.

Every client answers the same two questions about a commit:
    find_pull_request() → which PR/MR introduced it?
    get_approvals()     → who approved that PR/MR, in provider order?

get_approval_info() composes the two and is the only call the
CorrelationEngine makes. Request building, authentication headers and
response shaping are owned entirely by each concrete client; nothing about
HTTP lives here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime

from reviewblame_core.errors import NoAssociatedRecord
from reviewblame_core.models import ApprovalInfo, ApprovalRecord, PullRequestRecord

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30  # seconds, applied to every request


class ReviewClient(ABC):
    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def get_approval_info(self, owner: str, name: str, commit_hash: str) -> ApprovalInfo:
        """Return the PR/MR that introduced ``commit_hash`` and its approvals.

        Raises NoAssociatedRecord when the provider knows of no PR/MR for the
        commit. ProviderAPIError / TransportError from either call propagate.
        """
        pr = self.find_pull_request(owner, name, commit_hash)
        if pr is None:
            raise NoAssociatedRecord(commit_hash)
        approvals = self.get_approvals(owner, name, pr.number)
        logger.debug(
            "%s: commit %s → #%d with %d approval(s)",
            self.__class__.__name__,
            commit_hash[:8],
            pr.number,
            len(approvals),
        )
        return ApprovalInfo(pull_request=pr, approvals=approvals)

    def close(self) -> None:
        """Release the underlying HTTP session. Default is a no-op."""

    # ------------------------------------------------------------------ #
    # Abstract, implemented by each provider                               #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def find_pull_request(self, owner: str, name: str, commit_hash: str) -> PullRequestRecord | None:
        """Return the first PR/MR the provider associates with the commit, or None."""

    @abstractmethod
    def get_approvals(self, owner: str, name: str, pr_number: int) -> list[ApprovalRecord]:
        """Return the approvals for a PR/MR in the order the provider lists them."""


def parse_timestamp(value) -> datetime | None:
    """Parse an ISO-8601 API timestamp ("2021-01-03T00:00:00Z") into an aware datetime."""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Ignoring unparsable timestamp %r", value)
        return None
