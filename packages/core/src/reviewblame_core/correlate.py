"""Blame-to-approval correlation.

    annotate() → for each blame line, in order:
                   _outcome_for(hash)  ← cache hit, or exactly one _fetch()
                   _annotate_line()    ← ApprovalInfo or CorrelationFailure → AnnotatedLine

_fetch() is the only place a review client is called. It turns the
per-commit errors (no PR, HTTP error, transport error) into a
CorrelationFailure value, so the loop itself never sees an exception for a
single bad commit and the run always completes with fallback annotations.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from reviewblame_core.errors import NoAssociatedRecord, ProviderAPIError, TransportError
from reviewblame_core.models import AnnotatedLine, ApprovalInfo, BlameLine, RepoInfo
from reviewblame_core.providers.base import ReviewClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorrelationFailure:
    """Marker cached in place of an ApprovalInfo when a commit could not be correlated."""

    commit_hash: str
    reason: str


Outcome = ApprovalInfo | CorrelationFailure


class ApprovalCache:
    """Commit hash → Outcome for one invocation. Not shared across runs."""

    def __init__(self):
        self._entries: dict[str, Outcome] = {}

    def get(self, commit_hash: str) -> Outcome | None:
        return self._entries.get(commit_hash)

    def put(self, commit_hash: str, outcome: Outcome) -> None:
        self._entries[commit_hash] = outcome

    def __contains__(self, commit_hash: str) -> bool:
        return commit_hash in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class CorrelationEngine:
    def __init__(self, client: ReviewClient, repo_info: RepoInfo, cache: ApprovalCache | None = None):
        self.client = client
        self.repo_info = repo_info
        self.cache = cache if cache is not None else ApprovalCache()
        self.fetch_count = 0

    def annotate(self, blame_lines: Iterable[BlameLine]) -> list[AnnotatedLine]:
        """Return one AnnotatedLine per blame line, same order, never raising per commit."""
        return [self._annotate_line(line, self._outcome_for(line.commit_hash)) for line in blame_lines]

    def _outcome_for(self, commit_hash: str) -> Outcome:
        outcome = self.cache.get(commit_hash)
        if outcome is None:
            outcome = self._fetch(commit_hash)
            self.cache.put(commit_hash, outcome)
        return outcome

    def _fetch(self, commit_hash: str) -> Outcome:
        self.fetch_count += 1
        try:
            return self.client.get_approval_info(self.repo_info.owner, self.repo_info.name, commit_hash)
        except (NoAssociatedRecord, ProviderAPIError, TransportError) as e:
            logger.debug("No approval data for %s: %s", commit_hash[:8], e)
            return CorrelationFailure(commit_hash=commit_hash, reason=str(e))

    @staticmethod
    def _annotate_line(line: BlameLine, outcome: Outcome) -> AnnotatedLine:
        if isinstance(outcome, CorrelationFailure):
            return AnnotatedLine(blame=line)

        pr_number = outcome.pull_request.number
        if not outcome.approvals:
            return AnnotatedLine(blame=line, pr_number=pr_number)

        # Last in provider order, not compared by timestamp. GitHub and GitLab
        # both list oldest first today, but neither documents that guarantee.
        approver = outcome.approvals[-1]
        if not approver.login:
            # An approval time without a name would be shown against the blame author.
            return AnnotatedLine(blame=line, pr_number=pr_number)
        return AnnotatedLine(
            blame=line,
            pr_number=pr_number,
            approver=approver.login,
            approver_email=approver.email,
            approval_time=approver.submitted_at,
        )
