"""Data models shared by the parser, the review clients, the engine and the formatter.

Blame lines and repo info are produced once per invocation and never change,
so they are frozen. Provider payloads are normalised into PullRequestRecord /
ApprovalRecord before they leave a client; nothing downstream sees raw JSON.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime


class ProviderType(enum.Enum):
    GITHUB = "github"
    GITLAB = "gitlab"

    def __str__(self) -> str:
        return {ProviderType.GITHUB: "GitHub", ProviderType.GITLAB: "GitLab"}[self]


@dataclass(frozen=True)
class BlameLine:
    """One line of `git blame --line-porcelain` output."""

    commit_hash: str
    author: str = ""
    author_email: str = ""
    date: str = ""  # raw epoch seconds as emitted by git, e.g. "1609459200"
    line_number: int = 0
    content: str = ""


@dataclass(frozen=True)
class RepoInfo:
    owner: str
    name: str
    provider: ProviderType
    host: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class PullRequestRecord:
    """A GitHub pull request or GitLab merge request (iid mapped to number)."""

    number: int
    title: str = ""
    state: str = ""
    author: str = ""
    merged_at: datetime | None = None


@dataclass
class ApprovalRecord:
    login: str
    email: str | None = None
    submitted_at: datetime | None = None


@dataclass
class ApprovalInfo:
    pull_request: PullRequestRecord
    # Provider order, never re-sorted.
    approvals: list[ApprovalRecord] = field(default_factory=list)


@dataclass(frozen=True)
class AnnotatedLine:
    """A blame line plus whatever approval data could be correlated for it.

    All optional fields unset means "show the original blame identity".
    """

    blame: BlameLine
    pr_number: int | None = None
    approver: str | None = None
    approver_email: str | None = None
    approval_time: datetime | None = None

    @property
    def has_approver(self) -> bool:
        return bool(self.approver)
