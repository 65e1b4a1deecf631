"""Error taxonomy for git-review-blame.

Two families with different propagation rules:

  - Fatal (surfaced to the CLI, which exits non-zero):
        InvalidRemoteFormat, UnsupportedProvider, MissingCredential,
        ParseError, NotAGitRepository, GitCommandError
  - Per-commit (absorbed by CorrelationEngine into a fallback annotation):
        NoAssociatedRecord, ProviderAPIError, TransportError
"""

from __future__ import annotations


class ReviewBlameError(Exception):
    """Base class for every error raised by reviewblame_core."""


class InvalidRemoteFormat(ReviewBlameError):
    def __init__(self, url: str, reason: str = "unsupported repository URL format"):
        super().__init__(f"{reason}: {url!r}")
        self.url = url


class UnsupportedProvider(ReviewBlameError):
    def __init__(self, provider):
        super().__init__(f"unsupported repository provider: {provider!r}")
        self.provider = provider


class MissingCredential(ReviewBlameError):
    """No token is available for the provider the remote resolved to."""

    _ENV_VARS = {"GitHub": "GITHUB_TOKEN", "GitLab": "GITLAB_TOKEN"}

    def __init__(self, provider):
        env_var = self._ENV_VARS.get(str(provider), "a token")
        super().__init__(f"{env_var} environment variable is required for {provider} repositories")
        self.provider = provider


class ParseError(ReviewBlameError):
    """Reading the blame stream failed (not raised for malformed metadata)."""


class NoAssociatedRecord(ReviewBlameError):
    def __init__(self, commit_hash: str):
        super().__init__(f"no pull/merge request found for commit {commit_hash}")
        self.commit_hash = commit_hash


class ProviderAPIError(ReviewBlameError):
    def __init__(self, status: int, provider: str = "", url: str = ""):
        prefix = f"{provider} API error" if provider else "API error"
        super().__init__(f"{prefix}: HTTP {status}" + (f" for {url}" if url else ""))
        self.status = status
        self.url = url


class TransportError(ReviewBlameError):
    """DNS failure, refused connection, timeout or an undecodable response body."""


class NotAGitRepository(ReviewBlameError):
    def __init__(self, path):
        super().__init__(f"this directory is not part of a Git repository: {path}")
        self.path = path


class GitCommandError(ReviewBlameError):
    def __init__(self, args: list[str], stderr: str = ""):
        detail = stderr.strip()
        super().__init__(f"`git {' '.join(args)}` failed" + (f": {detail}" if detail else ""))
        self.args_ = args
        self.stderr = stderr
