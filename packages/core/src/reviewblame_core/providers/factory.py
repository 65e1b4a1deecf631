from __future__ import annotations

from reviewblame_core.errors import MissingCredential, UnsupportedProvider
from reviewblame_core.models import ProviderType, RepoInfo
from reviewblame_core.providers.base import REQUEST_TIMEOUT, ReviewClient
from reviewblame_core.providers.github import DEFAULT_API_URL, GitHubClient
from reviewblame_core.providers.gitlab import GitLabClient


def create_client(
    repo_info: RepoInfo,
    github_token: str | None,
    gitlab_token: str | None,
    *,
    github_api_url: str | None = None,
    timeout: float = REQUEST_TIMEOUT,
) -> ReviewClient:
    """Build the review client matching the repo's provider.

    Pure selection: constructing a client opens no connection. Only the token
    for the resolved provider is required; the other may be None.
    """
    provider = repo_info.provider
    if provider == ProviderType.GITHUB:
        if not github_token:
            raise MissingCredential(provider)
        return GitHubClient(github_token, api_url=github_api_url or DEFAULT_API_URL, timeout=timeout)
    if provider == ProviderType.GITLAB:
        if not gitlab_token:
            raise MissingCredential(provider)
        return GitLabClient(gitlab_token, host=repo_info.host, timeout=timeout)
    raise UnsupportedProvider(provider)
