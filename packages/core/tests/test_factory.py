"""Tests for review client selection."""

import pytest

from reviewblame_core.errors import MissingCredential, UnsupportedProvider
from reviewblame_core.models import ProviderType, RepoInfo
from reviewblame_core.providers.base import ReviewClient
from reviewblame_core.providers.factory import create_client
from reviewblame_core.providers.github import GitHubClient
from reviewblame_core.providers.gitlab import GitLabClient


def _repo(provider=ProviderType.GITHUB, host="github.com"):
    return RepoInfo(owner="owner", name="repo", provider=provider, host=host)


class TestCreateClient:
    def test_github_with_token(self):
        client = create_client(_repo(), "gh-token", None)
        assert isinstance(client, GitHubClient)
        assert isinstance(client, ReviewClient)

    def test_github_without_token(self):
        with pytest.raises(MissingCredential) as exc_info:
            create_client(_repo(), None, "gl-token")
        assert exc_info.value.provider == ProviderType.GITHUB
        assert "GITHUB_TOKEN" in str(exc_info.value)

    def test_github_empty_token(self):
        with pytest.raises(MissingCredential):
            create_client(_repo(), "", None)

    def test_gitlab_with_token(self):
        client = create_client(_repo(ProviderType.GITLAB, "gitlab.com"), None, "gl-token")
        assert isinstance(client, GitLabClient)
        assert client.api_url == "https://gitlab.com/api/v4"

    def test_gitlab_without_token(self):
        with pytest.raises(MissingCredential) as exc_info:
            create_client(_repo(ProviderType.GITLAB, "gitlab.com"), "gh-token", None)
        assert "GITLAB_TOKEN" in str(exc_info.value)

    def test_self_hosted_gitlab_uses_repo_host(self):
        client = create_client(_repo(ProviderType.GITLAB, "gitlab.example.com"), None, "gl-token")
        assert client.api_url == "https://gitlab.example.com/api/v4"

    def test_github_api_url_override(self):
        client = create_client(_repo(), "t", None, github_api_url="https://ghe.example.com/api/v3")
        assert client.api_url == "https://ghe.example.com/api/v3"

    def test_timeout_passed_through(self):
        assert create_client(_repo(), "t", None, timeout=5).timeout == 5

    def test_unknown_provider_raises(self):
        repo = RepoInfo(owner="o", name="r", provider="bitbucket", host="bitbucket.org")
        with pytest.raises(UnsupportedProvider):
            create_client(repo, "t", "t")
