"""Provider token lookup.

Each provider has an ordered list of sources; the first non-empty token wins.

    GitHub  GITHUB_TOKEN, then the token of an existing `gh` CLI session
    GitLab  GITLAB_TOKEN

Only credentials that already exist are read. Nothing here starts a login flow.
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)

GH_CLI_TIMEOUT = 5


def _token_from_env(var: str) -> str | None:
    return os.environ.get(var) or None


def _token_from_gh_cli() -> str | None:
    try:
        completed = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=GH_CLI_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("gh CLI unavailable: %s", e)
        return None
    if completed.returncode != 0:
        return None
    return completed.stdout.strip() or None


def resolve_github_token() -> str | None:
    """GitHub token from the environment or the gh CLI, or None. Never raises."""
    token = _token_from_env("GITHUB_TOKEN")
    if token is None:
        token = _token_from_gh_cli()
        if token:
            logger.debug("Using GitHub token from the gh CLI session.")
    return token


def resolve_gitlab_token() -> str | None:
    return _token_from_env("GITLAB_TOKEN")
