"""Blame-with-approvers pipeline for a single file."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from reviewblame_core.correlate import CorrelationEngine
from reviewblame_core.formatter import OutputFormatter
from reviewblame_core.git.blame import find_repo_root, parse_blame_output, run_git_blame
from reviewblame_core.git.remote import resolve_repo_info
from reviewblame_core.models import AnnotatedLine, RepoInfo
from reviewblame_core.providers.factory import create_client

logger = logging.getLogger(__name__)


@dataclass
class BlameResult:
    """What run_review_blame produced, for the CLI to print and tests to inspect."""

    repo: RepoInfo
    output: str
    lines: list[AnnotatedLine] = field(default_factory=list)
    fetch_count: int = 0

    @property
    def approved_lines(self) -> int:
        return sum(1 for line in self.lines if line.has_approver)


def run_review_blame(file_path: str | Path, config: dict) -> BlameResult:
    """Blame ``file_path`` and re-attribute each line to the approver of its PR/MR.

    Fatal errors (not a repo, unparsable remote, missing token, git failure)
    propagate as ReviewBlameError subclasses. Per-commit API failures do not;
    those lines simply keep their original author.
    """
    start = time.monotonic()

    repo_root = find_repo_root(file_path)
    repo_info = resolve_repo_info(repo_root, config.get("remote") or "origin")
    logger.debug("Repository %s on %s (%s)", repo_info.full_name, repo_info.host, repo_info.provider)

    client = create_client(
        repo_info,
        config.get("github_token"),
        config.get("gitlab_token"),
        github_api_url=config.get("github_api_url"),
        timeout=config.get("timeout") or 30,
    )
    try:
        raw = run_git_blame(repo_root, file_path, config.get("line_range"))
        blame_lines = parse_blame_output(raw)

        engine = CorrelationEngine(client, repo_info)
        annotated = engine.annotate(blame_lines)
    finally:
        client.close()

    formatter = OutputFormatter(
        show_email=bool(config.get("show_email")),
        porcelain=bool(config.get("porcelain")),
    )
    result = BlameResult(
        repo=repo_info,
        output=formatter.format(annotated),
        lines=annotated,
        fetch_count=engine.fetch_count,
    )
    logger.debug(
        "Annotated %d line(s) from %d distinct commit(s); %d with an approver (%.1fs)",
        len(annotated),
        result.fetch_count,
        result.approved_lines,
        time.monotonic() - start,
    )
    return result
