"""CLI entry point for git-review-blame.

Installed as ``git-review-blame`` so it can also be run as ``git review-blame``.
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from reviewblame_core.errors import ReviewBlameError

console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    # urllib3 is chatty at DEBUG; its connection logs add nothing here.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


@click.command("git-review-blame")
@click.version_option(
    version=importlib.metadata.version("git-review-blame"),
    prog_name="git-review-blame",
)
@click.argument("file_path", metavar="FILE", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-L",
    "--line-range",
    "line_range",
    default=None,
    help="Only annotate the given range, using `git blame -L` syntax (e.g. 10,20).",
)
@click.option("-p", "--porcelain", is_flag=True, help="Machine-readable porcelain output.")
@click.option(
    "-e",
    "--show-email",
    "show_email",
    is_flag=True,
    help="Show approver/author email instead of name.",
)
@click.option("--remote", default=None, help="Git remote used to detect the provider. [default: origin]")
@click.option(
    "--config",
    "config_path",
    default=".review-blame.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="REVIEW_BLAME_CONFIG",
)
@click.option("-v", "--verbose", is_flag=True, help="Log API calls and timing to stderr.")
def main(
    file_path: str,
    line_range: str | None,
    porcelain: bool,
    show_email: bool,
    remote: str | None,
    config_path: str,
    verbose: bool,
):
    """Show who approved each line of FILE instead of who committed it.

    Every line is traced to the pull request (GitHub) or merge request
    (GitLab) that introduced its commit, and attributed to the last reviewer
    who approved it. Lines whose commit has no PR/MR, or whose lookup fails,
    keep their original author.

    \b
    Environment variables:
      GITHUB_TOKEN    GitHub token (falls back to `gh auth token`)
      GITLAB_TOKEN    GitLab token, for gitlab.com and self-hosted instances
    """
    from reviewblame_cli.auth import resolve_github_token, resolve_gitlab_token
    from reviewblame_core.config import load_config
    from reviewblame_core.runner import run_review_blame

    _configure_logging(verbose)

    try:
        config = load_config(
            config_path,
            cli_overrides={
                "line_range": line_range,
                # An unset flag must not override `porcelain: true` in the config file.
                "porcelain": porcelain or None,
                "show_email": show_email or None,
                "remote": remote,
            },
        )
    except (ValueError, OSError) as e:
        raise click.ClickException(f"could not load {config_path}: {e}")

    # Resolve tokens up front so the env var / gh CLI precedence is applied once.
    config["github_token"] = resolve_github_token()
    config["gitlab_token"] = resolve_gitlab_token()

    try:
        result = run_review_blame(file_path, config)
    except ReviewBlameError as e:
        raise click.ClickException(str(e))

    if not result.lines:
        console.print("[yellow]No lines to annotate.[/yellow]")
        return

    click.echo(result.output, nl=False)
