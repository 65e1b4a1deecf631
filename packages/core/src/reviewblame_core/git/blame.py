"""Run `git blame --line-porcelain` and parse its output into BlameLine records.

--line-porcelain repeats the full commit metadata for every source line, so
each record can be parsed on its own:

    <40-hex sha> <orig line> <final line> [<group size>]
    author Jane Doe
    author-mail <jane@example.com>
    author-time 1609459200
    ...
    \t<line content>
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Iterable
from io import StringIO
from pathlib import Path

from reviewblame_core.errors import GitCommandError, NotAGitRepository, ParseError
from reviewblame_core.models import BlameLine

logger = logging.getLogger(__name__)

_HASH_LEN = 40
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _is_record_start(line: str) -> bool:
    return len(line) >= _HASH_LEN and all(c in _HEX_DIGITS for c in line[:_HASH_LEN])


def _strip_angle_brackets(email: str) -> str:
    email = email.strip()
    if len(email) >= 2 and email[0] == "<" and email[-1] == ">":
        return email[1:-1]
    return email


def parse_blame_output(output: str | Iterable[str]) -> list[BlameLine]:
    """Parse porcelain blame text into BlameLines numbered 1..N by order of appearance.

    ``output`` may be a string or any iterable of lines (an open file, a pipe).
    Numbering ignores the line numbers git prints, so a ``-L 40,60`` range
    still yields 1..21. Unknown or malformed metadata lines are ignored.
    Raises ParseError only if reading from ``output`` fails.
    """
    source = StringIO(output) if isinstance(output, str) else output

    lines: list[BlameLine] = []
    current: dict | None = None

    def flush():
        if current and current["commit_hash"]:
            lines.append(BlameLine(**current))

    try:
        for raw in source:
            line = raw.rstrip("\r\n")
            if not line:
                continue

            if _is_record_start(line):
                flush()
                current = {
                    "commit_hash": line[:_HASH_LEN],
                    "author": "",
                    "author_email": "",
                    "date": "",
                    "line_number": len(lines) + 1,
                    "content": "",
                }
                continue

            if current is None:
                continue
            if line.startswith("\t"):
                current["content"] = line[1:]
            elif line.startswith("author-mail "):
                current["author_email"] = _strip_angle_brackets(line[len("author-mail ") :])
            elif line.startswith("author-time "):
                current["date"] = line[len("author-time ") :]
            elif line.startswith("author "):
                current["author"] = line[len("author ") :]
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"failed to read blame output: {e}") from e

    flush()
    return lines


def find_repo_root(path: str | Path) -> Path:
    """Walk up from ``path`` to the first directory holding a ``.git`` entry.

    ``.git`` may be a directory (normal clone) or a file (worktree, submodule).
    """
    current = Path(path).resolve()
    if not current.is_dir():
        current = current.parent

    for candidate in (current, *current.parents):
        if (candidate / ".git").exists():
            return candidate
    raise NotAGitRepository(path)


def run_git_blame(repo_root: str | Path, file_path: str | Path, line_range: str | None = None) -> str:
    """Run `git blame --line-porcelain` on ``file_path`` and return its raw output."""
    repo_root = Path(repo_root)
    rel_path = os.path.relpath(Path(file_path).resolve(), repo_root.resolve())

    args = ["blame", "--line-porcelain"]
    if line_range:
        args += ["-L", line_range]
    args += ["--", rel_path]

    logger.debug("Running git %s in %s", " ".join(args), repo_root)
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=str(repo_root),
            capture_output=True,
            text=True,
            errors="replace",
        )
    except FileNotFoundError as e:
        raise GitCommandError(args, str(e)) from e
    if result.returncode != 0:
        raise GitCommandError(args, result.stderr)
    return result.stdout
