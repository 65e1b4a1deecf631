"""Render annotated lines in git blame's human and porcelain layouts.

Human mode mirrors `git blame`:

    a1b2c3d4 (Jane Smith 2021-01-03 00:00:00 1) package main

Porcelain mode mirrors `git blame --line-porcelain`, with the approver
substituted for the author and an extra ``pr-number`` header:

    <sha> <n> <n> 1
    author Jane Smith
    author-mail <jane@example.com>
    author-time 1609632000
    pr-number 123
    filename
    \tpackage main

All timestamps are rendered in UTC so output does not depend on the machine's
local timezone.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from reviewblame_core.models import AnnotatedLine

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_SHORT_HASH_LEN = 8


def _parse_epoch(raw: str) -> int | None:
    try:
        return int(raw.strip())
    except (ValueError, AttributeError):
        return None


def _epoch_of(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp())


class OutputFormatter:
    def __init__(self, show_email: bool = False, porcelain: bool = False):
        self.show_email = show_email
        self.porcelain = porcelain

    def format(self, lines: Sequence[AnnotatedLine]) -> str:
        if not lines:
            return ""
        if self.porcelain:
            return self._format_porcelain(lines)
        return self._format_human(lines)

    # ------------------------------------------------------------------ #
    # Human                                                                #
    # ------------------------------------------------------------------ #

    def _format_human(self, lines: Sequence[AnnotatedLine]) -> str:
        # First pass: column widths across the whole set.
        identities = [self.display_identity(line) for line in lines]
        identity_width = max(len(identity) for identity in identities)
        line_num_width = max(len(str(line.blame.line_number)) for line in lines)

        rows = []
        for line, identity in zip(lines, identities):
            rows.append(
                f"{line.blame.commit_hash[:_SHORT_HASH_LEN]} "
                f"({identity:<{identity_width}} {self.display_date(line)} "
                f"{line.blame.line_number:>{line_num_width}}) "
                f"{line.blame.content}\n"
            )
        return "".join(rows)

    def display_identity(self, line: AnnotatedLine) -> str:
        """Approver name/email if one was correlated, else the original author's."""
        if line.has_approver:
            if self.show_email and line.approver_email:
                return line.approver_email
            return line.approver
        if self.show_email and line.blame.author_email:
            return line.blame.author_email
        return line.blame.author

    @staticmethod
    def display_date(line: AnnotatedLine) -> str:
        if line.approval_time is not None:
            moment = line.approval_time
            if moment.tzinfo is not None:
                moment = moment.astimezone(timezone.utc)
            return moment.strftime(_DATE_FORMAT)

        epoch = _parse_epoch(line.blame.date)
        if epoch is None:
            return line.blame.date
        return datetime.fromtimestamp(epoch, tz=timezone.utc).strftime(_DATE_FORMAT)

    # ------------------------------------------------------------------ #
    # Porcelain                                                            #
    # ------------------------------------------------------------------ #

    def _format_porcelain(self, lines: Sequence[AnnotatedLine]) -> str:
        out = []
        for line in lines:
            blame = line.blame
            out.append(f"{blame.commit_hash} {blame.line_number} {blame.line_number} 1")

            if line.has_approver:
                name, email = line.approver, line.approver_email
            else:
                name, email = blame.author, blame.author_email
            out.append(f"author {name}")
            if email:
                out.append(f"author-mail <{email}>")

            if line.approval_time is not None:
                out.append(f"author-time {_epoch_of(line.approval_time)}")
            else:
                epoch = _parse_epoch(blame.date)
                if epoch is not None:
                    out.append(f"author-time {epoch}")

            if line.pr_number is not None:
                out.append(f"pr-number {line.pr_number}")

            # No file path at this layer.
            out.append("filename ")
            out.append(f"\t{blame.content}")
        return "\n".join(out) + "\n"
