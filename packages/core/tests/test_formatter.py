"""Tests for human and porcelain output rendering."""

from datetime import datetime, timedelta, timezone

from reviewblame_core.formatter import OutputFormatter
from reviewblame_core.models import AnnotatedLine, BlameLine

SHA1 = "a1b2c3d4e5f6a7b8c9d0e1f2a3b4c5d6e7f8a9b0"
SHA2 = "b2c3d4e5f6a7b8c9d0e1f2a3b4c5d6e7f8a9b0c1"
APPROVAL_TIME = datetime.fromtimestamp(1609632000, tz=timezone.utc)  # 2021-01-03 00:00:00 UTC


def _blame(sha=SHA1, author="John Doe", email="john@example.com", date="1609459200", n=1, content="package main"):
    return BlameLine(
        commit_hash=sha,
        author=author,
        author_email=email,
        date=date,
        line_number=n,
        content=content,
    )


def _approved(blame=None, approver="Jane Smith", email="jane@example.com", when=APPROVAL_TIME, pr=123):
    return AnnotatedLine(
        blame=blame or _blame(),
        pr_number=pr,
        approver=approver,
        approver_email=email,
        approval_time=when,
    )


def _block_for(output: str, sha: str) -> list[str]:
    """Return the porcelain lines belonging to the record that starts with ``sha``."""
    lines = output.splitlines()
    start = next(i for i, line in enumerate(lines) if line.startswith(sha))
    end = next(i for i in range(start, len(lines)) if lines[i].startswith("\t"))
    return lines[start : end + 1]


# ---------------------------------------------------------------------------
# Human mode
# ---------------------------------------------------------------------------


class TestHumanFormat:
    def test_empty_input_renders_empty_string(self):
        assert OutputFormatter().format([]) == ""
        assert OutputFormatter(porcelain=True).format([]) == ""

    def test_exact_layout(self):
        lines = [
            _approved(),
            AnnotatedLine(blame=_blame(sha=SHA2, author="Bob Wilson", date="1609545600", n=2, content='import "fmt"')),
        ]
        output = OutputFormatter().format(lines)
        assert output == (
            "a1b2c3d4 (Jane Smith 2021-01-03 00:00:00 1) package main\n"
            'b2c3d4e5 (Bob Wilson 2021-01-02 00:00:00 2) import "fmt"\n'
        )

    def test_identity_column_padded_to_widest(self):
        lines = [
            _approved(approver="Al"),
            AnnotatedLine(blame=_blame(sha=SHA2, author="Bartholomew", date="1609545600", n=2, content="x")),
        ]
        rows = OutputFormatter().format(lines).splitlines()
        assert rows[0].startswith("a1b2c3d4 (Al          2021-01-03")
        assert rows[1].startswith("b2c3d4e5 (Bartholomew 2021-01-02")

    def test_line_number_right_aligned_to_widest(self):
        lines = [AnnotatedLine(blame=_blame(n=n, content=f"c{n}")) for n in (1, 9, 10, 100)]
        rows = OutputFormatter().format(lines).splitlines()
        assert rows[0].endswith("   1) c1")
        assert rows[2].endswith("  10) c10")
        assert rows[3].endswith(" 100) c100")

    def test_show_email_prefers_approver_email(self):
        output = OutputFormatter(show_email=True).format([_approved()])
        assert "jane@example.com" in output
        assert "Jane Smith" not in output

    def test_show_email_falls_back_to_approver_name_without_email(self):
        output = OutputFormatter(show_email=True).format([_approved(email=None)])
        assert "(Jane Smith " in output

    def test_show_email_for_unapproved_line_uses_author_email(self):
        output = OutputFormatter(show_email=True).format([AnnotatedLine(blame=_blame())])
        assert "(john@example.com " in output

    def test_pr_without_approver_shows_author(self):
        output = OutputFormatter().format([AnnotatedLine(blame=_blame(), pr_number=5)])
        assert "(John Doe 2021-01-01 00:00:00 1)" in output

    def test_unparsable_date_rendered_verbatim(self):
        output = OutputFormatter().format([AnnotatedLine(blame=_blame(date="not-a-date"))])
        assert "(John Doe not-a-date 1)" in output

    def test_approval_time_converted_to_utc(self):
        tz = timezone(timedelta(hours=2))
        when = datetime(2021, 1, 3, 2, 0, 0, tzinfo=tz)
        output = OutputFormatter().format([_approved(when=when)])
        assert "2021-01-03 00:00:00" in output

    def test_empty_content_keeps_row(self):
        output = OutputFormatter().format([AnnotatedLine(blame=_blame(content=""))])
        assert output == "a1b2c3d4 (John Doe 2021-01-01 00:00:00 1) \n"


# ---------------------------------------------------------------------------
# Porcelain mode
# ---------------------------------------------------------------------------


class TestPorcelainFormat:
    def test_approved_line_exact_block(self):
        output = OutputFormatter(porcelain=True).format([_approved()])
        assert output.splitlines() == [
            f"{SHA1} 1 1 1",
            "author Jane Smith",
            "author-mail <jane@example.com>",
            "author-time 1609632000",
            "pr-number 123",
            "filename ",
            "\tpackage main",
        ]

    def test_no_pr_falls_back_to_original_author(self):
        output = OutputFormatter(porcelain=True).format([AnnotatedLine(blame=_blame())])
        block = _block_for(output, SHA1)
        assert "author John Doe" in block
        assert "author-mail <john@example.com>" in block
        assert "author-time 1609459200" in block
        assert not any(line.startswith("pr-number") for line in block)

    def test_pr_without_approver_has_pr_number_and_author(self):
        output = OutputFormatter(porcelain=True).format([AnnotatedLine(blame=_blame(), pr_number=8)])
        block = _block_for(output, SHA1)
        assert "author John Doe" in block
        assert "pr-number 8" in block

    def test_author_mail_omitted_when_identity_has_no_email(self):
        output = OutputFormatter(porcelain=True).format([_approved(email=None)])
        assert "author-mail" not in output

    def test_approver_without_time_uses_commit_time(self):
        output = OutputFormatter(porcelain=True).format([_approved(when=None)])
        assert "author-time 1609459200" in output

    def test_author_time_omitted_when_unavailable(self):
        output = OutputFormatter(porcelain=True).format([AnnotatedLine(blame=_blame(date="garbage"))])
        assert "author-time" not in output

    def test_multiple_records_in_order(self):
        lines = [
            _approved(),
            AnnotatedLine(blame=_blame(sha=SHA2, author="Bob Wilson", n=2, content="")),
        ]
        output = OutputFormatter(porcelain=True).format(lines)
        assert output.index(f"{SHA1} 1 1 1") < output.index(f"{SHA2} 2 2 1")
        second = _block_for(output, SHA2)
        assert second[-1] == "\t"
        assert second[-2] == "filename "
        assert output.endswith("\t\n")

    def test_show_email_does_not_change_porcelain(self):
        plain = OutputFormatter(porcelain=True).format([_approved()])
        with_email = OutputFormatter(porcelain=True, show_email=True).format([_approved()])
        assert plain == with_email
