from __future__ import annotations

from datetime import timedelta

import pytest

from parsed_git_mcp.core.blame_parser import parse_blame_porcelain
from parsed_git_mcp.core.errors import FileNotBlamableError

H1 = "1" * 40
H2 = "2" * 40


def _meta(author: str, email: str, ts: int, tz: str, summary: str) -> list[str]:
    return [
        f"author {author}",
        f"author-mail <{email}>",
        f"author-time {ts}",
        f"author-tz {tz}",
        f"committer {author}",
        f"committer-mail <{email}>",
        f"committer-time {ts}",
        f"committer-tz {tz}",
        f"summary {summary}",
        "filename app.py",
    ]


PORCELAIN = "\n".join(
    [
        f"{H1} 1 1 2",
        *_meta("Alice", "alice@example.com", 1700000000, "+0200", "initial"),
        "\tline one",
        f"{H1} 2 2",
        "\tline two",
        f"{H2} 2 3 1",
        *_meta("Bob", "bob@example.com", 1700003600, "-0500", "tweak"),
        "previous " + H1 + " app.py",
        "\tline three",
    ]
) + "\n"


def test_parse_blame_inherits_metadata_for_repeated_hash():
    info = parse_blame_porcelain(PORCELAIN, "app.py")

    assert [ln.line_number for ln in info.lines] == [1, 2, 3]
    assert [ln.content for ln in info.lines] == ["line one", "line two", "line three"]
    assert info.lines[1].author == "Alice"
    assert info.lines[1].author_email == "alice@example.com"
    assert info.lines[2].author == "Bob"


def test_parse_blame_dates_are_timezone_aware():
    info = parse_blame_porcelain(PORCELAIN, "app.py")

    alice = info.lines[0].date
    bob = info.lines[2].date
    assert alice.utcoffset() == timedelta(hours=2)
    assert bob.utcoffset() == timedelta(hours=-5)
    assert alice.timestamp() == 1700000000


def test_parse_blame_commit_map_and_helpers():
    info = parse_blame_porcelain(PORCELAIN, "app.py")

    assert set(info.commits) == {H1, H2}
    assert info.commits[H2].summary == "tweak"
    assert info.unique_authors == ["Alice", "Bob"]
    assert info.unique_commits == [H1, H2]
    assert len(info.lines_for_commit(H1)) == 2
    assert [ln.line_number for ln in info.lines_for_author("Bob")] == [3]
    assert info.lines[0].short_hash == "1111111"


def test_is_original_compares_line_numbers():
    info = parse_blame_porcelain(PORCELAIN, "app.py")

    assert info.lines[0].is_original is True
    assert info.lines[2].is_original is False


def test_gap_in_line_numbers_is_not_blamable():
    text = "\n".join(
        [
            f"{H1} 1 1 1",
            *_meta("Alice", "a@x", 1700000000, "+0000", "s"),
            "\tone",
            f"{H1} 3 3 1",
            "\tthree",
        ]
    )
    with pytest.raises(FileNotBlamableError, match="not contiguous"):
        parse_blame_porcelain(text, "f.txt")


def test_duplicate_line_number_is_not_blamable():
    text = "\n".join(
        [
            f"{H1} 1 1 1",
            *_meta("Alice", "a@x", 1700000000, "+0000", "s"),
            "\tone",
            f"{H1} 1 1 1",
            "\tone again",
        ]
    )
    with pytest.raises(FileNotBlamableError):
        parse_blame_porcelain(text, "f.txt")


def test_header_without_content_is_not_blamable():
    text = "\n".join([f"{H1} 1 1 1", *_meta("Alice", "a@x", 1700000000, "+0000", "s")])
    with pytest.raises(FileNotBlamableError, match="no content line"):
        parse_blame_porcelain(text, "f.txt")


def test_hash_without_metadata_is_not_blamable():
    text = "\n".join([f"{H1} 1 1 1", "\tone"])
    with pytest.raises(FileNotBlamableError, match="no metadata"):
        parse_blame_porcelain(text, "f.txt")


def test_empty_file_blames_to_nothing():
    info = parse_blame_porcelain("", "empty.txt")
    assert info.lines == []


def test_blame_real_repo(tmp_git_repo, commit_file):
    from parsed_git_mcp.core.engine import GitEngine

    commit_file(tmp_git_repo, "README.md", "# dummy\nsecond line\n", "add line")

    info = GitEngine(tmp_git_repo).blame("README.md")

    assert [ln.line_number for ln in info.lines] == [1, 2]
    assert info.lines[1].content == "second line"
    assert info.unique_authors == ["CI"]
    assert len(info.unique_commits) == 2


def test_blame_untracked_file_raises(tmp_git_repo, make_change):
    from parsed_git_mcp.core.engine import GitEngine

    make_change("untracked.txt", "x\n")
    with pytest.raises(FileNotBlamableError):
        GitEngine(tmp_git_repo).blame("untracked.txt")
