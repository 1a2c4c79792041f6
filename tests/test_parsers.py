from __future__ import annotations

import pytest


def test_parse_status_porcelain_basic():
    from parsed_git_mcp.core.parsers import parse_status_porcelain

    raw = "\n".join(
        [
            " M README.md",
            "A  src/new.py",
            "?? notes.txt",
        ]
    )

    out = parse_status_porcelain(raw.splitlines())

    assert isinstance(out, list)
    assert len(out) == 3

    assert out[0].path == "README.md"
    assert out[0].xy == " M"
    assert out[0].change_kind == "modified"
    assert out[0].is_staged is False

    assert out[1].path == "src/new.py"
    assert out[1].change_kind == "added"
    assert out[1].is_staged is True

    assert out[2].path == "notes.txt"
    assert out[2].change_kind == "untracked"


def test_parse_status_porcelain_rename_parses_old_path():
    from parsed_git_mcp.core.parsers import parse_status_porcelain

    out = parse_status_porcelain(["R  old.txt -> new.txt"])

    assert len(out) == 1
    assert out[0].change_kind == "renamed"
    assert out[0].old_path == "old.txt"
    assert out[0].path == "new.txt"
    assert out[0].is_staged is True


def test_parse_status_porcelain_ignores_empty_lines():
    from parsed_git_mcp.core.parsers import parse_status_porcelain

    out = parse_status_porcelain(["", " M a.txt", ""])
    assert len(out) == 1
    assert out[0].path == "a.txt"
    assert out[0].xy == " M"


def test_staged_and_unstaged_change_yield_two_entries():
    from parsed_git_mcp.core.parsers import parse_status_porcelain

    out = parse_status_porcelain(["MM a.txt"])

    assert [(e.path, e.is_staged, e.change_kind) for e in out] == [
        ("a.txt", True, "modified"),
        ("a.txt", False, "modified"),
    ]


def test_type_change_counts_as_modified():
    from parsed_git_mcp.core.parsers import parse_status_porcelain

    out = parse_status_porcelain([" T link"])
    assert out[0].change_kind == "modified"


@pytest.mark.parametrize(
    "xy, conflict_type",
    [
        ("UU", "content"),
        ("AA", "both_added"),
        ("UD", "modified_deleted"),
        ("DU", "deleted_modified"),
        ("DD", "rename_rename"),
        ("AU", "rename_rename"),
        ("UA", "rename_rename"),
    ],
)
def test_unmerged_codes_yield_single_conflicted_entry(xy, conflict_type):
    from parsed_git_mcp.core.parsers import conflicted_files, parse_status_porcelain

    out = parse_status_porcelain([f"{xy} a.txt"])

    assert len(out) == 1
    assert out[0].is_conflicted is True

    conflicts = conflicted_files(out)
    assert len(conflicts) == 1
    assert conflicts[0].path == "a.txt"
    assert conflicts[0].conflict_type == conflict_type


def test_ignored_only_when_requested():
    from parsed_git_mcp.core.parsers import parse_status_porcelain

    assert parse_status_porcelain(["!! build/"]) == []

    out = parse_status_porcelain(["!! build/"], include_ignored=True)
    assert len(out) == 1
    assert out[0].change_kind == "ignored"


def test_malformed_and_unknown_lines_are_skipped():
    from parsed_git_mcp.core.parsers import parse_status_porcelain

    out = parse_status_porcelain(["garbage", "X? weird.txt", " M ok.txt"])

    assert [e.path for e in out] == ["ok.txt"]


def test_duplicate_entries_collapse_to_first():
    from parsed_git_mcp.core.parsers import parse_status_porcelain

    out = parse_status_porcelain([" M a.txt", " D a.txt"])

    assert len(out) == 1
    assert out[0].change_kind == "modified"


def test_arrow_in_plain_filename_is_not_split():
    from parsed_git_mcp.core.parsers import parse_status_porcelain

    out = parse_status_porcelain(["?? a -> b.txt"])

    assert out[0].path == "a -> b.txt"
    assert out[0].old_path is None


def test_quoted_paths_are_unquoted():
    from parsed_git_mcp.core.parsers import parse_status_porcelain

    out = parse_status_porcelain(['?? "caf\\303\\251 menu.txt"', 'R  "old name.txt" -> "new\\tname.txt"'])

    assert out[0].path == "café menu.txt"
    assert out[1].old_path == "old name.txt"
    assert out[1].path == "new\tname.txt"


def test_parse_status_z_two_field_rename():
    from parsed_git_mcp.core.parsers import parse_status_z

    raw = "R  new.txt\0old.txt\0 M other file.txt\0?? x -> y\0"
    out = parse_status_z(raw)

    assert [(e.path, e.old_path, e.change_kind) for e in out] == [
        ("new.txt", "old.txt", "renamed"),
        ("other file.txt", None, "modified"),
        ("x -> y", None, "untracked"),
    ]


def test_unquote_path_handles_escapes():
    from parsed_git_mcp.core.parsers import unquote_path

    assert unquote_path("plain.txt") == "plain.txt"
    assert unquote_path('"a\\"b.txt"') == 'a"b.txt'
    assert unquote_path('"back\\\\slash"') == "back\\slash"
    assert unquote_path('"\\346\\227\\245.txt"') == "日.txt"


def test_diff_summary_from_name_status_counts_and_renames():
    from parsed_git_mcp.core.parsers import diff_summary_from_name_status

    out = diff_summary_from_name_status(["M\ta.txt", "A\tb.txt", "R100\told.txt\tnew.txt", ""])

    assert out["total"] == 3
    assert out["counts"] == {"M": 1, "A": 1, "R": 1}
    assert out["files"][2] == {"status": "R100", "from": "old.txt", "to": "new.txt"}


def test_detect_conflicts_from_unmerged_dedupes():
    from parsed_git_mcp.core.parsers import detect_conflicts_from_unmerged

    assert detect_conflicts_from_unmerged(["a.txt", "a.txt", "", "b.txt"]) == ["a.txt", "b.txt"]
