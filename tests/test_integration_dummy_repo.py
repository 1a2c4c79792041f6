from __future__ import annotations

from pathlib import Path

import pytest

from parsed_git_mcp.core.errors import GitExecutionError, GitPolicyError


def test_integration_status_diff_and_blame(tmp_git_repo: Path, make_change):
    """
    Sanity integration through the tool layer:
    - status sees a modified and an untracked file
    - diff parses the modification
    - an untracked file_path still yields a diff (all additions)
    - blame attributes every line
    """
    from parsed_git_mcp.server import blame_tool, diff_tool, status_tool

    make_change("README.md", "# dummy\nnew line\n")
    make_change("notes.txt", "one\ntwo\n")

    st = status_tool(root=str(tmp_git_repo))
    kinds = {e["path"]: e["change_kind"] for e in st["entries"]}
    assert kinds == {"README.md": "modified", "notes.txt": "untracked"}

    d = diff_tool(root=str(tmp_git_repo))
    assert [f["display_name"] for f in d["files"]] == ["README.md"]
    hunk = d["files"][0]["hunks"][0]
    assert hunk["header_line"].startswith("@@ -1 +1,2 @@")
    assert [ln["kind"] for ln in hunk["lines"]] == ["context", "addition"]

    untracked = diff_tool(root=str(tmp_git_repo), file_path="notes.txt")
    assert untracked["files"][0]["is_new_file"] is True
    assert untracked["additions"] == 2

    b = blame_tool(file_path="src/app.py", root=str(tmp_git_repo))
    assert b["line_count"] == 1
    assert b["lines"][0]["content"] == "print('hi')"
    assert b["unique_authors"] == ["CI"]


def test_integration_conflict_lifecycle(diverged_repo: Path):
    """
    merge -> conflict reported (not raised) -> resolve -> continue -> clean.
    """
    from parsed_git_mcp.server import (
        accept_incoming_tool,
        continue_operation_tool,
        merge_tool,
        operation_state_tool,
    )

    root = str(diverged_repo)

    merged = merge_tool(branch="feature", root=root)
    assert merged["result"]["success"] is False
    assert merged["result"]["conflicting_files"] == ["a.txt"]
    assert merged["operation"]["state"]["operation"] == "merge"
    assert merged["operation"]["available_actions"] == ["continue", "abort"]

    resolved = accept_incoming_tool(path="a.txt", root=root)
    assert resolved["result"]["success"] is True
    assert resolved["operation"]["conflicted_files"] == []

    done = continue_operation_tool(root=root)
    assert done["result"]["success"] is True
    assert done["operation"]["in_progress"] is False

    assert operation_state_tool(root=root)["state"]["operation"] is None
    assert (diverged_repo / "a.txt").read_text(encoding="utf-8") == "line1\nfeature\n"


def test_integration_rebase_skip_through_tools(diverged_repo: Path, run_git):
    from parsed_git_mcp.server import rebase_tool, skip_operation_tool

    run_git(["git", "checkout", "feature"], diverged_repo)
    root = str(diverged_repo)

    started = rebase_tool(onto="main", root=root)
    assert started["result"]["has_conflicts"] is True
    assert started["operation"]["state"]["operation"] == "rebase"
    assert "skip" in started["operation"]["available_actions"]

    skipped = skip_operation_tool(root=root)
    assert skipped["result"]["success"] is True
    assert skipped["operation"]["in_progress"] is False


def test_integration_reset_and_revert_tools(tmp_git_repo: Path, commit_file):
    from parsed_git_mcp.server import reset_tool, revert_tool

    commit_file(tmp_git_repo, "temp.txt", "t\n", "add temp")
    root = str(tmp_git_repo)

    reverted = revert_tool(commit="HEAD", root=root)
    assert reverted["result"]["success"] is True
    assert not (tmp_git_repo / "temp.txt").exists()

    reset = reset_tool(root=root, target="HEAD~1", mode="hard")
    assert reset["result"]["success"] is True
    assert reset["result"]["summary"] == "Reset (hard) to HEAD~1"
    assert (tmp_git_repo / "temp.txt").exists()


def test_integration_rejects_option_like_refs(tmp_git_repo: Path):
    from parsed_git_mcp.server import merge_tool, show_commit_diff_tool

    with pytest.raises(GitPolicyError):
        merge_tool(branch="--upload-pack=evil", root=str(tmp_git_repo))
    with pytest.raises(GitPolicyError):
        show_commit_diff_tool(commit="-p", root=str(tmp_git_repo))


def test_integration_continue_without_operation(tmp_git_repo: Path):
    from parsed_git_mcp.server import continue_operation_tool

    with pytest.raises(GitExecutionError, match="No operation in progress"):
        continue_operation_tool(root=str(tmp_git_repo))


def test_integration_stash_and_history_tools(tmp_git_repo: Path, make_change, commit_file, run_git):
    from parsed_git_mcp.server import history_tool, stash_apply_tool, stashes_tool

    root = str(tmp_git_repo)
    make_change("README.md", "# stashed\n")
    run_git(["git", "stash", "push", "-m", "readme"], tmp_git_repo)
    commit_file(tmp_git_repo, "README.md", "# committed\n", "edit readme")

    log = history_tool(root=root, limit=5)
    assert [c["subject"] for c in log["commits"]] == ["edit readme", "initial"]

    applied = stash_apply_tool(root=root, index=0, pop=True)
    assert applied["result"]["has_conflicts"] is True
    assert applied["result"]["conflicting_files"] == ["README.md"]
    assert applied["operation"]["state"]["operation"] is None
    assert [c["path"] for c in applied["operation"]["conflicted_files"]] == ["README.md"]
    assert stashes_tool(root=root)["count"] == 1
