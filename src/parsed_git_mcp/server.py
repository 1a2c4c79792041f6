from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP
from rich.console import Console
from rich.logging import RichHandler

from parsed_git_mcp.core.config import get_settings
from parsed_git_mcp.resources import diff_range
from parsed_git_mcp.tools import (
    abort_operation,
    accept_current,
    accept_incoming,
    ahead_behind,
    blame,
    branches,
    cherry_pick,
    continue_operation,
    detect_conflicts,
    diff,
    diff_summary,
    fetch,
    history,
    mark_resolved,
    merge,
    operation_state,
    pull,
    push,
    rebase,
    reset,
    revert,
    show_commit,
    show_commit_diff,
    skip_operation,
    stash_apply,
    stash_diff,
    stashes,
    status,
    tags,
)

mcp = FastMCP("parsed-git-mcp")


# --- read ---------------------------------------------------------------

@mcp.tool()
def status_tool(root: str = ".", include_ignored: bool = False, max_entries: int = 500) -> dict:
    return status(root=root, include_ignored=include_ignored, max_entries=max_entries)


@mcp.tool()
def diff_tool(
    root: str = ".",
    staged: bool = False,
    commit: str | None = None,
    file_path: str | None = None,
    context_lines: int = 3,
    detect_renames: bool = True,
    ignore_whitespace: bool = False,
    ignore_all_whitespace: bool = False,
) -> dict:
    return diff(
        root=root,
        staged=staged,
        commit=commit,
        file_path=file_path,
        context_lines=context_lines,
        detect_renames=detect_renames,
        ignore_whitespace=ignore_whitespace,
        ignore_all_whitespace=ignore_all_whitespace,
    )


@mcp.tool()
def diff_summary_tool(root: str = ".", staged: bool = False, against: str | None = None) -> dict:
    return diff_summary(root=root, staged=staged, against=against)


@mcp.tool()
def diff_range_tool(root: str = ".", base: str = "HEAD~1", head: str = "HEAD", triple_dot: bool = False) -> dict:
    return diff_range(root=root, base=base, head=head, triple_dot=triple_dot)


@mcp.tool()
def show_commit_diff_tool(commit: str, root: str = ".") -> dict:
    return show_commit_diff(commit=commit, root=root)


@mcp.tool()
def blame_tool(
    file_path: str,
    root: str = ".",
    rev: str | None = None,
    start_line: int | None = None,
    end_line: int | None = None,
) -> dict:
    return blame(file_path=file_path, root=root, rev=rev, start_line=start_line, end_line=end_line)


@mcp.tool()
def operation_state_tool(root: str = ".") -> dict:
    return operation_state(root=root)


@mcp.tool()
def detect_conflicts_tool(root: str = ".") -> dict:
    return detect_conflicts(root=root)


@mcp.tool()
def history_tool(
    root: str = ".",
    limit: int = 50,
    ref: str | None = None,
    all_refs: bool = False,
    file_path: str | None = None,
) -> dict:
    return history(root=root, limit=limit, ref=ref, all_refs=all_refs, file_path=file_path)


@mcp.tool()
def show_commit_tool(commit: str, root: str = ".") -> dict:
    return show_commit(commit=commit, root=root)


@mcp.tool()
def branches_tool(root: str = ".", include_remote: bool = True) -> dict:
    return branches(root=root, include_remote=include_remote)


@mcp.tool()
def tags_tool(root: str = ".") -> dict:
    return tags(root=root)


@mcp.tool()
def ahead_behind_tool(root: str = ".", branch: str | None = None) -> dict:
    return ahead_behind(root=root, branch=branch)


@mcp.tool()
def stashes_tool(root: str = ".") -> dict:
    return stashes(root=root)


@mcp.tool()
def stash_diff_tool(root: str = ".", index: int = 0) -> dict:
    return stash_diff(root=root, index=index)


# --- mutating -----------------------------------------------------------

@mcp.tool()
def fetch_tool(root: str = ".", remote: str | None = None, prune: bool = False) -> dict:
    return fetch(root=root, remote=remote, prune=prune)


@mcp.tool()
def pull_tool(root: str = ".", remote: str | None = None, branch: str | None = None, strategy: str = "merge") -> dict:
    return pull(root=root, remote=remote, branch=branch, strategy=strategy)


@mcp.tool()
def push_tool(
    root: str = ".",
    remote: str = "origin",
    branch: str | None = None,
    force: bool = False,
    force_with_lease: bool = True,
    set_upstream: bool = False,
    push_tags: bool = False,
    tags: list[str] | None = None,
) -> dict:
    return push(
        root=root,
        remote=remote,
        branch=branch,
        force=force,
        force_with_lease=force_with_lease,
        set_upstream=set_upstream,
        push_tags=push_tags,
        tags=tags,
    )


@mcp.tool()
def merge_tool(branch: str, root: str = ".", strategy: str = "merge", message: str | None = None) -> dict:
    return merge(root=root, branch=branch, strategy=strategy, message=message)


@mcp.tool()
def rebase_tool(onto: str, root: str = ".") -> dict:
    return rebase(root=root, onto=onto)


@mcp.tool()
def cherry_pick_tool(commit: str, root: str = ".") -> dict:
    return cherry_pick(root=root, commit=commit)


@mcp.tool()
def revert_tool(commit: str, root: str = ".") -> dict:
    return revert(root=root, commit=commit)


@mcp.tool()
def reset_tool(root: str = ".", target: str = "HEAD", mode: str = "mixed") -> dict:
    return reset(root=root, target=target, mode=mode)


@mcp.tool()
def continue_operation_tool(root: str = ".") -> dict:
    return continue_operation(root=root)


@mcp.tool()
def abort_operation_tool(root: str = ".") -> dict:
    return abort_operation(root=root)


@mcp.tool()
def skip_operation_tool(root: str = ".") -> dict:
    return skip_operation(root=root)


@mcp.tool()
def accept_current_tool(path: str, root: str = ".") -> dict:
    return accept_current(path=path, root=root)


@mcp.tool()
def accept_incoming_tool(path: str, root: str = ".") -> dict:
    return accept_incoming(path=path, root=root)


@mcp.tool()
def mark_resolved_tool(path: str, root: str = ".") -> dict:
    return mark_resolved(path=path, root=root)


@mcp.tool()
def stash_apply_tool(root: str = ".", index: int = 0, pop: bool = False) -> dict:
    return stash_apply(root=root, index=index, pop=pop)


def main() -> None:
    # stdout carries the stdio transport; logs go to stderr
    logging.basicConfig(
        level=get_settings().LOG_LEVEL.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )
    mcp.run()


if __name__ == "__main__":
    main()
