from __future__ import annotations

from typing import Any

from .common import (
    blame_to_dict,
    clean_lines,
    commit_to_dict,
    diff_to_dict,
    make_engine,
    make_runner,
    to_jsonable,
)
from ..core.models import Diff, DiffOptions
from ..core.parsers import detect_conflicts_from_unmerged, diff_summary_from_name_status


def status(root: str = ".", include_ignored: bool = False, max_entries: int = 500) -> dict[str, Any]:
    """
    Parsed working-tree status: one entry per (path, staged) pair.
    """
    engine = make_engine(root)
    entries = engine.get_status(include_ignored=include_ignored)
    shown = entries[: max(1, int(max_entries))]
    return {
        "entries": to_jsonable(shown),
        "count": len(entries),
        "truncated": len(shown) < len(entries),
        "staged": sum(1 for e in entries if e.is_staged),
        "conflicted": sum(1 for e in entries if e.is_conflicted),
    }


def diff(
    root: str = ".",
    staged: bool = False,
    commit: str | None = None,
    file_path: str | None = None,
    context_lines: int = 3,
    detect_renames: bool = True,
    ignore_whitespace: bool = False,
    ignore_all_whitespace: bool = False,
) -> dict[str, Any]:
    """
    Structured diff of the working tree (or index with staged=True, or
    against `commit`). An untracked `file_path` is reported as a new file.
    """
    engine = make_engine(root)
    opts = DiffOptions(
        context_lines=context_lines,
        detect_renames=detect_renames,
        ignore_whitespace=ignore_whitespace,
        ignore_all_whitespace=ignore_all_whitespace,
        staged=staged,
        commit=commit,
        file_path=file_path,
    )
    result = engine.get_diff(opts)
    if not result.files and file_path and not staged and not commit:
        fd = engine.get_diff_for_file(file_path)
        if fd is not None:
            result = Diff(files=[fd], warnings=result.warnings)
    return diff_to_dict(result)


def diff_summary(
    root: str = ".",
    staged: bool = False,
    against: str | None = None,
) -> dict[str, Any]:
    """
    Returns a summary of changed file names (name-status).
    - staged=True => --cached
    - against="HEAD" (or any ref) => diff against that ref
    """
    r = make_runner(root)

    args = ["diff", "--name-status", "-M"]
    if staged:
        args.append("--cached")
    if against:
        args.append(against)

    res = r.run(args)
    summary = diff_summary_from_name_status(clean_lines(res.stdout))
    return {"summary": summary, "git": res.to_dict()}


def show_commit_diff(commit: str, root: str = ".") -> dict[str, Any]:
    """
    The patch introduced by one commit, parsed.
    """
    engine = make_engine(root)
    return {"commit": commit, **diff_to_dict(engine.get_diff_for_commit(commit))}


def blame(
    file_path: str,
    root: str = ".",
    rev: str | None = None,
    start_line: int | None = None,
    end_line: int | None = None,
) -> dict[str, Any]:
    """
    Per-line attribution for a file. The whole file is always blamed (line
    numbers stay 1..N); start_line/end_line only narrow what is returned.
    """
    engine = make_engine(root)
    info = engine.blame(file_path, rev=rev)
    return blame_to_dict(info, start_line=start_line, end_line=end_line)


def operation_state(root: str = ".") -> dict[str, Any]:
    """
    Which merge/rebase/cherry-pick/revert is in progress, what is conflicted,
    and which actions can be taken next.
    """
    return make_engine(root).inspect_operation().to_dict()


def detect_conflicts(root: str = ".") -> dict[str, Any]:
    """
    Detect merge conflicts (unmerged paths), with the kind of each conflict.
    """
    r = make_runner(root)
    res = r.run(["diff", "--name-only", "--diff-filter=U"])
    conflicts = detect_conflicts_from_unmerged(clean_lines(res.stdout))
    typed = make_engine(root).get_conflicted_files()
    return {
        "conflicts": conflicts,
        "count": len(conflicts),
        "files": to_jsonable(typed),
        "git": res.to_dict(),
    }


def history(
    root: str = ".",
    limit: int = 50,
    ref: str | None = None,
    all_refs: bool = False,
    file_path: str | None = None,
) -> dict[str, Any]:
    """
    Commit log, newest first. `ref` picks the starting point (default HEAD);
    all_refs=True walks every branch and tag instead.
    """
    commits = make_engine(root).get_history(limit, ref=ref, all_refs=all_refs, path=file_path)
    return {"commits": [commit_to_dict(c) for c in commits], "count": len(commits)}


def show_commit(commit: str, root: str = ".") -> dict[str, Any]:
    return commit_to_dict(make_engine(root).get_commit(commit))


def branches(root: str = ".", include_remote: bool = True) -> dict[str, Any]:
    """
    Local (and remote-tracking) branches with upstream and ahead/behind.
    """
    found = make_engine(root).list_branches(include_remote=include_remote)
    current = next((b.name for b in found if b.is_current), None)
    return {"branches": to_jsonable(found), "current": current, "count": len(found)}


def tags(root: str = ".") -> dict[str, Any]:
    found = make_engine(root).list_tags()
    return {"tags": to_jsonable(found), "count": len(found)}


def ahead_behind(root: str = ".", branch: str | None = None) -> dict[str, Any]:
    """
    How far a branch (default: current) is ahead of / behind its upstream.
    `tracking` is None when no upstream is configured.
    """
    tracking = make_engine(root).get_ahead_behind(branch)
    if tracking is None:
        return {"branch": branch, "tracking": None}
    return {
        "branch": branch,
        "tracking": {**to_jsonable(tracking), "has_changes": tracking.has_changes},
    }


def stashes(root: str = ".") -> dict[str, Any]:
    entries = make_engine(root).list_stashes()
    return {
        "stashes": [{**to_jsonable(e), "ref": e.ref} for e in entries],
        "count": len(entries),
    }


def stash_diff(root: str = ".", index: int = 0) -> dict[str, Any]:
    """
    What a stash entry changed, parsed like any other diff.
    """
    engine = make_engine(root)
    return {"stash": f"stash@{{{index}}}", **diff_to_dict(engine.get_stash_diff(index))}
