from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any

from ..core.config import get_settings
from ..core.engine import GitEngine
from ..core.git_runner import SafeGitRunner
from ..core.models import BlameInfo, Commit, Diff, FileDiff
from ..core.security import resolve_root


def make_runner(root: str = ".") -> SafeGitRunner:
    return SafeGitRunner(root=resolve_root(root), config=get_settings().runner_config())


def make_engine(root: str = ".") -> GitEngine:
    return GitEngine(root, runner=make_runner(root))


def clean_lines(s: str) -> list[str]:
    return s.splitlines()


def to_jsonable(obj: Any) -> Any:
    """Dataclasses -> dicts (declared fields only), datetimes -> ISO 8601."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    return obj


def file_diff_to_dict(fd: FileDiff) -> dict[str, Any]:
    out = to_jsonable(fd)
    out.update(
        {
            "is_renamed": fd.is_renamed,
            "display_name": fd.display_name,
            "additions": fd.additions,
            "deletions": fd.deletions,
        }
    )
    for hunk, hunk_dict in zip(fd.hunks, out["hunks"]):
        hunk_dict["header_line"] = hunk.header_line
    return out


def diff_to_dict(diff: Diff, *, include_raw: bool = False) -> dict[str, Any]:
    out: dict[str, Any] = {
        "files": [file_diff_to_dict(f) for f in diff.files],
        "additions": diff.additions,
        "deletions": diff.deletions,
        "is_empty": diff.is_empty,
        "warnings": list(diff.warnings),
    }
    if include_raw:
        out["raw_output"] = diff.raw_output
    return out


def blame_to_dict(info: BlameInfo, *, start_line: int | None = None, end_line: int | None = None) -> dict[str, Any]:
    lines = info.lines
    if start_line is not None or end_line is not None:
        lo = max(1, int(start_line or 1))
        hi = int(end_line) if end_line is not None else len(lines)
        lines = [ln for ln in lines if lo <= ln.line_number <= hi]
    return {
        "file_path": info.file_path,
        "line_count": len(info.lines),
        "lines": to_jsonable(lines),
        "commits": to_jsonable(info.commits),
        "unique_authors": info.unique_authors,
        "unique_commits": info.unique_commits,
    }


def commit_to_dict(commit: Commit) -> dict[str, Any]:
    out = to_jsonable(commit)
    out.update({"message": commit.message, "is_merge": commit.is_merge})
    return out


def result_to_dict(result: Any) -> dict[str, Any]:
    out = to_jsonable(result)
    summary = getattr(result, "summary", None)
    if summary is not None:
        out["summary"] = summary
    return out
