from __future__ import annotations

import logging
from typing import Iterable

from .models import ChangeKind, ConflictedFile, ConflictType, FileStatusEntry

logger = logging.getLogger(__name__)


_C_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
    '"': 0x22,
    "\\": 0x5C,
}


def unquote_path(path: str) -> str:
    """
    Undo git's C-style path quoting (core.quotePath): "a\\303\\251.txt" -> "aé.txt".
    Unquoted input is returned unchanged.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path

    body = path[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\" or i + 1 >= len(body):
            out.extend(ch.encode("utf-8"))
            i += 1
            continue
        nxt = body[i + 1]
        if i + 4 <= len(body) and all(c in "01234567" for c in body[i + 1:i + 4]):
            out.append(int(body[i + 1:i + 4], 8) & 0xFF)
            i += 4
        elif nxt in _C_ESCAPES:
            out.append(_C_ESCAPES[nxt])
            i += 2
        else:
            out.extend(nxt.encode("utf-8"))
            i += 2
    return out.decode("utf-8", errors="replace")


# Unmerged XY codes as documented for `git status --porcelain`.
# DD only happens when both sides renamed the same source; AU/UA are the two
# destination paths of that rename/rename.
_UNMERGED: dict[str, ConflictType] = {
    "UU": "content",
    "AA": "both_added",
    "UD": "modified_deleted",
    "DU": "deleted_modified",
    "DD": "rename_rename",
    "AU": "rename_rename",
    "UA": "rename_rename",
}

_KIND_BY_CODE: dict[str, ChangeKind] = {
    "M": "modified",
    "T": "modified",
    "A": "added",
    "D": "deleted",
    "R": "renamed",
    "C": "copied",
}


def is_unmerged(xy: str) -> bool:
    return xy in _UNMERGED


def _conflicted_kind(xy: str) -> ChangeKind:
    if xy == "AA":
        return "added"
    if xy == "DD":
        return "deleted"
    return "modified"


def _entries_for(xy: str, path: str, orig_path: str | None, include_ignored: bool) -> list[FileStatusEntry]:
    index_state, worktree_state = xy[0], xy[1]

    if xy == "??":
        return [FileStatusEntry(path=path, change_kind="untracked", xy=xy)]
    if xy == "!!":
        if not include_ignored:
            return []
        return [FileStatusEntry(path=path, change_kind="ignored", xy=xy)]
    if is_unmerged(xy):
        return [FileStatusEntry(path=path, change_kind=_conflicted_kind(xy), is_conflicted=True, xy=xy)]

    out: list[FileStatusEntry] = []
    if index_state != " ":
        kind = _KIND_BY_CODE.get(index_state)
        if kind is None:
            raise ValueError(f"unknown index state {index_state!r}")
        out.append(
            FileStatusEntry(
                path=path,
                old_path=orig_path if index_state in "RC" else None,
                change_kind=kind,
                is_staged=True,
                xy=xy,
            )
        )
    if worktree_state != " ":
        kind = _KIND_BY_CODE.get(worktree_state)
        if kind is None:
            raise ValueError(f"unknown worktree state {worktree_state!r}")
        out.append(
            FileStatusEntry(
                path=path,
                old_path=orig_path if worktree_state in "RC" else None,
                change_kind=kind,
                is_staged=False,
                xy=xy,
            )
        )
    return out


def _dedupe(entries: Iterable[FileStatusEntry]) -> list[FileStatusEntry]:
    seen: set[tuple[str, bool]] = set()
    out: list[FileStatusEntry] = []
    for e in entries:
        key = (e.path, e.is_staged)
        if key in seen:
            logger.warning("Duplicate status entry for %s (staged=%s) ignored", e.path, e.is_staged)
            continue
        seen.add(key)
        out.append(e)
    return out


def parse_status_porcelain(lines: Iterable[str], *, include_ignored: bool = False) -> list[FileStatusEntry]:
    """
    Parses `git status --porcelain=v1` newline output:
      XY <path>
      XY <old> -> <new>   (rename / copy)
    A line that cannot be understood is skipped; the rest of the snapshot
    still parses.
    """
    out: list[FileStatusEntry] = []
    for raw in lines:
        line = raw.rstrip("\n").rstrip("\r")
        if not line:
            continue
        if len(line) < 4 or line[2] != " ":
            logger.warning("Skipping malformed status line: %r", line)
            continue
        xy = line[:2]
        rest = line[3:]
        orig_path: str | None = None
        if ("R" in xy or "C" in xy) and " -> " in rest:
            a, b = rest.split(" -> ", 1)
            orig_path, path = unquote_path(a), unquote_path(b)
        else:
            path = unquote_path(rest)
        try:
            out.extend(_entries_for(xy, path, orig_path, include_ignored))
        except ValueError as e:
            logger.warning("Skipping status line %r: %s", line, e)
    return _dedupe(out)


def parse_status_z(raw: str, *, include_ignored: bool = False) -> list[FileStatusEntry]:
    """
    Parses `git status --porcelain=v1 -z` output. Records are NUL separated and
    never quoted; renames/copies carry the source path as a second field:
      XY <new>\\0<old>\\0
    """
    fields = raw.split("\0")
    out: list[FileStatusEntry] = []
    i = 0
    while i < len(fields):
        record = fields[i]
        i += 1
        if not record:
            continue
        if len(record) < 4 or record[2] != " ":
            logger.warning("Skipping malformed status record: %r", record)
            continue
        xy = record[:2]
        path = record[3:]
        orig_path: str | None = None
        if "R" in xy or "C" in xy:
            if i < len(fields):
                orig_path = fields[i]
                i += 1
            else:
                logger.warning("Rename record without source path: %r", record)
        try:
            out.extend(_entries_for(xy, path, orig_path, include_ignored))
        except ValueError as e:
            logger.warning("Skipping status record %r: %s", record, e)
    return _dedupe(out)


def conflicted_files(entries: Iterable[FileStatusEntry]) -> list[ConflictedFile]:
    return [
        ConflictedFile(path=e.path, conflict_type=_UNMERGED[e.xy], xy=e.xy)
        for e in entries
        if e.is_conflicted and e.xy in _UNMERGED
    ]


def diff_summary_from_name_status(lines: Iterable[str]) -> dict:
    """
    Parses `git diff --name-status` lines:
      M\\tfile
      A\\tfile
      D\\tfile
      R100\\told\\tnew
    Returns a compact summary.
    """
    files: list[dict] = []
    counts: dict[str, int] = {}
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        parts = line.split("\t")
        code = parts[0]
        counts[code[0]] = counts.get(code[0], 0) + 1
        if code[0] in "RC" and len(parts) >= 3:
            files.append({"status": code, "from": unquote_path(parts[1]), "to": unquote_path(parts[2])})
        else:
            files.append({"status": code, "path": unquote_path(parts[1]) if len(parts) > 1 else ""})
    return {"counts": counts, "files": files, "total": sum(counts.values())}


def detect_conflicts_from_unmerged(lines: Iterable[str]) -> list[str]:
    """
    Parses `git diff --name-only --diff-filter=U` output.
    """
    out: list[str] = []
    for raw in lines:
        p = raw.strip()
        if p:
            p = unquote_path(p)
            if p not in out:
                out.append(p)
    return out
