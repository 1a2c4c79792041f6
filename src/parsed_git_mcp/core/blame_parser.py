from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from .errors import FileNotBlamableError
from .models import BlameCommit, BlameInfo, BlameLine

_HEADER_RE = re.compile(r"^([0-9a-f]{40}|[0-9a-f]{64}) (\d+) (\d+)(?: (\d+))?$")
_TZ_RE = re.compile(r"^([+-])(\d{2})(\d{2})$")


@dataclass
class _CommitMeta:
    author: str = ""
    author_email: str = ""
    author_time: int | None = None
    author_tz: str = "+0000"
    summary: str = ""

    def date(self) -> datetime:
        tz = timezone.utc
        m = _TZ_RE.match(self.author_tz)
        if m:
            offset = timedelta(hours=int(m.group(2)), minutes=int(m.group(3)))
            tz = timezone(-offset if m.group(1) == "-" else offset)
        return datetime.fromtimestamp(self.author_time or 0, tz=tz)


def parse_blame_porcelain(text: str, file_path: str) -> BlameInfo:
    """
    Parse `git blame --porcelain` output.

    Each group starts with "<hash> <orig-line> <final-line> [<group-size>]".
    Metadata lines (author, author-mail, ...) follow only the first time a
    commit is mentioned; later groups for the same hash inherit them. Each
    line's content follows, prefixed with a TAB.

    Blame is read as a whole: the final line numbers must be exactly 1..N,
    otherwise FileNotBlamableError is raised.
    """
    meta: dict[str, _CommitMeta] = {}
    pending: tuple[str, int, int] | None = None
    parsed: list[tuple[int, str, str, bool]] = []

    for raw in text.split("\n"):
        if pending is None:
            if not raw:
                continue
            m = _HEADER_RE.match(raw)
            if not m:
                raise FileNotBlamableError(file_path, f"unexpected line outside a blame group: {raw!r}")
            commit_hash = m.group(1)
            meta.setdefault(commit_hash, _CommitMeta())
            pending = (commit_hash, int(m.group(2)), int(m.group(3)))
            continue

        commit_hash, orig_line, final_line = pending
        if raw.startswith("\t"):
            parsed.append((final_line, commit_hash, raw[1:], orig_line == final_line))
            pending = None
            continue

        key, _, value = raw.partition(" ")
        info = meta[commit_hash]
        if key == "author":
            info.author = value
        elif key == "author-mail":
            info.author_email = value.strip("<>")
        elif key == "author-time":
            try:
                info.author_time = int(value)
            except ValueError as e:
                raise FileNotBlamableError(file_path, f"bad author-time {value!r}") from e
        elif key == "author-tz":
            info.author_tz = value
        elif key == "summary":
            info.summary = value
        # committer*, previous, filename, boundary: not needed

    if pending is not None:
        raise FileNotBlamableError(file_path, f"blame group for {pending[0][:7]} has no content line")

    parsed.sort(key=lambda t: t[0])
    for expected, (line_number, commit_hash, _content, _orig) in enumerate(parsed, start=1):
        if line_number != expected:
            raise FileNotBlamableError(
                file_path, f"line numbers are not contiguous: expected {expected}, got {line_number}"
            )
        if meta[commit_hash].author_time is None:
            raise FileNotBlamableError(file_path, f"no metadata for commit {commit_hash[:7]}")

    commits = {
        h: BlameCommit(
            commit_hash=h,
            author=m.author,
            author_email=m.author_email,
            date=m.date(),
            summary=m.summary,
        )
        for h, m in meta.items()
    }
    lines = [
        BlameLine(
            line_number=line_number,
            commit_hash=commit_hash,
            author=commits[commit_hash].author,
            author_email=commits[commit_hash].author_email,
            date=commits[commit_hash].date,
            content=content,
            is_original=is_original,
        )
        for line_number, commit_hash, content, is_original in parsed
    ]
    return BlameInfo(file_path=file_path, lines=lines, commits=commits)
