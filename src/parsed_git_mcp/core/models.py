from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal


@dataclass(frozen=True)
class GitRunResult:
    argv: list[str]
    root: str
    stdout: str
    stderr: str
    exit_code: int
    duration_ms: int
    timed_out: bool
    output_truncated: bool

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.timed_out

    def to_dict(self) -> dict[str, Any]:
        return {
            "argv": self.argv,
            "root": self.root,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
            "duration_ms": self.duration_ms,
            "timed_out": self.timed_out,
            "output_truncated": self.output_truncated,
        }


# --- diff -------------------------------------------------------------------

DiffLineType = Literal["context", "addition", "deletion", "hunk_header", "no_newline"]

NO_NEWLINE_TEXT = "\\ No newline at end of file"


@dataclass(frozen=True)
class DiffLine:
    kind: DiffLineType
    content: str
    old_line_number: int | None = None
    new_line_number: int | None = None
    has_trailing_newline: bool = True

    @property
    def raw_line(self) -> str:
        if self.kind == "addition":
            return f"+{self.content}"
        if self.kind == "deletion":
            return f"-{self.content}"
        if self.kind == "context":
            return f" {self.content}"
        if self.kind == "no_newline":
            return NO_NEWLINE_TEXT
        return self.content


def _range_text(start: int, count: int) -> str:
    # git omits the count when it is exactly one
    return str(start) if count == 1 else f"{start},{count}"


@dataclass(frozen=True)
class Hunk:
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    header: str | None = None
    lines: list[DiffLine] = field(default_factory=list)

    @property
    def header_line(self) -> str:
        base = f"@@ -{_range_text(self.old_start, self.old_count)} +{_range_text(self.new_start, self.new_count)} @@"
        return f"{base} {self.header}" if self.header is not None else base

    @property
    def additions(self) -> int:
        return sum(1 for ln in self.lines if ln.kind == "addition")

    @property
    def deletions(self) -> int:
        return sum(1 for ln in self.lines if ln.kind == "deletion")


@dataclass(frozen=True)
class FileDiff:
    old_path: str
    new_path: str
    hunks: list[Hunk] = field(default_factory=list)
    is_binary: bool = False
    is_new_file: bool = False
    is_deleted_file: bool = False
    file_mode: str | None = None
    is_copy: bool = False
    similarity: int | None = None

    @property
    def is_renamed(self) -> bool:
        return (
            self.old_path != self.new_path
            and not self.is_new_file
            and not self.is_deleted_file
            and not self.is_copy
        )

    @property
    def path(self) -> str:
        return self.new_path or self.old_path

    @property
    def display_name(self) -> str:
        if self.is_renamed or self.is_copy:
            return f"{self.old_path} -> {self.new_path}"
        return self.path

    @property
    def additions(self) -> int:
        return sum(h.additions for h in self.hunks)

    @property
    def deletions(self) -> int:
        return sum(h.deletions for h in self.hunks)


@dataclass(frozen=True)
class Diff:
    files: list[FileDiff] = field(default_factory=list)
    raw_output: str = ""
    warnings: list[str] = field(default_factory=list)

    @property
    def additions(self) -> int:
        return sum(f.additions for f in self.files)

    @property
    def deletions(self) -> int:
        return sum(f.deletions for f in self.files)

    @property
    def is_empty(self) -> bool:
        return not self.files or all(not f.hunks for f in self.files)


@dataclass(frozen=True)
class DiffOptions:
    """Forwarded to `git diff` as flags; the parser never looks at these."""
    context_lines: int = 3
    detect_renames: bool = True
    ignore_whitespace: bool = False
    ignore_all_whitespace: bool = False
    staged: bool = False
    commit: str | None = None
    file_path: str | None = None

    def diff_args(self) -> list[str]:
        args = ["diff", "--no-color", "--no-ext-diff"]
        if self.staged:
            args.append("--cached")
        args.append(f"-U{max(0, int(self.context_lines))}")
        if self.detect_renames:
            args.append("-M")
        if self.ignore_all_whitespace:
            args.append("-w")
        elif self.ignore_whitespace:
            args.append("-b")
        if self.commit:
            args.append(self.commit)
        if self.file_path:
            args.extend(["--", self.file_path])
        return args


# --- status -----------------------------------------------------------------

ChangeKind = Literal["modified", "added", "deleted", "renamed", "copied", "untracked", "ignored"]


@dataclass(frozen=True)
class FileStatusEntry:
    path: str
    change_kind: ChangeKind
    is_staged: bool = False
    is_conflicted: bool = False
    old_path: str | None = None
    xy: str = ""


ConflictType = Literal["content", "both_added", "modified_deleted", "deleted_modified", "rename_rename"]


@dataclass(frozen=True)
class ConflictedFile:
    path: str
    conflict_type: ConflictType
    xy: str = ""


# --- blame ------------------------------------------------------------------

@dataclass(frozen=True)
class BlameCommit:
    commit_hash: str
    author: str
    author_email: str
    date: datetime
    summary: str = ""


@dataclass(frozen=True)
class BlameLine:
    line_number: int
    commit_hash: str
    author: str
    author_email: str
    date: datetime
    content: str
    is_original: bool = False

    @property
    def short_hash(self) -> str:
        return self.commit_hash[:7]


@dataclass(frozen=True)
class BlameInfo:
    file_path: str
    lines: list[BlameLine] = field(default_factory=list)
    commits: dict[str, BlameCommit] = field(default_factory=dict)

    @property
    def unique_commits(self) -> list[str]:
        return sorted({ln.commit_hash for ln in self.lines})

    @property
    def unique_authors(self) -> list[str]:
        return sorted({ln.author for ln in self.lines})

    def lines_for_commit(self, commit_hash: str) -> list[BlameLine]:
        return [ln for ln in self.lines if ln.commit_hash == commit_hash]

    def lines_for_author(self, author: str) -> list[BlameLine]:
        return [ln for ln in self.lines if ln.author == author]


# --- history ----------------------------------------------------------------

@dataclass(frozen=True)
class Commit:
    hash: str
    short_hash: str
    subject: str
    author: str
    author_email: str
    date: datetime
    committer: str
    committer_email: str
    committer_date: datetime
    parents: list[str] = field(default_factory=list)
    refs: list[str] = field(default_factory=list)
    body: str = ""

    @property
    def message(self) -> str:
        return f"{self.subject}\n\n{self.body}" if self.body else self.subject

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


# --- refs -------------------------------------------------------------------

@dataclass(frozen=True)
class Branch:
    name: str
    commit_hash: str
    is_current: bool = False
    is_remote: bool = False
    upstream: str | None = None
    ahead: int = 0
    behind: int = 0
    upstream_gone: bool = False


@dataclass(frozen=True)
class Tag:
    name: str
    commit_hash: str
    is_annotated: bool = False
    message: str | None = None
    tagger_name: str | None = None
    tagger_email: str | None = None
    date: datetime | None = None


@dataclass(frozen=True)
class RemoteTrackingStatus:
    upstream: str
    ahead: int = 0
    behind: int = 0

    @property
    def has_changes(self) -> bool:
        return self.ahead > 0 or self.behind > 0

    @property
    def is_ahead(self) -> bool:
        return self.ahead > 0

    @property
    def is_behind(self) -> bool:
        return self.behind > 0


@dataclass(frozen=True)
class StashEntry:
    index: int
    message: str
    branch: str | None = None
    date: datetime | None = None

    @property
    def ref(self) -> str:
        return f"stash@{{{self.index}}}"
