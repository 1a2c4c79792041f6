from __future__ import annotations

import logging
import re
from dataclasses import replace

from .models import Diff, DiffLine, DiffLineType, FileDiff, Hunk
from .parsers import unquote_path

logger = logging.getLogger(__name__)


_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(?: (.*))?$")
_SIMILARITY_RE = re.compile(r"^similarity index (\d+)%$")
_BLOCK_PREFIXES = ("diff --git ", "diff --cc ", "diff --combined ")


def classify_line(line: str) -> DiffLineType:
    """
    Classify one raw diff body line. Total: anything unrecognised is context.
    """
    if line.startswith("@@ "):
        return "hunk_header"
    if line.startswith("\\ "):
        return "no_newline"
    if line.startswith("+"):
        return "addition"
    if line.startswith("-"):
        return "deletion"
    return "context"


def parse_hunk_header(line: str) -> tuple[int, int, int, int, str | None] | None:
    """
    "@@ -1,5 +1,7 @@ def foo():" -> (1, 5, 1, 7, "def foo():").
    A range without a count ("-3") means a count of 1.
    """
    m = _HUNK_RE.match(line.rstrip("\r"))
    if not m:
        return None
    old_start = int(m.group(1))
    old_count = int(m.group(2)) if m.group(2) is not None else 1
    new_start = int(m.group(3))
    new_count = int(m.group(4)) if m.group(4) is not None else 1
    return old_start, old_count, new_start, new_count, m.group(5)


def _take_quoted(s: str) -> tuple[str, str]:
    """Split a leading C-quoted token off `s`. Returns (token, remainder)."""
    i = 1
    while i < len(s):
        if s[i] == "\\":
            i += 2
            continue
        if s[i] == '"':
            return s[: i + 1], s[i + 1:].lstrip(" ")
        i += 1
    return s, ""


def _strip_prefix(path: str, prefix: str) -> str:
    return path[len(prefix):] if path.startswith(prefix) else path


def split_git_header_paths(rest: str) -> tuple[str, str]:
    """
    Paths from the part of a `diff --git` line after the marker. Handles
    quoted paths and unquoted paths containing spaces.
    """
    if rest.startswith('"'):
        a, b = _take_quoted(rest)
    elif rest.endswith('"') and ' "' in rest:
        idx = rest.rfind(' "')
        a, b = rest[:idx], rest[idx + 1:]
    else:
        n = len(rest)
        mid = n // 2
        if n % 2 == 1 and rest[mid] == " " and rest[2:mid] == rest[mid + 3:]:
            a, b = rest[:mid], rest[mid + 1:]
        elif " b/" in rest:
            idx = rest.find(" b/")
            a, b = rest[:idx], rest[idx + 1:]
        else:
            a, _, b = rest.partition(" ")
    return _strip_prefix(unquote_path(a), "a/"), _strip_prefix(unquote_path(b), "b/")


def _marker_path(value: str, prefix: str) -> str | None:
    """Path from a `---`/`+++` line value; None for /dev/null."""
    if not value.startswith('"'):
        value = value.split("\t", 1)[0]
    value = unquote_path(value)
    if value == "/dev/null":
        return None
    return _strip_prefix(value, prefix)


class _HunkBuilder:
    def __init__(self, old_start: int, old_count: int, new_start: int, new_count: int, header: str | None) -> None:
        self.old_start = old_start
        self.old_count = old_count
        self.new_start = new_start
        self.new_count = new_count
        self.header = header
        self.lines: list[DiffLine] = []
        self.old_seen = 0
        self.new_seen = 0

    @property
    def complete(self) -> bool:
        return self.old_seen >= self.old_count and self.new_seen >= self.new_count

    def add(self, raw: str) -> None:
        kind = classify_line(raw)
        if kind == "no_newline":
            if self.lines:
                self.lines[-1] = replace(self.lines[-1], has_trailing_newline=False)
            self.lines.append(DiffLine(kind="no_newline", content=raw))
            return

        old_no = self.old_start + self.old_seen
        new_no = self.new_start + self.new_seen
        if kind == "addition":
            self.lines.append(DiffLine(kind="addition", content=raw[1:], new_line_number=new_no))
            self.new_seen += 1
        elif kind == "deletion":
            self.lines.append(DiffLine(kind="deletion", content=raw[1:], old_line_number=old_no))
            self.old_seen += 1
        else:
            content = raw[1:] if raw.startswith(" ") else raw
            self.lines.append(
                DiffLine(kind="context", content=content, old_line_number=old_no, new_line_number=new_no)
            )
            self.old_seen += 1
            self.new_seen += 1

    def build(self) -> Hunk:
        return Hunk(
            old_start=self.old_start,
            old_count=self.old_count,
            new_start=self.new_start,
            new_count=self.new_count,
            header=self.header,
            lines=list(self.lines),
        )


def _parse_file_block(block: list[str], warnings: list[str]) -> FileDiff:
    old_path, new_path = split_git_header_paths(block[0][len("diff --git "):])
    is_binary = False
    is_new_file = False
    is_deleted_file = False
    is_copy = False
    file_mode: str | None = None
    similarity: int | None = None

    hunks: list[Hunk] = []
    current: _HunkBuilder | None = None
    skipping = False
    in_header = True

    def finish() -> None:
        nonlocal current
        if current is None:
            return
        hunk = current.build()
        if not current.complete:
            # typically output cut off by the runner ceiling
            msg = (
                f"{new_path or old_path}: dropped hunk {hunk.header_line} that ends early "
                f"(body has -{current.old_seen}/+{current.new_seen} lines)"
            )
            logger.warning("Diff parse: %s", msg)
            warnings.append(msg)
        else:
            hunks.append(hunk)
        current = None

    for line in block[1:]:
        if line.startswith("@@"):
            finish()
            in_header = False
            parsed = parse_hunk_header(line)
            if parsed is None:
                msg = f"{new_path or old_path}: malformed hunk header {line!r}"
                logger.warning("Diff parse: %s", msg)
                warnings.append(msg)
                skipping = True
                continue
            skipping = False
            current = _HunkBuilder(*parsed)
            continue

        if in_header:
            if line.startswith("--- "):
                p = _marker_path(line[4:], "a/")
                if p is not None:
                    old_path = p
            elif line.startswith("+++ "):
                p = _marker_path(line[4:], "b/")
                if p is not None:
                    new_path = p
            elif line.startswith("new file mode "):
                is_new_file = True
                file_mode = line[len("new file mode "):].strip()
            elif line.startswith("deleted file mode "):
                is_deleted_file = True
                file_mode = line[len("deleted file mode "):].strip()
            elif line.startswith("new mode "):
                file_mode = line[len("new mode "):].strip()
            elif line.startswith("index "):
                parts = line.split()
                if file_mode is None and len(parts) >= 3:
                    file_mode = parts[2]
            elif line.startswith("rename from "):
                old_path = unquote_path(line[len("rename from "):])
            elif line.startswith("rename to "):
                new_path = unquote_path(line[len("rename to "):])
            elif line.startswith("copy from "):
                is_copy = True
                old_path = unquote_path(line[len("copy from "):])
            elif line.startswith("copy to "):
                is_copy = True
                new_path = unquote_path(line[len("copy to "):])
            elif line.startswith("similarity index "):
                m = _SIMILARITY_RE.match(line.strip())
                if m:
                    similarity = int(m.group(1))
            elif line.startswith("Binary files ") or line.startswith("GIT binary patch"):
                is_binary = True
            continue

        if skipping or current is None:
            continue

        if line == "" or line == "\r":
            # git prefixes every body line, so a bare blank is an artefact
            continue

        if current.complete and classify_line(line) != "no_newline":
            msg = f"{new_path or old_path}: ignored line after complete hunk: {line!r}"
            logger.warning("Diff parse: %s", msg)
            warnings.append(msg)
            continue

        current.add(line)

    finish()

    return FileDiff(
        old_path=old_path,
        new_path=new_path,
        hunks=hunks,
        is_binary=is_binary,
        is_new_file=is_new_file,
        is_deleted_file=is_deleted_file,
        file_mode=file_mode,
        is_copy=is_copy,
        similarity=similarity,
    )


def split_file_blocks(text: str) -> list[list[str]]:
    """Group raw diff lines into per-file blocks, each starting with its `diff ` marker."""
    blocks: list[list[str]] = []
    current: list[str] | None = None
    for line in text.split("\n"):
        if line.startswith(_BLOCK_PREFIXES):
            current = [line]
            blocks.append(current)
        elif current is not None:
            current.append(line)
    return blocks


def parse_diff(text: str) -> Diff:
    """
    Parse (possibly multi-file) unified diff text as produced by `git diff`
    or `git show --format= -p`. Never raises on malformed input: a bad hunk is
    dropped and reported in Diff.warnings.
    """
    if not text:
        return Diff(raw_output=text)

    files: list[FileDiff] = []
    warnings: list[str] = []
    for block in split_file_blocks(text):
        if not block[0].startswith("diff --git "):
            msg = f"skipped unsupported combined diff block: {block[0]!r}"
            logger.warning("Diff parse: %s", msg)
            warnings.append(msg)
            continue
        files.append(_parse_file_block(block, warnings))

    return Diff(files=files, raw_output=text, warnings=warnings)


def synthesize_new_file_diff(path: str, text: str | None) -> FileDiff:
    """
    Build the diff git would show for an untracked file: every line an
    addition. `text=None` means the content could not be decoded (binary).
    """
    if text is None:
        return FileDiff(old_path=path, new_path=path, is_binary=True, is_new_file=True)
    if text == "":
        return FileDiff(old_path=path, new_path=path, is_new_file=True)

    raw_lines = text.split("\n")
    ends_with_newline = raw_lines[-1] == ""
    if ends_with_newline:
        raw_lines = raw_lines[:-1]

    lines = [
        DiffLine(kind="addition", content=content, new_line_number=i + 1)
        for i, content in enumerate(raw_lines)
    ]
    if not ends_with_newline:
        lines[-1] = replace(lines[-1], has_trailing_newline=False)
        lines.append(DiffLine(kind="no_newline", content="\\ No newline at end of file"))

    hunk = Hunk(old_start=0, old_count=0, new_start=1, new_count=len(raw_lines), lines=lines)
    return FileDiff(old_path=path, new_path=path, hunks=[hunk], is_new_file=True)
