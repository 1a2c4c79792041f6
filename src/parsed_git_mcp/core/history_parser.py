"""
Parsers for commit history, branch/tag listings and the stash reflog.

Every format requested from git separates fields with US (0x1f) and, where a
field can span lines, records with RS (0x1e), so subjects and bodies may hold
any printable text.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime

from .models import Branch, Commit, StashEntry, Tag

logger = logging.getLogger(__name__)

_US = "\x1f"
_RS = "\x1e"

# `git log` / `git show -s` pretty format
COMMIT_FORMAT = "%x1f".join(
    ["%H", "%h", "%an", "%ae", "%aI", "%cn", "%ce", "%cI", "%P", "%D", "%s", "%b"]
) + "%x1e"
_COMMIT_FIELDS = 12

# ref-filter formats (`git branch` / `git tag`) spell hex escapes as %xx
BRANCH_FORMAT = "%1f".join(
    [
        "%(refname)",
        "%(refname:short)",
        "%(objectname)",
        "%(upstream:short)",
        "%(upstream:track,nobracket)",
        "%(HEAD)",
        "%(symref)",
    ]
)
TAG_FORMAT = "%1f".join(
    [
        "%(refname:short)",
        "%(objecttype)",
        "%(objectname)",
        "%(*objectname)",
        "%(taggername)",
        "%(taggeremail)",
        "%(taggerdate:iso-strict)",
        "%(contents:subject)",
    ]
)

# `git log -g refs/stash`
STASH_FORMAT = "%gd%x1f%gs%x1f%aI"

_TRACK_RE = re.compile(r"(ahead|behind) (\d+)")
_STASH_INDEX_RE = re.compile(r"@\{(\d+)\}$")
_STASH_BRANCH_RE = re.compile(r"^(?:WIP on|On) (.+?): ")


def _parse_iso(value: str) -> datetime | None:
    value = value.strip()
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_commit_log(text: str) -> list[Commit]:
    """
    Parse `git log --format=COMMIT_FORMAT` (or `git show -s`) output.
    Records with too few fields or an unreadable author date are skipped.
    """
    commits: list[Commit] = []
    for record in text.split(_RS):
        record = record.lstrip("\n")
        if not record.strip():
            continue
        parts = record.split(_US)
        if len(parts) < _COMMIT_FIELDS:
            logger.warning("Log parse: skipped record with %d fields", len(parts))
            continue
        (
            full_hash, short_hash, author, author_email, author_date,
            committer, committer_email, committer_date, parents, refs, subject,
        ) = parts[:11]
        body = _US.join(parts[11:])
        date = _parse_iso(author_date)
        if date is None:
            logger.warning("Log parse: skipped %s with unreadable date %r", full_hash, author_date)
            continue
        commits.append(
            Commit(
                hash=full_hash,
                short_hash=short_hash or full_hash[:7],
                subject=subject,
                author=author,
                author_email=author_email,
                date=date,
                committer=committer or author,
                committer_email=committer_email or author_email,
                committer_date=_parse_iso(committer_date) or date,
                parents=parents.split(),
                refs=[r.strip() for r in refs.split(",") if r.strip()],
                body=body.strip(),
            )
        )
    return commits


def parse_track(value: str) -> tuple[int, int, bool]:
    """
    "%(upstream:track,nobracket)" -> (ahead, behind, gone).
    "ahead 2, behind 1" -> (2, 1, False); "gone" -> (0, 0, True).
    """
    value = value.strip()
    if value == "gone":
        return 0, 0, True
    counts = {kind: int(n) for kind, n in _TRACK_RE.findall(value)}
    return counts.get("ahead", 0), counts.get("behind", 0), False


def parse_branch_list(text: str) -> list[Branch]:
    """
    Parse `git branch -a --format=BRANCH_FORMAT`. Symbolic refs such as
    origin/HEAD and the detached-HEAD pseudo entry are left out.
    """
    branches: list[Branch] = []
    for line in text.splitlines():
        parts = line.split(_US)
        if len(parts) < 7:
            continue
        refname, short, objectname, upstream, track, head, symref = parts[:7]
        if symref or not refname.startswith("refs/"):
            continue
        ahead, behind, gone = parse_track(track)
        branches.append(
            Branch(
                name=short,
                commit_hash=objectname,
                is_current=head.strip() == "*",
                is_remote=refname.startswith("refs/remotes/"),
                upstream=upstream or None,
                ahead=ahead,
                behind=behind,
                upstream_gone=gone,
            )
        )
    return branches


def parse_tag_list(text: str) -> list[Tag]:
    """
    Parse `git tag -l --format=TAG_FORMAT`. An annotated tag points at a tag
    object; its commit is the peeled `*objectname`.
    """
    tags: list[Tag] = []
    for line in text.splitlines():
        parts = line.split(_US)
        if len(parts) < 8:
            continue
        name, objecttype, objectname, peeled, tagger, email, date, subject = parts[:7] + [_US.join(parts[7:])]
        annotated = objecttype == "tag"
        tags.append(
            Tag(
                name=name,
                commit_hash=(peeled or objectname) if annotated else objectname,
                is_annotated=annotated,
                message=subject if annotated else None,
                tagger_name=tagger or None,
                tagger_email=email.strip("<>") or None,
                date=_parse_iso(date),
            )
        )
    return tags


def parse_stash_list(text: str) -> list[StashEntry]:
    """
    Parse `git log -g --format=STASH_FORMAT refs/stash`.
    "stash@{1}\\x1fOn main: wip\\x1f<date>" -> StashEntry(1, "On main: wip", "main", date).
    """
    entries: list[StashEntry] = []
    for line in text.splitlines():
        parts = line.split(_US)
        if len(parts) < 3:
            continue
        m = _STASH_INDEX_RE.search(parts[0].strip())
        if not m:
            continue
        message = parts[1]
        branch = _STASH_BRANCH_RE.match(message)
        entries.append(
            StashEntry(
                index=int(m.group(1)),
                message=message,
                branch=branch.group(1) if branch else None,
                date=_parse_iso(parts[2]),
            )
        )
    return entries


def parse_left_right_counts(text: str) -> tuple[int, int] | None:
    """`git rev-list --left-right --count A...B` -> (only in A, only in B)."""
    parts = text.split()
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None
