"""
Typed outcome records for git's mutating commands, and the builders that
derive them from (stdout, stderr, exit code).

Every builder is pure: it looks only at captured text. Commit counters that
need another git call are filled in by the engine afterwards.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal, Union

from .errors import AuthenticationError, ConflictError, GitExecutionError, RejectedError

MergeStrategy = Literal["merge", "ff-only", "no-ff", "squash"]
PullStrategy = Literal["merge", "rebase", "ff-only"]
ResetMode = Literal["soft", "mixed", "hard"]

MERGE_STRATEGY_FLAGS: dict[str, str | None] = {
    "merge": None,
    "ff-only": "--ff-only",
    "no-ff": "--no-ff",
    "squash": "--squash",
}
PULL_STRATEGY_FLAGS: dict[str, str] = {
    "merge": "--no-rebase",
    "rebase": "--rebase",
    "ff-only": "--ff-only",
}
RESET_MODES: tuple[str, ...] = ("soft", "mixed", "hard")

_CONFLICT_MARKERS = (
    "CONFLICT (",
    "Automatic merge failed",
    "error: could not apply",
    "error: could not revert",
    "fix conflicts",
    "Resolve all conflicts manually",
    # continue refused while unmerged paths remain
    "because you have unmerged files",
    "Exiting because of an unresolved conflict",
    "You must edit all merge conflicts",
)
_REJECTION_MARKERS = (
    "[rejected]",
    "[remote rejected]",
    "non-fast-forward",
    "stale info",
    "fetch first",
    "Updates were rejected",
    "Not possible to fast-forward",
)
_AUTH_MARKERS = (
    "Authentication failed",
    "Permission denied",
    "could not read Username",
    "could not read Password",
    "terminal prompts disabled",
    "Host key verification failed",
)

_CONFLICT_LINE_RE = re.compile(r"^CONFLICT \(([^)]*)\): (.*)$")
_MERGE_CONFLICT_IN_RE = re.compile(r"Merge conflict in (.+)$")
_RENAMED_TO_RE = re.compile(r"renamed to (.+?) in ")
_DELETE_REASONS = ("modify/delete", "delete/modify")
_SUMMARY_RE = re.compile(
    r"(\d+) files? changed"
    r"(?:, (\d+) insertions?\(\+\))?"
    r"(?:, (\d+) deletions?\(-\))?"
)
_RANGE_RE = re.compile(r"^([0-9a-f]{4,64})\.\.\.?([0-9a-f]{4,64})$")
_REBASE_PROGRESS_RE = re.compile(r"Rebasing \((\d+)/(\d+)\)")
_PUSH_PORCELAIN_RE = re.compile(r"^([ +\-*!=])\t([^\t]*)\t(.*)$")


# --- shared scanners --------------------------------------------------------

def combine_output(stdout: str, stderr: str) -> str:
    if stdout and stderr and not stdout.endswith("\n"):
        return f"{stdout}\n{stderr}"
    return stdout + stderr


def has_conflict_markers(text: str) -> bool:
    return any(m in text for m in _CONFLICT_MARKERS)


def is_rejection(text: str) -> bool:
    return any(m in text for m in _REJECTION_MARKERS)


def is_authentication_failure(text: str) -> bool:
    return any(m in text for m in _AUTH_MARKERS)


def parse_conflicting_files(text: str) -> list[str]:
    """
    Paths named by git's conflict report:
      CONFLICT (content): Merge conflict in <path>
      CONFLICT (add/add): Merge conflict in <path>
      CONFLICT (modify/delete): <path> deleted in <ref> and modified in <ref>. ...
      CONFLICT (rename/delete): <old> renamed to <path> in <ref>, but deleted in <ref>.
      U\\t<path>   (rebase/am file lists)
    Other kinds (rename/rename, file/directory, ...) name no single path and
    are left to status.
    """
    files: list[str] = []
    for raw in text.splitlines():
        line = raw.strip()
        m = _CONFLICT_LINE_RE.match(line)
        if m:
            reason, detail = m.group(1), m.group(2)
            in_match = _MERGE_CONFLICT_IN_RE.search(detail)
            if in_match:
                files.append(in_match.group(1).strip())
            elif reason in _DELETE_REASONS and " deleted in " in detail:
                files.append(detail.split(" deleted in ", 1)[0].strip())
            elif reason == "rename/delete":
                renamed = _RENAMED_TO_RE.search(detail)
                if renamed:
                    files.append(renamed.group(1).strip())
            continue
        if raw.startswith("U\t") or raw.startswith("UU "):
            files.append(raw[2:].strip() if raw.startswith("U\t") else raw[3:].strip())

    seen: set[str] = set()
    out: list[str] = []
    for f in files:
        if f and f not in seen:
            seen.add(f)
            out.append(f)
    return out


@dataclass(frozen=True)
class ChangeSummary:
    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0


def parse_change_summary(text: str) -> ChangeSummary:
    """
    Reads the trailing "N files changed, M insertions(+), K deletions(-)" line.
    Either count may be missing; no summary line at all means zeros.
    """
    last: ChangeSummary | None = None
    for line in text.splitlines():
        m = _SUMMARY_RE.search(line)
        if m:
            last = ChangeSummary(
                files_changed=int(m.group(1)),
                insertions=int(m.group(2) or 0),
                deletions=int(m.group(3) or 0),
            )
    return last or ChangeSummary()


def parse_rebase_progress(text: str) -> tuple[int, int]:
    matches = _REBASE_PROGRESS_RE.findall(text)
    if not matches:
        return 0, 0
    current, total = matches[-1]
    return int(current), int(total)


def _error_message(stdout: str, stderr: str, default: str) -> str:
    err = stderr.strip()
    if err:
        for line in err.splitlines():
            if line.startswith(("fatal:", "error:")):
                return line.strip()
        return err
    for line in stdout.splitlines():
        if line.startswith(("fatal:", "error:")):
            return line.strip()
    return default


def _range_of(token: str) -> str | None:
    m = _RANGE_RE.match(token)
    return f"{m.group(1)}..{m.group(2)}" if m else None


# --- records ----------------------------------------------------------------

@dataclass(frozen=True)
class FetchResult:
    success: bool = True
    updated_branches: list[str] = field(default_factory=list)
    new_commits: int = 0
    was_rejected: bool = False
    authentication_failed: bool = False
    error_message: str | None = None
    raw_output: str = ""
    updated_ranges: list[str] = field(default_factory=list)

    @property
    def has_updates(self) -> bool:
        return self.new_commits > 0 or bool(self.updated_branches)

    @property
    def summary(self) -> str:
        if not self.success:
            return self.error_message or "Fetch failed"
        if not self.has_updates:
            return "Already up to date"
        parts: list[str] = []
        if self.new_commits:
            parts.append(f"{self.new_commits} new commit{'' if self.new_commits == 1 else 's'}")
        if self.updated_branches:
            n = len(self.updated_branches)
            parts.append(f"{n} branch{'' if n == 1 else 'es'} updated")
        return ", ".join(parts)


@dataclass(frozen=True)
class PullResult:
    success: bool = True
    strategy: PullStrategy = "merge"
    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0
    has_conflicts: bool = False
    conflicting_files: list[str] = field(default_factory=list)
    merge_commit_created: bool = False
    was_fast_forward: bool = False
    was_rejected: bool = False
    authentication_failed: bool = False
    error_message: str | None = None
    raw_output: str = ""

    @property
    def has_changes(self) -> bool:
        return self.files_changed > 0 or self.insertions > 0 or self.deletions > 0

    @property
    def summary(self) -> str:
        if self.has_conflicts:
            n = len(self.conflicting_files)
            return f"Pull stopped with {n} conflict{'' if n == 1 else 's'}"
        if not self.success:
            return self.error_message or "Pull failed"
        if not self.has_changes:
            return "Already up to date"
        parts = [f"{self.files_changed} file{'' if self.files_changed == 1 else 's'} changed"]
        if self.insertions:
            parts.append(f"{self.insertions} insertion{'' if self.insertions == 1 else 's'}(+)")
        if self.deletions:
            parts.append(f"{self.deletions} deletion{'' if self.deletions == 1 else 's'}(-)")
        if self.was_fast_forward:
            parts.append("(fast-forward)")
        elif self.merge_commit_created:
            parts.append("(merge)")
        return ", ".join(parts)


@dataclass(frozen=True)
class PushResult:
    success: bool = True
    commits_pushed: int = 0
    remote_branch: str | None = None
    created_remote_branch: bool = False
    was_force_push: bool = False
    tags_pushed: int = 0
    was_rejected: bool = False
    authentication_failed: bool = False
    error_message: str | None = None
    raw_output: str = ""
    updated_ranges: list[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        if not self.success:
            if self.was_rejected:
                return "Push rejected - pull changes first"
            if self.authentication_failed:
                return "Authentication failed"
            return self.error_message or "Push failed"
        parts: list[str] = []
        if self.commits_pushed:
            parts.append(f"{self.commits_pushed} commit{'' if self.commits_pushed == 1 else 's'} pushed")
        if self.tags_pushed:
            parts.append(f"{self.tags_pushed} tag{'' if self.tags_pushed == 1 else 's'} pushed")
        if self.created_remote_branch:
            parts.append("new branch created")
        if self.was_force_push:
            parts.append("(force)")
        return ", ".join(parts) if parts else "Already up to date"


@dataclass(frozen=True)
class MergeResult:
    success: bool = True
    strategy: MergeStrategy = "merge"
    was_fast_forward: bool = False
    merge_commit_created: bool = False
    was_squash: bool = False
    already_up_to_date: bool = False
    commits_merged: int = 0
    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0
    has_conflicts: bool = False
    conflicting_files: list[str] = field(default_factory=list)
    source_branch: str | None = None
    error_message: str | None = None
    raw_output: str = ""

    @property
    def summary(self) -> str:
        if self.has_conflicts:
            return f"Merge has {len(self.conflicting_files)} conflict(s) to resolve"
        if not self.success:
            return self.error_message or "Merge failed"
        if self.was_squash:
            return "Squash merge ready - commit to complete"
        parts: list[str] = []
        if self.was_fast_forward:
            parts.append("Fast-forward")
        elif self.merge_commit_created:
            parts.append("Merge commit created")
        if self.files_changed:
            parts.append(f"{self.files_changed} file(s) changed")
        return ", ".join(parts) if parts else "Already up to date"


@dataclass(frozen=True)
class RebaseResult:
    success: bool = True
    commits_rebased: int = 0
    current_commit: int = 0
    total_commits: int = 0
    has_conflicts: bool = False
    conflicting_files: list[str] = field(default_factory=list)
    is_in_progress: bool = False
    target_branch: str | None = None
    error_message: str | None = None
    raw_output: str = ""

    @property
    def progress(self) -> float:
        if self.total_commits <= 0:
            return 0.0
        return self.current_commit / self.total_commits * 100

    @property
    def summary(self) -> str:
        if self.has_conflicts:
            return f"Rebase paused - {len(self.conflicting_files)} conflict(s) to resolve"
        if self.is_in_progress:
            return f"Rebase in progress ({self.current_commit}/{self.total_commits})"
        if not self.success:
            return self.error_message or "Rebase failed"
        if self.commits_rebased:
            return f"{self.commits_rebased} commit(s) rebased successfully"
        return "Already up to date"


@dataclass(frozen=True)
class CherryPickResult:
    success: bool = True
    has_conflicts: bool = False
    conflicting_files: list[str] = field(default_factory=list)
    commit_hash: str | None = None
    error_message: str | None = None
    raw_output: str = ""

    @property
    def summary(self) -> str:
        if self.has_conflicts:
            return f"Cherry-pick stopped with {len(self.conflicting_files)} conflict(s)"
        if not self.success:
            return self.error_message or "Cherry-pick failed"
        return f"Cherry-picked as {(self.commit_hash or '')[:7]}".rstrip()


@dataclass(frozen=True)
class RevertResult:
    success: bool = True
    has_conflicts: bool = False
    conflicting_files: list[str] = field(default_factory=list)
    revert_commit_hash: str | None = None
    error_message: str | None = None
    raw_output: str = ""

    @property
    def summary(self) -> str:
        if self.has_conflicts:
            return f"Revert stopped with {len(self.conflicting_files)} conflict(s)"
        if not self.success:
            return self.error_message or "Revert failed"
        return f"Reverted in {(self.revert_commit_hash or '')[:7]}".rstrip()


@dataclass(frozen=True)
class StashApplyResult:
    success: bool = True
    stash_ref: str = "stash@{0}"
    popped: bool = False
    has_conflicts: bool = False
    conflicting_files: list[str] = field(default_factory=list)
    error_message: str | None = None
    raw_output: str = ""

    @property
    def summary(self) -> str:
        if self.has_conflicts:
            return f"Applied {self.stash_ref} with {len(self.conflicting_files)} conflict(s); stash kept"
        if not self.success:
            return self.error_message or "Stash apply failed"
        return f"{'Popped' if self.popped else 'Applied'} {self.stash_ref}"


@dataclass(frozen=True)
class ResetResult:
    success: bool = True
    target_commit: str = "HEAD"
    mode: ResetMode = "mixed"
    error_message: str | None = None
    raw_output: str = ""

    @property
    def summary(self) -> str:
        if not self.success:
            return self.error_message or "Reset failed"
        return f"Reset ({self.mode}) to {self.target_commit}"


OperationResult = Union[
    FetchResult,
    PullResult,
    PushResult,
    MergeResult,
    RebaseResult,
    CherryPickResult,
    RevertResult,
    ResetResult,
    StashApplyResult,
]


# --- builders ---------------------------------------------------------------

def build_fetch_result(stdout: str, stderr: str, exit_code: int) -> FetchResult:
    # git fetch reports ref updates on stderr
    combined = combine_output(stdout, stderr)
    if exit_code != 0:
        return FetchResult(
            success=False,
            was_rejected=is_rejection(combined),
            authentication_failed=is_authentication_failure(combined),
            error_message=_error_message(stdout, stderr, "Failed to fetch"),
            raw_output=combined,
        )

    branches: list[str] = []
    ranges: list[str] = []
    for line in combined.splitlines():
        if "->" not in line:
            continue
        if not (".." in line or "[new branch]" in line or "[new tag]" in line or "forced update" in line):
            continue
        lhs, _, rhs = line.partition("->")
        rhs_tokens = rhs.split()
        if rhs_tokens:
            branches.append(rhs_tokens[0])
        for token in lhs.split():
            rng = _range_of(token)
            if rng:
                ranges.append(rng)
                break

    return FetchResult(
        success=True,
        updated_branches=branches,
        raw_output=combined,
        updated_ranges=ranges,
    )


def build_pull_result(stdout: str, stderr: str, exit_code: int, *, strategy: PullStrategy = "merge") -> PullResult:
    combined = combine_output(stdout, stderr)
    has_conflicts = has_conflict_markers(combined)
    stats = parse_change_summary(stdout)

    if has_conflicts:
        return PullResult(
            success=False,
            strategy=strategy,
            files_changed=stats.files_changed,
            insertions=stats.insertions,
            deletions=stats.deletions,
            has_conflicts=True,
            conflicting_files=parse_conflicting_files(combined),
            error_message="Pull stopped with conflicts; resolve them and continue",
            raw_output=combined,
        )

    if exit_code != 0:
        return PullResult(
            success=False,
            strategy=strategy,
            was_rejected=is_rejection(combined),
            authentication_failed=is_authentication_failure(combined),
            error_message=_error_message(stdout, stderr, "Failed to pull"),
            raw_output=combined,
        )

    return PullResult(
        success=True,
        strategy=strategy,
        files_changed=stats.files_changed,
        insertions=stats.insertions,
        deletions=stats.deletions,
        merge_commit_created="Merge made by" in combined,
        was_fast_forward="Fast-forward" in combined,
        raw_output=combined,
    )


def _build_push_from_porcelain(lines: list[tuple[str, str, str]]) -> dict:
    remote_branch: str | None = None
    created = False
    tags = 0
    rejected = False
    ranges: list[str] = []
    for flag, refs, summary in lines:
        _, _, dst = refs.partition(":")
        if flag == "!":
            rejected = True
            continue
        if dst.startswith("refs/tags/"):
            if flag in "*+ ":
                tags += 1
            continue
        if dst.startswith("refs/heads/") and remote_branch is None and flag != "=":
            remote_branch = dst[len("refs/heads/"):]
        if flag == "*":
            created = True
        rng = _range_of(summary.split()[0]) if summary.split() else None
        if rng:
            ranges.append(rng)
    return {
        "remote_branch": remote_branch,
        "created_remote_branch": created,
        "tags_pushed": tags,
        "rejected": rejected,
        "ranges": ranges,
    }


def _build_push_from_prose(combined: str) -> dict:
    remote_branch: str | None = None
    ranges: list[str] = []
    tags = 0
    for line in combined.splitlines():
        if "->" not in line:
            continue
        lhs, _, rhs = line.partition("->")
        if remote_branch is None and rhs.strip() and "[new tag]" not in line:
            remote_branch = rhs.split()[0]
        if "[new tag]" in line:
            tags += 1
        for token in lhs.split():
            rng = _range_of(token)
            if rng:
                ranges.append(rng)
                break
    return {
        "remote_branch": remote_branch,
        "created_remote_branch": "[new branch]" in combined,
        "tags_pushed": tags,
        "rejected": False,
        "ranges": ranges,
    }


def build_push_result(stdout: str, stderr: str, exit_code: int, *, was_force_push: bool = False) -> PushResult:
    """
    Prefers `git push --porcelain` ref lines ("<flag>\\t<src>:<dst>\\t<summary>")
    and falls back to scraping the human-oriented output.
    """
    combined = combine_output(stdout, stderr)
    porcelain = [
        (m.group(1), m.group(2), m.group(3))
        for m in (_PUSH_PORCELAIN_RE.match(ln) for ln in stdout.splitlines())
        if m
    ]
    info = _build_push_from_porcelain(porcelain) if porcelain else _build_push_from_prose(combined)

    was_rejected = info["rejected"] or (exit_code != 0 and is_rejection(combined))
    auth_failed = exit_code != 0 and is_authentication_failure(combined)
    success = exit_code == 0 and not was_rejected and not auth_failed

    error_message: str | None = None
    if not success:
        error_message = _error_message("", stderr, "")
        if not error_message and was_rejected:
            error_message = "Push rejected - remote contains changes you don't have locally"
        if not error_message and auth_failed:
            error_message = "Authentication failed"
        if not error_message:
            error_message = "Push failed"

    return PushResult(
        success=success,
        commits_pushed=len(info["ranges"]) if success else 0,
        remote_branch=info["remote_branch"],
        created_remote_branch=info["created_remote_branch"] and success,
        was_force_push=was_force_push,
        tags_pushed=info["tags_pushed"] if success else 0,
        was_rejected=was_rejected,
        authentication_failed=auth_failed,
        error_message=error_message,
        raw_output=combined,
        updated_ranges=info["ranges"] if success else [],
    )


def build_merge_result(
    stdout: str,
    stderr: str,
    exit_code: int,
    *,
    source_branch: str | None = None,
    strategy: MergeStrategy = "merge",
    commits_merged: int | None = None,
) -> MergeResult:
    combined = combine_output(stdout, stderr)
    has_conflicts = has_conflict_markers(combined)
    stats = parse_change_summary(stdout)

    if has_conflicts:
        return MergeResult(
            success=False,
            strategy=strategy,
            files_changed=stats.files_changed,
            insertions=stats.insertions,
            deletions=stats.deletions,
            has_conflicts=True,
            conflicting_files=parse_conflicting_files(combined),
            source_branch=source_branch,
            error_message="Automatic merge failed; fix conflicts and then commit the result",
            raw_output=combined,
        )

    if exit_code != 0:
        return MergeResult(
            success=False,
            strategy=strategy,
            source_branch=source_branch,
            error_message=_error_message(stdout, stderr, "Merge failed"),
            raw_output=combined,
        )

    up_to_date = "Already up to date" in combined or "Already up-to-date" in combined
    if commits_merged is None:
        commits_merged = 0 if up_to_date else 1

    return MergeResult(
        success=True,
        strategy=strategy,
        was_fast_forward="Fast-forward" in combined,
        merge_commit_created="Merge made by" in combined,
        was_squash=strategy == "squash",
        already_up_to_date=up_to_date,
        commits_merged=commits_merged,
        files_changed=stats.files_changed,
        insertions=stats.insertions,
        deletions=stats.deletions,
        source_branch=source_branch,
        raw_output=combined,
    )


def build_rebase_result(
    stdout: str,
    stderr: str,
    exit_code: int,
    *,
    target_branch: str | None = None,
) -> RebaseResult:
    combined = combine_output(stdout, stderr)
    has_conflicts = has_conflict_markers(combined)
    current, total = parse_rebase_progress(combined)
    in_progress = has_conflicts or "rebase in progress" in combined or "git rebase --continue" in combined

    if has_conflicts:
        return RebaseResult(
            success=False,
            current_commit=current,
            total_commits=total,
            has_conflicts=True,
            conflicting_files=parse_conflicting_files(combined),
            is_in_progress=True,
            target_branch=target_branch,
            error_message="Rebase stopped with conflicts; resolve them and continue",
            raw_output=combined,
        )

    if exit_code != 0:
        return RebaseResult(
            success=False,
            current_commit=current,
            total_commits=total,
            is_in_progress=in_progress,
            target_branch=target_branch,
            error_message=_error_message(stdout, stderr, "Rebase failed"),
            raw_output=combined,
        )

    up_to_date = "is up to date" in combined
    return RebaseResult(
        success=True,
        commits_rebased=0 if up_to_date else total,
        current_commit=current,
        total_commits=total,
        is_in_progress=False,
        target_branch=target_branch,
        raw_output=combined,
    )


def build_cherry_pick_result(
    stdout: str,
    stderr: str,
    exit_code: int,
    *,
    commit_hash: str | None = None,
) -> CherryPickResult:
    combined = combine_output(stdout, stderr)
    if has_conflict_markers(combined):
        return CherryPickResult(
            success=False,
            has_conflicts=True,
            conflicting_files=parse_conflicting_files(combined),
            error_message="Cherry-pick stopped with conflicts",
            raw_output=combined,
        )
    if exit_code != 0:
        return CherryPickResult(
            success=False,
            error_message=_error_message(stdout, stderr, "Cherry-pick failed"),
            raw_output=combined,
        )
    return CherryPickResult(success=True, commit_hash=commit_hash, raw_output=combined)


def build_revert_result(
    stdout: str,
    stderr: str,
    exit_code: int,
    *,
    revert_commit_hash: str | None = None,
) -> RevertResult:
    combined = combine_output(stdout, stderr)
    if has_conflict_markers(combined) or "could not revert" in combined:
        return RevertResult(
            success=False,
            has_conflicts=True,
            conflicting_files=parse_conflicting_files(combined),
            error_message="Revert stopped with conflicts",
            raw_output=combined,
        )
    if exit_code != 0:
        return RevertResult(
            success=False,
            error_message=_error_message(stdout, stderr, "Revert failed"),
            raw_output=combined,
        )
    return RevertResult(success=True, revert_commit_hash=revert_commit_hash, raw_output=combined)


def build_stash_apply_result(
    stdout: str,
    stderr: str,
    exit_code: int,
    *,
    stash_ref: str,
    pop: bool = False,
) -> StashApplyResult:
    """
    `git stash apply|pop`. A conflicted apply leaves unmerged paths but no
    operation in progress, and `pop` keeps the entry in that case.
    """
    combined = combine_output(stdout, stderr)
    if has_conflict_markers(combined):
        return StashApplyResult(
            success=False,
            stash_ref=stash_ref,
            has_conflicts=True,
            conflicting_files=parse_conflicting_files(combined),
            error_message="Stash applied with conflicts",
            raw_output=combined,
        )
    if exit_code != 0:
        return StashApplyResult(
            success=False,
            stash_ref=stash_ref,
            error_message=_error_message(stdout, stderr, "Stash apply failed"),
            raw_output=combined,
        )
    return StashApplyResult(success=True, stash_ref=stash_ref, popped=pop, raw_output=combined)


def build_reset_result(
    stdout: str,
    stderr: str,
    exit_code: int,
    *,
    target_commit: str,
    mode: ResetMode,
) -> ResetResult:
    combined = combine_output(stdout, stderr)
    if exit_code != 0:
        return ResetResult(
            success=False,
            target_commit=target_commit,
            mode=mode,
            error_message=_error_message(stdout, stderr, "Reset failed"),
            raw_output=combined,
        )
    return ResetResult(success=True, target_commit=target_commit, mode=mode, raw_output=combined)


def raise_for_result(result: OperationResult) -> OperationResult:
    """Return `result` unchanged on success, otherwise raise the matching typed error."""
    if result.success:
        return result
    message = result.summary
    if getattr(result, "has_conflicts", False):
        raise ConflictError(message, result)
    if getattr(result, "authentication_failed", False):
        raise AuthenticationError(message, result)
    if getattr(result, "was_rejected", False):
        raise RejectedError(message, result)
    raise GitExecutionError(result.error_message or message)
