from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from .git_runner import SafeGitRunner, require_ok
from .models import ConflictedFile, FileStatusEntry
from .parsers import conflicted_files, parse_status_z

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoOperation:
    pass


@dataclass(frozen=True)
class MergeInProgress:
    conflict_count: int = 0


@dataclass(frozen=True)
class RebaseInProgress:
    current: int = 0
    total: int = 0


@dataclass(frozen=True)
class CherryPickInProgress:
    pass


@dataclass(frozen=True)
class RevertInProgress:
    pass


OperationState = Union[NoOperation, MergeInProgress, RebaseInProgress, CherryPickInProgress, RevertInProgress]


def _unknown(state: object) -> TypeError:
    return TypeError(f"Unknown operation state: {state!r}")


def operation_name(state: OperationState) -> str | None:
    if isinstance(state, NoOperation):
        return None
    if isinstance(state, MergeInProgress):
        return "merge"
    if isinstance(state, RebaseInProgress):
        return "rebase"
    if isinstance(state, CherryPickInProgress):
        return "cherry-pick"
    if isinstance(state, RevertInProgress):
        return "revert"
    raise _unknown(state)


def describe_state(state: OperationState) -> str:
    if isinstance(state, NoOperation):
        return "No operation in progress"
    if isinstance(state, MergeInProgress):
        if state.conflict_count:
            return f"Merge in progress ({state.conflict_count} conflicts)"
        return "Merge in progress"
    if isinstance(state, RebaseInProgress):
        return f"Rebase in progress ({state.current}/{state.total})"
    if isinstance(state, CherryPickInProgress):
        return "Cherry-pick in progress"
    if isinstance(state, RevertInProgress):
        return "Revert in progress"
    raise _unknown(state)


def available_actions(state: OperationState) -> tuple[str, ...]:
    """Actions a caller may offer next. Merge has no skip."""
    if isinstance(state, NoOperation):
        return ()
    if isinstance(state, MergeInProgress):
        return ("continue", "abort")
    if isinstance(state, (RebaseInProgress, CherryPickInProgress, RevertInProgress)):
        return ("continue", "abort", "skip")
    raise _unknown(state)


def state_to_dict(state: OperationState) -> dict[str, Any]:
    out: dict[str, Any] = {
        "operation": operation_name(state),
        "description": describe_state(state),
    }
    if isinstance(state, MergeInProgress):
        out["conflict_count"] = state.conflict_count
    elif isinstance(state, RebaseInProgress):
        out["current"] = state.current
        out["total"] = state.total
        out["progress"] = (state.current / state.total * 100) if state.total else 0.0
    return out


@dataclass(frozen=True)
class OperationReport:
    state: OperationState
    conflicted_files: list[ConflictedFile] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    available_actions: tuple[str, ...] = ()

    @property
    def is_in_progress(self) -> bool:
        return not isinstance(self.state, NoOperation)

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": state_to_dict(self.state),
            "in_progress": self.is_in_progress,
            "conflicted_files": [
                {"path": c.path, "conflict_type": c.conflict_type, "xy": c.xy} for c in self.conflicted_files
            ],
            "warnings": list(self.warnings),
            "available_actions": list(self.available_actions),
        }


def query_status(runner: SafeGitRunner, *, include_ignored: bool = False) -> list[FileStatusEntry]:
    args = ["status", "--porcelain=v1", "-z", "--untracked-files=all"]
    if include_ignored:
        args.append("--ignored")
    res = require_ok(runner.run(args), "git status")
    return parse_status_z(res.stdout, include_ignored=include_ignored)


# Checked in priority order.
_MARKERS = ("rebase-merge", "rebase-apply", "MERGE_HEAD", "CHERRY_PICK_HEAD", "REVERT_HEAD")


class OperationStateTracker:
    """
    Derives the in-progress operation from marker files in the git directory.
    Nothing is cached: every query looks at disk again.
    """

    def __init__(self, runner: SafeGitRunner) -> None:
        self.runner = runner

    def git_dir(self) -> Path:
        res = require_ok(self.runner.run(["rev-parse", "--git-dir"]), "git rev-parse --git-dir")
        p = Path(res.stdout.strip())
        if not p.is_absolute():
            p = self.runner.root / p
        return p

    def active_markers(self) -> list[str]:
        git_dir = self.git_dir()
        return [m for m in _MARKERS if (git_dir / m).exists()]

    def get_conflicted_files(self) -> list[ConflictedFile]:
        return conflicted_files(query_status(self.runner))

    def _state_from(self, git_dir: Path, markers: list[str], conflicts: list[ConflictedFile]) -> OperationState:
        if "rebase-merge" in markers:
            current, total = _read_progress(git_dir / "rebase-merge", "msgnum", "end")
            return RebaseInProgress(current=current, total=total)
        if "rebase-apply" in markers:
            current, total = _read_progress(git_dir / "rebase-apply", "next", "last")
            return RebaseInProgress(current=current, total=total)
        if "MERGE_HEAD" in markers:
            return MergeInProgress(conflict_count=len(conflicts))
        if "CHERRY_PICK_HEAD" in markers:
            return CherryPickInProgress()
        if "REVERT_HEAD" in markers:
            return RevertInProgress()
        return NoOperation()

    def get_operation_state(self) -> OperationState:
        return self.inspect().state

    def inspect(self) -> OperationReport:
        git_dir = self.git_dir()
        markers = [m for m in _MARKERS if (git_dir / m).exists()]
        conflicts = self.get_conflicted_files()
        state = self._state_from(git_dir, markers, conflicts)

        warnings: list[str] = []
        # rebase-merge and rebase-apply together still mean a single rebase
        kinds = {"rebase" if m.startswith("rebase-") else m for m in markers}
        if len(kinds) > 1:
            msg = f"Multiple operation markers present ({', '.join(markers)}); reporting {operation_name(state)}"
            logger.warning(msg)
            warnings.append(msg)

        return OperationReport(
            state=state,
            conflicted_files=conflicts,
            warnings=warnings,
            available_actions=available_actions(state),
        )


def _read_int(path: Path) -> int:
    try:
        return int(path.read_text(encoding="utf-8").strip())
    except (OSError, ValueError):
        return 0


def _read_progress(state_dir: Path, current_name: str, total_name: str) -> tuple[int, int]:
    return _read_int(state_dir / current_name), _read_int(state_dir / total_name)
