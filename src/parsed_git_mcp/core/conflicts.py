from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from .git_runner import SafeGitRunner
from .models import FileStatusEntry, GitRunResult
from .operation_state import query_status
from .results import combine_output
from .security import repo_relpath

logger = logging.getLogger(__name__)

ResolutionAction = Literal["accept_current", "accept_incoming", "mark_resolved"]


@dataclass(frozen=True)
class ResolutionResult:
    path: str
    action: ResolutionAction
    success: bool
    was_conflicted: bool
    error_message: str | None = None
    raw_output: str = ""

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "action": self.action,
            "success": self.success,
            "was_conflicted": self.was_conflicted,
            "error_message": self.error_message,
            "raw_output": self.raw_output,
        }


class ConflictResolver:
    """
    Resolves one conflicted path at a time.

    "current" and "incoming" follow git's --ours/--theirs. During a rebase
    --ours is the branch being rebased onto.
    """

    def __init__(self, runner: SafeGitRunner) -> None:
        self.runner = runner

    def accept_current(self, path: str) -> ResolutionResult:
        return self._resolve(path, "accept_current", side="ours")

    def accept_incoming(self, path: str) -> ResolutionResult:
        return self._resolve(path, "accept_incoming", side="theirs")

    def mark_resolved(self, path: str) -> ResolutionResult:
        return self._resolve(path, "mark_resolved", side=None)

    def _conflict_for(self, rel: str) -> FileStatusEntry | None:
        for entry in query_status(self.runner):
            if entry.path == rel and entry.is_conflicted:
                return entry
        return None

    def _resolve(self, path: str, action: ResolutionAction, *, side: str | None) -> ResolutionResult:
        rel = repo_relpath(self.runner.root, path)

        if self._conflict_for(rel) is None:
            logger.info("%s: %s is not conflicted; nothing to do", action, rel)
            return ResolutionResult(path=rel, action=action, success=True, was_conflicted=False)

        runs: list[GitRunResult] = []
        if side is not None:
            checkout = self.runner.run(["checkout", f"--{side}", "--", rel], read_only=False)
            runs.append(checkout)
            if checkout.exit_code != 0:
                missing = "our version" if side == "ours" else "their version"
                if f"does not have {missing}" not in checkout.stderr:
                    return self._failed(rel, action, runs)
                # the chosen side deleted the file
                rm = self.runner.run(["rm", "--quiet", "--", rel], read_only=False)
                runs.append(rm)
                if rm.exit_code != 0:
                    return self._failed(rel, action, runs)
                return self._verify(rel, action, runs)

        add = self.runner.run(["add", "-A", "--", rel], read_only=False)
        runs.append(add)
        if add.exit_code != 0:
            return self._failed(rel, action, runs)
        return self._verify(rel, action, runs)

    def _verify(self, rel: str, action: ResolutionAction, runs: list[GitRunResult]) -> ResolutionResult:
        raw = _raw(runs)
        if self._conflict_for(rel) is not None:
            return ResolutionResult(
                path=rel,
                action=action,
                success=False,
                was_conflicted=True,
                error_message=f"{rel} is still conflicted",
                raw_output=raw,
            )
        logger.info("%s: resolved %s", action, rel)
        return ResolutionResult(path=rel, action=action, success=True, was_conflicted=True, raw_output=raw)

    def _failed(self, rel: str, action: ResolutionAction, runs: list[GitRunResult]) -> ResolutionResult:
        last = runs[-1]
        message = last.stderr.strip() or f"git {' '.join(last.argv[1:])} exited with {last.exit_code}"
        logger.warning("%s failed for %s: %s", action, rel, message)
        return ResolutionResult(
            path=rel,
            action=action,
            success=False,
            was_conflicted=True,
            error_message=message,
            raw_output=_raw(runs),
        )


def _raw(runs: list[GitRunResult]) -> str:
    return "".join(combine_output(r.stdout, r.stderr) for r in runs)
