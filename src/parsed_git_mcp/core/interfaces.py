"""
Capability groups exposed by the engine. Consumers depend on the narrowest
group they need; GitOperations is the union.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .conflicts import ResolutionResult
from .models import (
    BlameInfo,
    Branch,
    Commit,
    ConflictedFile,
    Diff,
    DiffOptions,
    FileDiff,
    FileStatusEntry,
    RemoteTrackingStatus,
    StashEntry,
    Tag,
)
from .operation_state import OperationReport, OperationState
from .results import (
    CherryPickResult,
    FetchResult,
    MergeResult,
    MergeStrategy,
    OperationResult,
    PullResult,
    PullStrategy,
    PushResult,
    RebaseResult,
    ResetMode,
    ResetResult,
    RevertResult,
    StashApplyResult,
)


class StatusOps(ABC):
    @abstractmethod
    def get_status(self, *, include_ignored: bool = False) -> list[FileStatusEntry]: ...

    @abstractmethod
    def get_conflicted_files(self) -> list[ConflictedFile]: ...

    @abstractmethod
    def stage_file(self, path: str) -> None: ...

    @abstractmethod
    def unstage_file(self, path: str) -> None: ...

    @abstractmethod
    def stage_all(self) -> None: ...


class DiffOps(ABC):
    @abstractmethod
    def get_diff(self, options: Optional[DiffOptions] = None) -> Diff: ...

    @abstractmethod
    def get_diff_for_file(self, path: str, *, staged: bool = False) -> Optional[FileDiff]: ...

    @abstractmethod
    def get_diff_for_commit(self, commit_hash: str) -> Diff: ...

    @abstractmethod
    def get_diff_between_commits(self, from_ref: str, to_ref: str) -> Diff: ...


class BlameOps(ABC):
    @abstractmethod
    def blame(self, path: str, *, rev: Optional[str] = None) -> BlameInfo: ...


class CommitOps(ABC):
    @abstractmethod
    def get_history(
        self,
        limit: int = 50,
        *,
        ref: Optional[str] = None,
        all_refs: bool = False,
        path: Optional[str] = None,
    ) -> list[Commit]: ...

    @abstractmethod
    def get_commit(self, commit_hash: str) -> Commit: ...


class BranchOps(ABC):
    @abstractmethod
    def list_branches(self, *, include_remote: bool = True) -> list[Branch]: ...

    @abstractmethod
    def list_tags(self) -> list[Tag]: ...

    @abstractmethod
    def get_ahead_behind(self, branch: Optional[str] = None) -> Optional[RemoteTrackingStatus]: ...


class StashOps(ABC):
    @abstractmethod
    def list_stashes(self) -> list[StashEntry]: ...

    @abstractmethod
    def apply_stash(self, index: int = 0, *, pop: bool = False, check: bool = False) -> StashApplyResult: ...

    @abstractmethod
    def get_stash_diff(self, index: int = 0) -> Diff: ...


class RemoteOps(ABC):
    @abstractmethod
    def fetch(self, remote: Optional[str] = None, *, prune: bool = False, check: bool = False) -> FetchResult: ...

    @abstractmethod
    def pull(
        self,
        remote: Optional[str] = None,
        branch: Optional[str] = None,
        *,
        strategy: PullStrategy = "merge",
        check: bool = False,
    ) -> PullResult: ...

    @abstractmethod
    def push(
        self,
        remote: str = "origin",
        branch: Optional[str] = None,
        *,
        force: bool = False,
        force_with_lease: bool = True,
        set_upstream: bool = False,
        push_tags: bool = False,
        tags: Optional[list[str]] = None,
        check: bool = False,
    ) -> PushResult: ...

    @abstractmethod
    def push_tags(
        self, remote: str = "origin", tags: Optional[list[str]] = None, *, check: bool = False
    ) -> PushResult: ...


class MergeRebaseOps(ABC):
    @abstractmethod
    def merge(
        self,
        branch: str,
        *,
        strategy: MergeStrategy = "merge",
        message: Optional[str] = None,
        check: bool = False,
    ) -> MergeResult: ...

    @abstractmethod
    def continue_merge(self, *, check: bool = False) -> MergeResult: ...

    @abstractmethod
    def abort_merge(self) -> None: ...

    @abstractmethod
    def rebase(self, onto: str, *, check: bool = False) -> RebaseResult: ...

    @abstractmethod
    def continue_rebase(self, *, check: bool = False) -> RebaseResult: ...

    @abstractmethod
    def abort_rebase(self) -> None: ...

    @abstractmethod
    def skip_rebase(self, *, check: bool = False) -> RebaseResult: ...

    @abstractmethod
    def get_operation_state(self) -> OperationState: ...

    @abstractmethod
    def inspect_operation(self) -> OperationReport: ...

    @abstractmethod
    def continue_operation(self, *, check: bool = False) -> OperationResult: ...

    @abstractmethod
    def abort_operation(self) -> None: ...

    @abstractmethod
    def skip_operation(self, *, check: bool = False) -> OperationResult: ...

    @abstractmethod
    def accept_current(self, path: str) -> ResolutionResult: ...

    @abstractmethod
    def accept_incoming(self, path: str) -> ResolutionResult: ...

    @abstractmethod
    def mark_resolved(self, path: str) -> ResolutionResult: ...


class AdvancedOps(ABC):
    @abstractmethod
    def reset(self, target: str = "HEAD", *, mode: ResetMode = "mixed", check: bool = False) -> ResetResult: ...

    @abstractmethod
    def cherry_pick(self, commit: str, *, check: bool = False) -> CherryPickResult: ...

    @abstractmethod
    def cherry_pick_continue(self, *, check: bool = False) -> CherryPickResult: ...

    @abstractmethod
    def cherry_pick_skip(self, *, check: bool = False) -> CherryPickResult: ...

    @abstractmethod
    def cherry_pick_abort(self) -> None: ...

    @abstractmethod
    def revert(self, commit: str, *, check: bool = False) -> RevertResult: ...

    @abstractmethod
    def revert_continue(self, *, check: bool = False) -> RevertResult: ...

    @abstractmethod
    def revert_skip(self, *, check: bool = False) -> RevertResult: ...

    @abstractmethod
    def revert_abort(self) -> None: ...


class GitOperations(
    StatusOps,
    DiffOps,
    BlameOps,
    CommitOps,
    BranchOps,
    StashOps,
    RemoteOps,
    MergeRebaseOps,
    AdvancedOps,
    ABC,
):
    pass
