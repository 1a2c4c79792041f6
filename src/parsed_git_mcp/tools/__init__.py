from .git_tools import (
    status,
    diff,
    diff_summary,
    show_commit_diff,
    blame,
    operation_state,
    detect_conflicts,
    history,
    show_commit,
    branches,
    tags,
    ahead_behind,
    stashes,
    stash_diff,
)
from .operation_tools import (
    fetch,
    pull,
    push,
    merge,
    rebase,
    cherry_pick,
    revert,
    reset,
    continue_operation,
    abort_operation,
    skip_operation,
    accept_current,
    accept_incoming,
    mark_resolved,
    stash_apply,
)

__all__ = [
    "status",
    "diff",
    "diff_summary",
    "show_commit_diff",
    "blame",
    "operation_state",
    "detect_conflicts",
    "history",
    "show_commit",
    "branches",
    "tags",
    "ahead_behind",
    "stashes",
    "stash_diff",
    "fetch",
    "pull",
    "push",
    "merge",
    "rebase",
    "cherry_pick",
    "revert",
    "reset",
    "continue_operation",
    "abort_operation",
    "skip_operation",
    "accept_current",
    "accept_incoming",
    "mark_resolved",
    "stash_apply",
]
