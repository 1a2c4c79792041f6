"""
Mutating git operations. Each returns the typed outcome plus a fresh look at
the repository's operation state, since a conflict leaves one in progress.

Outcomes are reported, never raised: a conflict or a rejected push comes back
with success=False.
"""
from __future__ import annotations

from typing import Any

from .common import make_engine, result_to_dict
from ..core.engine import GitEngine


def _with_state(engine: GitEngine, result: Any) -> dict[str, Any]:
    return {
        "result": result_to_dict(result),
        "operation": engine.inspect_operation().to_dict(),
    }


def fetch(root: str = ".", remote: str | None = None, prune: bool = False) -> dict[str, Any]:
    return {"result": result_to_dict(make_engine(root).fetch(remote, prune=prune))}


def pull(
    root: str = ".",
    remote: str | None = None,
    branch: str | None = None,
    strategy: str = "merge",
) -> dict[str, Any]:
    engine = make_engine(root)
    return _with_state(engine, engine.pull(remote, branch, strategy=strategy))


def push(
    root: str = ".",
    remote: str = "origin",
    branch: str | None = None,
    force: bool = False,
    force_with_lease: bool = True,
    set_upstream: bool = False,
    push_tags: bool = False,
    tags: list[str] | None = None,
) -> dict[str, Any]:
    engine = make_engine(root)
    result = engine.push(
        remote,
        branch,
        force=force,
        force_with_lease=force_with_lease,
        set_upstream=set_upstream,
        push_tags=push_tags,
        tags=tags,
    )
    return {"result": result_to_dict(result)}


def merge(root: str = ".", branch: str = "", strategy: str = "merge", message: str | None = None) -> dict[str, Any]:
    engine = make_engine(root)
    return _with_state(engine, engine.merge(branch, strategy=strategy, message=message))


def rebase(root: str = ".", onto: str = "") -> dict[str, Any]:
    engine = make_engine(root)
    return _with_state(engine, engine.rebase(onto))


def cherry_pick(root: str = ".", commit: str = "") -> dict[str, Any]:
    engine = make_engine(root)
    return _with_state(engine, engine.cherry_pick(commit))


def revert(root: str = ".", commit: str = "") -> dict[str, Any]:
    engine = make_engine(root)
    return _with_state(engine, engine.revert(commit))


def reset(root: str = ".", target: str = "HEAD", mode: str = "mixed") -> dict[str, Any]:
    return {"result": result_to_dict(make_engine(root).reset(target, mode=mode))}


def continue_operation(root: str = ".") -> dict[str, Any]:
    engine = make_engine(root)
    return _with_state(engine, engine.continue_operation())


def abort_operation(root: str = ".") -> dict[str, Any]:
    engine = make_engine(root)
    engine.abort_operation()
    return {"aborted": True, "operation": engine.inspect_operation().to_dict()}


def skip_operation(root: str = ".") -> dict[str, Any]:
    engine = make_engine(root)
    return _with_state(engine, engine.skip_operation())


def accept_current(path: str, root: str = ".") -> dict[str, Any]:
    engine = make_engine(root)
    return _with_state(engine, engine.accept_current(path))


def accept_incoming(path: str, root: str = ".") -> dict[str, Any]:
    engine = make_engine(root)
    return _with_state(engine, engine.accept_incoming(path))


def mark_resolved(path: str, root: str = ".") -> dict[str, Any]:
    engine = make_engine(root)
    return _with_state(engine, engine.mark_resolved(path))


def stash_apply(root: str = ".", index: int = 0, pop: bool = False) -> dict[str, Any]:
    engine = make_engine(root)
    return _with_state(engine, engine.apply_stash(index, pop=pop))
