from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Optional

from .config import GitRunnerConfig
from .conflicts import ConflictResolver, ResolutionResult
from .diff_parser import parse_diff, synthesize_new_file_diff
from .errors import FileNotBlamableError, GitExecutionError, GitPolicyError, ParseError
from .git_runner import SafeGitRunner, require_ok
from .blame_parser import parse_blame_porcelain
from .history_parser import (
    BRANCH_FORMAT,
    COMMIT_FORMAT,
    STASH_FORMAT,
    TAG_FORMAT,
    parse_branch_list,
    parse_commit_log,
    parse_left_right_counts,
    parse_stash_list,
    parse_tag_list,
)
from .interfaces import GitOperations
from .models import (
    BlameInfo,
    Branch,
    Commit,
    ConflictedFile,
    Diff,
    DiffOptions,
    FileDiff,
    FileStatusEntry,
    GitRunResult,
    RemoteTrackingStatus,
    StashEntry,
    Tag,
)
from .operation_state import (
    CherryPickInProgress,
    MergeInProgress,
    NoOperation,
    OperationReport,
    OperationState,
    OperationStateTracker,
    RebaseInProgress,
    RevertInProgress,
    query_status,
)
from .results import (
    MERGE_STRATEGY_FLAGS,
    PULL_STRATEGY_FLAGS,
    RESET_MODES,
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
    build_cherry_pick_result,
    build_fetch_result,
    build_merge_result,
    build_pull_result,
    build_push_result,
    build_rebase_result,
    build_reset_result,
    build_revert_result,
    build_stash_apply_result,
    combine_output,
    raise_for_result,
)
from .security import ensure_within_root, repo_relpath

logger = logging.getLogger(__name__)

# Keeps merge/continue/cherry-pick from waiting on an editor.
_NO_EDITOR = {"GIT_EDITOR": "true"}

# Bytes inspected when deciding whether an untracked file is binary.
_BINARY_SNIFF_BYTES = 8000


def _ref_arg(value: str, what: str) -> str:
    v = (value or "").strip()
    if not v or v.startswith("-"):
        raise GitPolicyError(f"Invalid {what}: {value!r}")
    return v


class _EngineBase:
    runner: SafeGitRunner
    tracker: OperationStateTracker
    resolver: ConflictResolver

    def __init__(
        self,
        root: str | Path,
        config: GitRunnerConfig | None = None,
        *,
        runner: SafeGitRunner | None = None,
    ) -> None:
        self.runner = runner or SafeGitRunner(root, config)
        self.config = self.runner.config
        self.tracker = OperationStateTracker(self.runner)
        self.resolver = ConflictResolver(self.runner)

    @property
    def root(self) -> Path:
        return self.runner.root

    def _git(self, args: Iterable[str], *, env: dict[str, str] | None = None) -> GitRunResult:
        return self.runner.run(args, read_only=False, env=env)

    def _network(self, args: Iterable[str]) -> GitRunResult:
        return self.runner.run(args, read_only=False, env=_NO_EDITOR, timeout_s=self.config.network_timeout_s)

    def _rev_count(self, rev_range: str) -> int:
        res = self.runner.run(["rev-list", "--count", rev_range])
        if res.exit_code != 0:
            logger.debug("rev-list --count %s failed: %s", rev_range, res.stderr.strip())
            return 0
        try:
            return int(res.stdout.strip() or 0)
        except ValueError:
            return 0

    def _head(self) -> str | None:
        res = self.runner.run(["rev-parse", "HEAD"])
        return res.stdout.strip() if res.exit_code == 0 else None

    def _with_status_conflicts(self, result):
        """Add the unmerged paths status reports to those git's prose named (rename/rename names none)."""
        if not result.has_conflicts:
            return result
        paths = list(result.conflicting_files)
        paths.extend(c.path for c in self.tracker.get_conflicted_files() if c.path not in paths)
        return replace(result, conflicting_files=paths)

    def _blocked_by_conflicts(self, result):
        """A continue that git refused while unmerged paths remain reports those conflicts."""
        if result.success or result.has_conflicts:
            return result
        conflicted = self.tracker.get_conflicted_files()
        if not conflicted:
            return result
        return replace(result, has_conflicts=True, conflicting_files=[c.path for c in conflicted])

    def _parse_diff_output(self, res: GitRunResult, context: str) -> Diff:
        require_ok(res, context)
        diff = parse_diff(res.stdout)
        if res.output_truncated:
            msg = f"{context}: output exceeded {self.config.max_output_chars} chars and was truncated"
            logger.warning(msg)
            diff = replace(diff, warnings=[*diff.warnings, msg])
        return diff

    @staticmethod
    def _finish(result, check: bool):
        if check:
            raise_for_result(result)
        return result


class _StatusMixin(_EngineBase):
    def get_status(self, *, include_ignored: bool = False) -> list[FileStatusEntry]:
        return query_status(self.runner, include_ignored=include_ignored)

    def get_conflicted_files(self) -> list[ConflictedFile]:
        return self.tracker.get_conflicted_files()

    def stage_file(self, path: str) -> None:
        rel = repo_relpath(self.root, path)
        require_ok(self._git(["add", "-A", "--", rel]), f"git add {rel}")
        logger.info("Staged %s", rel)

    def unstage_file(self, path: str) -> None:
        rel = repo_relpath(self.root, path)
        require_ok(self._git(["restore", "--staged", "--", rel]), f"git restore --staged {rel}")
        logger.info("Unstaged %s", rel)

    def stage_all(self) -> None:
        require_ok(self._git(["add", "-A"]), "git add -A")
        logger.info("Staged all changes")


class _DiffMixin(_EngineBase):
    def get_diff(self, options: Optional[DiffOptions] = None) -> Diff:
        opts = options or DiffOptions()
        if opts.file_path:
            opts = replace(opts, file_path=repo_relpath(self.root, opts.file_path))
        if opts.commit:
            opts = replace(opts, commit=_ref_arg(opts.commit, "commit"))
        return self._parse_diff_output(self.runner.run(opts.diff_args()), "git diff")

    def get_diff_for_file(self, path: str, *, staged: bool = False) -> Optional[FileDiff]:
        """
        Diff of one path. Untracked files are invisible to `git diff`, so when
        nothing is reported for an untracked path an all-addition diff is built
        from the file on disk.
        """
        rel = repo_relpath(self.root, path)
        diff = self.get_diff(DiffOptions(staged=staged, file_path=rel))
        if diff.files:
            return diff.files[0]
        if staged or not self._is_untracked(rel):
            return None

        target = ensure_within_root(self.root, self.root / rel)
        if not target.is_file():
            return None
        data = target.read_bytes()
        text: str | None
        if b"\0" in data[:_BINARY_SNIFF_BYTES]:
            text = None
        else:
            try:
                text = data.decode("utf-8")
            except UnicodeDecodeError:
                text = None
        return synthesize_new_file_diff(rel, text)

    def _is_untracked(self, rel: str) -> bool:
        res = require_ok(
            self.runner.run(["ls-files", "--others", "--exclude-standard", "--", rel]),
            "git ls-files --others",
        )
        return bool(res.stdout.strip())

    def get_diff_for_commit(self, commit_hash: str) -> Diff:
        rev = _ref_arg(commit_hash, "commit")
        res = self.runner.run(["show", "--format=", "-p", "--no-color", "--no-ext-diff", "-M", rev])
        return self._parse_diff_output(res, f"git show {rev}")

    def get_diff_between_commits(self, from_ref: str, to_ref: str) -> Diff:
        a = _ref_arg(from_ref, "from_ref")
        b = _ref_arg(to_ref, "to_ref")
        res = self.runner.run(["diff", "--no-color", "--no-ext-diff", "-M", a, b])
        return self._parse_diff_output(res, f"git diff {a} {b}")


class _BlameMixin(_EngineBase):
    def blame(self, path: str, *, rev: Optional[str] = None) -> BlameInfo:
        rel = repo_relpath(self.root, path)
        args = ["blame", "--porcelain"]
        if rev:
            args.append(_ref_arg(rev, "rev"))
        args.extend(["--", rel])

        res = self.runner.run(args)
        if res.exit_code != 0:
            raise FileNotBlamableError(rel, res.stderr.strip() or f"git blame exited with {res.exit_code}")
        if res.output_truncated:
            raise FileNotBlamableError(rel, "blame output exceeded the output ceiling")
        return parse_blame_porcelain(res.stdout, rel)


class _HistoryMixin(_EngineBase):
    def get_history(
        self,
        limit: int = 50,
        *,
        ref: Optional[str] = None,
        all_refs: bool = False,
        path: Optional[str] = None,
    ) -> list[Commit]:
        args = ["log", f"--format={COMMIT_FORMAT}", "-n", str(max(1, int(limit)))]
        if all_refs:
            args.append("--all")
        elif ref:
            args.append(_ref_arg(ref, "ref"))
        if path:
            args.extend(["--", repo_relpath(self.root, path)])

        res = self.runner.run(args)
        if res.exit_code != 0 and "does not have any commits" in res.stderr:
            return []
        require_ok(res, "git log")
        return parse_commit_log(res.stdout)

    def get_commit(self, commit_hash: str) -> Commit:
        rev = _ref_arg(commit_hash, "commit")
        res = require_ok(self.runner.run(["show", "-s", f"--format={COMMIT_FORMAT}", rev]), f"git show {rev}")
        commits = parse_commit_log(res.stdout)
        if not commits:
            raise ParseError(f"git show {rev}: no commit record in output")
        return commits[0]


class _BranchMixin(_EngineBase):
    def list_branches(self, *, include_remote: bool = True) -> list[Branch]:
        args = ["branch", f"--format={BRANCH_FORMAT}"]
        if include_remote:
            args.append("--all")
        res = require_ok(self.runner.run(args), "git branch")
        return parse_branch_list(res.stdout)

    def list_tags(self) -> list[Tag]:
        res = require_ok(self.runner.run(["tag", "--list", f"--format={TAG_FORMAT}"]), "git tag --list")
        return parse_tag_list(res.stdout)

    def get_ahead_behind(self, branch: Optional[str] = None) -> Optional[RemoteTrackingStatus]:
        """
        Commits `branch` (default: the current branch) has that its upstream
        lacks, and the reverse. None when no upstream is configured.
        """
        name = _ref_arg(branch, "branch") if branch else ""
        upstream_ref = f"{name}@{{upstream}}"
        up = self.runner.run(["rev-parse", "--abbrev-ref", upstream_ref])
        if up.exit_code != 0:
            logger.debug("No upstream for %s: %s", name or "HEAD", up.stderr.strip())
            return None

        res = require_ok(
            self.runner.run(["rev-list", "--left-right", "--count", f"{name or 'HEAD'}...{upstream_ref}"]),
            "git rev-list --left-right --count",
        )
        counts = parse_left_right_counts(res.stdout)
        if counts is None:
            raise ParseError(f"Unexpected rev-list --left-right output: {res.stdout.strip()!r}")
        ahead, behind = counts
        return RemoteTrackingStatus(upstream=up.stdout.strip(), ahead=ahead, behind=behind)


def _stash_ref(index: int) -> str:
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        raise ValueError(f"Invalid stash index: {index!r}")
    return f"stash@{{{index}}}"


class _StashMixin(_EngineBase):
    def _has_stash(self) -> bool:
        return self.runner.run(["rev-parse", "--verify", "--quiet", "refs/stash"]).exit_code == 0

    def list_stashes(self) -> list[StashEntry]:
        if not self._has_stash():
            return []
        res = require_ok(
            self.runner.run(["log", "--walk-reflogs", f"--format={STASH_FORMAT}", "refs/stash"]),
            "git log --walk-reflogs refs/stash",
        )
        return parse_stash_list(res.stdout)

    def apply_stash(self, index: int = 0, *, pop: bool = False, check: bool = False) -> StashApplyResult:
        ref = _stash_ref(index)
        res = self._git(["stash", "pop" if pop else "apply", ref])
        result = build_stash_apply_result(res.stdout, res.stderr, res.exit_code, stash_ref=ref, pop=pop)
        result = self._with_status_conflicts(result)
        logger.info("stash %s %s: %s", "pop" if pop else "apply", ref, result.summary)
        return self._finish(result, check)

    def get_stash_diff(self, index: int = 0) -> Diff:
        """The changes a stash entry records, relative to the commit it was made on."""
        ref = _stash_ref(index)
        res = self.runner.run(["diff", "--no-color", "--no-ext-diff", "-M", f"{ref}^1", ref])
        return self._parse_diff_output(res, f"git diff {ref}")


class _RemoteMixin(_EngineBase):
    def fetch(self, remote: Optional[str] = None, *, prune: bool = False, check: bool = False) -> FetchResult:
        args = ["fetch", "--verbose", _ref_arg(remote, "remote") if remote else "--all"]
        if prune:
            args.append("--prune")
        res = self._network(args)
        result = build_fetch_result(res.stdout, res.stderr, res.exit_code)
        if result.success and result.updated_ranges:
            result = replace(result, new_commits=sum(self._rev_count(r) for r in result.updated_ranges))
        logger.info("fetch %s: %s", remote or "--all", result.summary)
        return self._finish(result, check)

    def pull(
        self,
        remote: Optional[str] = None,
        branch: Optional[str] = None,
        *,
        strategy: PullStrategy = "merge",
        check: bool = False,
    ) -> PullResult:
        if strategy not in PULL_STRATEGY_FLAGS:
            raise ValueError(f"Unknown pull strategy: {strategy!r}")
        args = ["pull", PULL_STRATEGY_FLAGS[strategy]]
        if remote:
            args.append(_ref_arg(remote, "remote"))
            if branch:
                args.append(_ref_arg(branch, "branch"))
        res = self._network(args)
        result = self._with_status_conflicts(build_pull_result(res.stdout, res.stderr, res.exit_code, strategy=strategy))
        logger.info("pull (%s): %s", strategy, result.summary)
        return self._finish(result, check)

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
    ) -> PushResult:
        args = ["push", "--porcelain"]
        if force:
            args.append("--force-with-lease" if force_with_lease else "--force")
        if set_upstream:
            args.append("--set-upstream")
        args.append(_ref_arg(remote, "remote"))
        if branch:
            args.append(_ref_arg(branch, "branch"))

        res = self._network(args)
        result = build_push_result(res.stdout, res.stderr, res.exit_code, was_force_push=force)
        if result.success and result.updated_ranges:
            result = replace(result, commits_pushed=sum(self._rev_count(r) for r in result.updated_ranges))

        if push_tags and result.success:
            tag_result = self.push_tags(remote, tags)
            result = replace(
                result,
                success=tag_result.success,
                tags_pushed=tag_result.tags_pushed,
                was_rejected=tag_result.was_rejected,
                authentication_failed=tag_result.authentication_failed,
                error_message=tag_result.error_message,
                raw_output=combine_output(result.raw_output, tag_result.raw_output),
            )

        logger.info("push %s %s: %s", remote, branch or "", result.summary)
        return self._finish(result, check)

    def push_tags(self, remote: str = "origin", tags: Optional[list[str]] = None, *, check: bool = False) -> PushResult:
        args = ["push", "--porcelain", _ref_arg(remote, "remote")]
        if tags:
            args.extend(f"refs/tags/{_ref_arg(t, 'tag')}" for t in tags)
        else:
            args.append("--tags")
        res = self._network(args)
        result = build_push_result(res.stdout, res.stderr, res.exit_code)
        logger.info("push tags to %s: %s", remote, result.summary)
        return self._finish(result, check)


class _MergeRebaseMixin(_EngineBase):
    def merge(
        self,
        branch: str,
        *,
        strategy: MergeStrategy = "merge",
        message: Optional[str] = None,
        check: bool = False,
    ) -> MergeResult:
        if strategy not in MERGE_STRATEGY_FLAGS:
            raise ValueError(f"Unknown merge strategy: {strategy!r}")
        source = _ref_arg(branch, "branch")
        incoming = self._rev_count(f"HEAD..{source}")

        args = ["merge"]
        flag = MERGE_STRATEGY_FLAGS[strategy]
        if flag:
            args.append(flag)
        if message:
            args.extend(["-m", message])
        else:
            args.append("--no-edit")
        args.append(source)

        res = self._git(args, env=_NO_EDITOR)
        result = build_merge_result(
            res.stdout, res.stderr, res.exit_code,
            source_branch=source, strategy=strategy, commits_merged=incoming,
        )
        result = self._with_status_conflicts(result)
        logger.info("merge %s (%s): %s", source, strategy, result.summary)
        return self._finish(result, check)

    def continue_merge(self, *, check: bool = False) -> MergeResult:
        res = self._git(["merge", "--continue"], env=_NO_EDITOR)
        result = self._with_status_conflicts(build_merge_result(res.stdout, res.stderr, res.exit_code))
        result = self._blocked_by_conflicts(result)
        if result.success:
            result = replace(result, merge_commit_created=True)
        logger.info("merge --continue: %s", result.summary)
        return self._finish(result, check)

    def abort_merge(self) -> None:
        require_ok(self._git(["merge", "--abort"]), "git merge --abort")
        logger.info("Merge aborted")

    def _rebase_result(self, res: GitRunResult, *, target_branch: str | None = None, expected: int = 0) -> RebaseResult:
        result = build_rebase_result(res.stdout, res.stderr, res.exit_code, target_branch=target_branch)
        result = self._with_status_conflicts(result)
        state = self.tracker.get_operation_state()
        if isinstance(state, RebaseInProgress):
            result = replace(
                result,
                is_in_progress=True,
                current_commit=result.current_commit or state.current,
                total_commits=result.total_commits or state.total,
            )
        elif result.success and not result.total_commits and "is up to date" not in result.raw_output:
            result = replace(result, commits_rebased=expected, current_commit=expected, total_commits=expected)
        return result

    def rebase(self, onto: str, *, check: bool = False) -> RebaseResult:
        target = _ref_arg(onto, "onto")
        expected = self._rev_count(f"{target}..HEAD")
        res = self._git(["rebase", target], env=_NO_EDITOR)
        result = self._rebase_result(res, target_branch=target, expected=expected)
        logger.info("rebase onto %s: %s", target, result.summary)
        return self._finish(result, check)

    def continue_rebase(self, *, check: bool = False) -> RebaseResult:
        res = self._git(["rebase", "--continue"], env=_NO_EDITOR)
        result = self._blocked_by_conflicts(self._rebase_result(res))
        logger.info("rebase --continue: %s", result.summary)
        return self._finish(result, check)

    def abort_rebase(self) -> None:
        require_ok(self._git(["rebase", "--abort"]), "git rebase --abort")
        logger.info("Rebase aborted")

    def skip_rebase(self, *, check: bool = False) -> RebaseResult:
        res = self._git(["rebase", "--skip"], env=_NO_EDITOR)
        result = self._rebase_result(res)
        logger.info("rebase --skip: %s", result.summary)
        return self._finish(result, check)

    def get_operation_state(self) -> OperationState:
        return self.tracker.get_operation_state()

    def inspect_operation(self) -> OperationReport:
        return self.tracker.inspect()

    def continue_operation(self, *, check: bool = False) -> OperationResult:
        state = self.get_operation_state()
        if isinstance(state, NoOperation):
            raise GitExecutionError("No operation in progress to continue")
        if isinstance(state, MergeInProgress):
            return self.continue_merge(check=check)
        if isinstance(state, RebaseInProgress):
            return self.continue_rebase(check=check)
        if isinstance(state, CherryPickInProgress):
            return self.cherry_pick_continue(check=check)
        if isinstance(state, RevertInProgress):
            return self.revert_continue(check=check)
        raise TypeError(f"Unknown operation state: {state!r}")

    def abort_operation(self) -> None:
        state = self.get_operation_state()
        if isinstance(state, NoOperation):
            raise GitExecutionError("No operation in progress to abort")
        if isinstance(state, MergeInProgress):
            self.abort_merge()
        elif isinstance(state, RebaseInProgress):
            self.abort_rebase()
        elif isinstance(state, CherryPickInProgress):
            self.cherry_pick_abort()
        elif isinstance(state, RevertInProgress):
            self.revert_abort()
        else:
            raise TypeError(f"Unknown operation state: {state!r}")

    def skip_operation(self, *, check: bool = False) -> OperationResult:
        state = self.get_operation_state()
        if isinstance(state, NoOperation):
            raise GitExecutionError("No operation in progress to skip")
        if isinstance(state, MergeInProgress):
            raise GitExecutionError("A merge cannot skip commits; continue or abort it")
        if isinstance(state, RebaseInProgress):
            return self.skip_rebase(check=check)
        if isinstance(state, CherryPickInProgress):
            return self.cherry_pick_skip(check=check)
        if isinstance(state, RevertInProgress):
            return self.revert_skip(check=check)
        raise TypeError(f"Unknown operation state: {state!r}")

    def accept_current(self, path: str) -> ResolutionResult:
        return self.resolver.accept_current(path)

    def accept_incoming(self, path: str) -> ResolutionResult:
        return self.resolver.accept_incoming(path)

    def mark_resolved(self, path: str) -> ResolutionResult:
        return self.resolver.mark_resolved(path)


class _AdvancedMixin(_EngineBase):
    def reset(self, target: str = "HEAD", *, mode: ResetMode = "mixed", check: bool = False) -> ResetResult:
        if mode not in RESET_MODES:
            raise ValueError(f"Unknown reset mode: {mode!r}")
        rev = _ref_arg(target, "target")
        res = self._git(["reset", f"--{mode}", rev])
        result = build_reset_result(res.stdout, res.stderr, res.exit_code, target_commit=rev, mode=mode)
        logger.info("reset --%s %s: %s", mode, rev, result.summary)
        return self._finish(result, check)

    def _cherry_pick_result(self, res: GitRunResult) -> CherryPickResult:
        head = self._head() if res.exit_code == 0 else None
        result = build_cherry_pick_result(res.stdout, res.stderr, res.exit_code, commit_hash=head)
        return self._with_status_conflicts(result)

    def cherry_pick(self, commit: str, *, check: bool = False) -> CherryPickResult:
        rev = _ref_arg(commit, "commit")
        result = self._cherry_pick_result(self._git(["cherry-pick", rev], env=_NO_EDITOR))
        logger.info("cherry-pick %s: %s", rev, result.summary)
        return self._finish(result, check)

    def cherry_pick_continue(self, *, check: bool = False) -> CherryPickResult:
        result = self._blocked_by_conflicts(
            self._cherry_pick_result(self._git(["cherry-pick", "--continue"], env=_NO_EDITOR))
        )
        logger.info("cherry-pick --continue: %s", result.summary)
        return self._finish(result, check)

    def cherry_pick_skip(self, *, check: bool = False) -> CherryPickResult:
        result = self._cherry_pick_result(self._git(["cherry-pick", "--skip"], env=_NO_EDITOR))
        logger.info("cherry-pick --skip: %s", result.summary)
        return self._finish(result, check)

    def cherry_pick_abort(self) -> None:
        require_ok(self._git(["cherry-pick", "--abort"]), "git cherry-pick --abort")
        logger.info("Cherry-pick aborted")

    def _revert_result(self, res: GitRunResult) -> RevertResult:
        head = self._head() if res.exit_code == 0 else None
        result = build_revert_result(res.stdout, res.stderr, res.exit_code, revert_commit_hash=head)
        return self._with_status_conflicts(result)

    def revert(self, commit: str, *, check: bool = False) -> RevertResult:
        rev = _ref_arg(commit, "commit")
        result = self._revert_result(self._git(["revert", "--no-edit", rev], env=_NO_EDITOR))
        logger.info("revert %s: %s", rev, result.summary)
        return self._finish(result, check)

    def revert_continue(self, *, check: bool = False) -> RevertResult:
        result = self._blocked_by_conflicts(
            self._revert_result(self._git(["revert", "--continue"], env=_NO_EDITOR))
        )
        logger.info("revert --continue: %s", result.summary)
        return self._finish(result, check)

    def revert_skip(self, *, check: bool = False) -> RevertResult:
        result = self._revert_result(self._git(["revert", "--skip"], env=_NO_EDITOR))
        logger.info("revert --skip: %s", result.summary)
        return self._finish(result, check)

    def revert_abort(self) -> None:
        require_ok(self._git(["revert", "--abort"]), "git revert --abort")
        logger.info("Revert aborted")


class GitEngine(
    _StatusMixin,
    _DiffMixin,
    _BlameMixin,
    _HistoryMixin,
    _BranchMixin,
    _StashMixin,
    _RemoteMixin,
    _MergeRebaseMixin,
    _AdvancedMixin,
    GitOperations,
):
    """
    Stateless facade over one repository. Every call runs git once (or a
    few times for follow-up counts) and parses the output; nothing is cached
    between calls. Callers serialize mutating calls per repository.
    """
