from __future__ import annotations

import pytest

from parsed_git_mcp.core.errors import GitPolicyError


@pytest.mark.parametrize(
    "args",
    [
        ["push"],
        ["reset", "--hard"],
        ["clean", "-fd"],
        ["checkout", "-f", "main"],
        ["rebase", "--onto", "x", "y"],
    ],
)
def test_policy_blocks_dangerous_commands(tmp_git_repo, args):
    """
    SafeGitRunner should block dangerous subcommands at policy level.
    """
    from parsed_git_mcp.core.git_runner import SafeGitRunner

    runner = SafeGitRunner(root=str(tmp_git_repo))

    with pytest.raises(GitPolicyError):
        runner.run(args)


@pytest.mark.parametrize(
    "args",
    [
        ["status", "--porcelain=v1"],
        ["rev-parse", "HEAD"],
        ["log", "-1", "--pretty=format:%h %s"],
        ["ls-tree", "-r", "-t", "--name-only", "HEAD"],
        ["show", "HEAD:README.md"],
    ],
)
def test_policy_allows_safe_read_commands(tmp_git_repo, args):
    """
    Safe read commands should run successfully and return a GitRunResult-like object.
    We assert stable fields rather than exact text.
    """
    from parsed_git_mcp.core.git_runner import SafeGitRunner

    runner = SafeGitRunner(root=str(tmp_git_repo))
    res = runner.run(args)

    assert hasattr(res, "exit_code")
    assert hasattr(res, "stdout")
    assert hasattr(res, "stderr")
    assert hasattr(res, "duration_ms")
    assert hasattr(res, "output_truncated")

    assert isinstance(res.exit_code, int)
    assert res.exit_code == 0


@pytest.mark.parametrize(
    "args",
    [
        ["config", "user.name", "Mallory"],
        ["branch", "-D", "main"],
        ["tag", "-d", "v1"],
        ["remote", "add", "evil", "https://example.com/x.git"],
        ["show", "--force"],
    ],
)
def test_policy_blocks_mutating_variants_of_read_commands(tmp_git_repo, args):
    from parsed_git_mcp.core.git_runner import SafeGitRunner

    runner = SafeGitRunner(root=str(tmp_git_repo))

    with pytest.raises(GitPolicyError):
        runner.run(args)


def test_engine_lookups_stay_within_read_only_policy(tmp_git_repo):
    from parsed_git_mcp.core.git_runner import SafeGitRunner

    runner = SafeGitRunner(root=str(tmp_git_repo))

    for args in (
        ["rev-list", "--count", "HEAD"],
        ["merge-base", "HEAD", "HEAD"],
        ["blame", "--porcelain", "--", "README.md"],
        ["ls-files", "--others", "--exclude-standard"],
    ):
        assert runner.run(args).exit_code == 0
