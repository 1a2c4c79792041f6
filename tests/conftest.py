from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest


def _run(cmd: list[str], cwd: Path) -> str:
    out = subprocess.check_output(
        cmd,
        cwd=str(cwd),
        stderr=subprocess.STDOUT,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
    return out.strip()


def _run_allow_fail(cmd: list[str], cwd: Path) -> subprocess.CompletedProcess:
    return subprocess.run(
        cmd,
        cwd=str(cwd),
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        env=_quiet_env(),
    )


def _quiet_env() -> dict:
    env = dict(os.environ)
    env.update({"GIT_EDITOR": "true", "LC_ALL": "C", "GIT_TERMINAL_PROMPT": "0"})
    return env


def _commit_file(repo: Path, relpath: str, content: str, msg: str) -> None:
    p = repo / relpath
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")
    _run(["git", "add", "-A"], repo)
    _run(["git", "commit", "-m", msg], repo)


@pytest.fixture()
def tmp_git_repo(tmp_path: Path) -> Path:
    """
    Creates a small deterministic git repo:
      - 1 initial commit on branch "main"
      - known author identity
      - a couple of files + subdir
    """
    repo = tmp_path / "repo"
    repo.mkdir()

    _run(["git", "init"], repo)
    _run(["git", "symbolic-ref", "HEAD", "refs/heads/main"], repo)
    _run(["git", "config", "user.email", "ci@example.com"], repo)
    _run(["git", "config", "user.name", "CI"], repo)
    _run(["git", "config", "commit.gpgsign", "false"], repo)
    _run(["git", "config", "core.autocrlf", "false"], repo)

    (repo / "README.md").write_text("# dummy\n", encoding="utf-8")
    (repo / "src").mkdir()
    (repo / "src" / "app.py").write_text("print('hi')\n", encoding="utf-8")

    _run(["git", "add", "-A"], repo)
    _run(["git", "commit", "-m", "initial"], repo)

    return repo


@pytest.fixture()
def git_head(tmp_git_repo: Path) -> str:
    return _run(["git", "rev-parse", "HEAD"], tmp_git_repo)


@pytest.fixture()
def make_change(tmp_git_repo: Path):
    """
    Helper: make working tree dirty in a predictable way.
    """
    def _maker(relpath: str = "README.md", text: str = "changed\n") -> Path:
        p = tmp_git_repo / relpath
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p
    return _maker


@pytest.fixture()
def diverged_repo(tmp_git_repo: Path) -> Path:
    """
    "main" and "feature" both edit line 2 of a.txt; checked out on main.
    Merging, rebasing or cherry-picking one onto the other conflicts.
    """
    repo = tmp_git_repo
    _commit_file(repo, "a.txt", "line1\nline2\n", "add a.txt")
    _run(["git", "checkout", "-b", "feature"], repo)
    _commit_file(repo, "a.txt", "line1\nfeature\n", "feature edit")
    _run(["git", "checkout", "main"], repo)
    _commit_file(repo, "a.txt", "line1\nmain\n", "main edit")
    return repo


@pytest.fixture()
def conflicted_merge_repo(diverged_repo: Path) -> Path:
    """diverged_repo with `git merge feature` stopped on a content conflict in a.txt."""
    res = _run_allow_fail(["git", "merge", "feature"], diverged_repo)
    assert res.returncode != 0
    return diverged_repo


@pytest.fixture()
def run_git():
    """Helper: run a git command that may fail; returns the CompletedProcess."""
    return _run_allow_fail


@pytest.fixture()
def commit_file():
    return _commit_file
