from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class GitRunnerConfig:
    """
    Safe runner configuration.
    """
    timeout_s: float = 30.0
    # fetch/pull/push/merge/rebase may wait on the network or on large trees
    network_timeout_s: float = 120.0
    max_output_chars: int = 5_000_000
    git_executable: str = "git"

    # Read-only allowlist: prevents accidental mutating commands.
    read_only_allowlist: tuple[str, ...] = (
        "rev-parse",
        "rev-list",
        "status",
        "log",
        "diff",
        "show",
        "branch",
        "remote",
        "config",
        "ls-files",
        "cat-file",
        "describe",
        "tag",
        "blame",
        "ls-tree",
        "merge-base",
    )


class Settings(BaseSettings):
    """Environment overrides, e.g. PARSED_GIT_TIMEOUT_S=10."""

    TIMEOUT_S: float = 30.0
    NETWORK_TIMEOUT_S: float = 120.0
    MAX_OUTPUT_CHARS: int = 5_000_000
    GIT_EXECUTABLE: str = "git"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="PARSED_GIT_", env_file=".env", extra="ignore")

    def runner_config(self) -> GitRunnerConfig:
        return GitRunnerConfig(
            timeout_s=self.TIMEOUT_S,
            network_timeout_s=self.NETWORK_TIMEOUT_S,
            max_output_chars=self.MAX_OUTPUT_CHARS,
            git_executable=self.GIT_EXECUTABLE,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
