from __future__ import annotations

import pytest

from parsed_git_mcp.core.config import GitRunnerConfig, Settings, get_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    monkeypatch.delenv("PARSED_GIT_TIMEOUT_S", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_match_runner_defaults():
    cfg = Settings(_env_file=None).runner_config()
    default = GitRunnerConfig()

    assert cfg.timeout_s == default.timeout_s
    assert cfg.network_timeout_s == default.network_timeout_s
    assert cfg.max_output_chars == default.max_output_chars
    assert cfg.git_executable == "git"
    assert "blame" in cfg.read_only_allowlist


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PARSED_GIT_TIMEOUT_S", "7.5")
    monkeypatch.setenv("PARSED_GIT_NETWORK_TIMEOUT_S", "300")
    monkeypatch.setenv("PARSED_GIT_MAX_OUTPUT_CHARS", "1000")
    monkeypatch.setenv("PARSED_GIT_LOG_LEVEL", "debug")

    settings = get_settings()
    cfg = settings.runner_config()

    assert cfg.timeout_s == 7.5
    assert cfg.network_timeout_s == 300
    assert cfg.max_output_chars == 1000
    assert settings.LOG_LEVEL == "debug"


def test_settings_are_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("PARSED_GIT_TIMEOUT_S", "1")

    assert get_settings() is first
    get_settings.cache_clear()
    assert get_settings().TIMEOUT_S == 1


def test_tool_runner_uses_settings(monkeypatch, tmp_git_repo):
    from parsed_git_mcp.tools.common import make_engine

    monkeypatch.setenv("PARSED_GIT_MAX_OUTPUT_CHARS", "4321")

    engine = make_engine(str(tmp_git_repo))
    assert engine.config.max_output_chars == 4321
    assert engine.root == tmp_git_repo.resolve()
