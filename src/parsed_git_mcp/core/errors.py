from __future__ import annotations

from typing import Any


class ParsedGitMCPError(Exception):
    """Base error for the project."""


class InvalidRootError(ParsedGitMCPError):
    pass


class GitPolicyError(ParsedGitMCPError):
    pass


class GitExecutionError(ParsedGitMCPError):
    """git could not be spawned, failed without a domain meaning, or was killed."""


class GitTimeoutError(GitExecutionError):
    def __init__(self, message: str, *, argv: list[str] | None = None, timeout_s: float | None = None) -> None:
        super().__init__(message)
        self.argv = argv or []
        self.timeout_s = timeout_s


class ParseError(ParsedGitMCPError):
    pass


class FileNotBlamableError(ParseError):
    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(f"Cannot blame {file_path}: {reason}")
        self.file_path = file_path
        self.reason = reason


class OutcomeError(ParsedGitMCPError):
    """A mutating operation finished with a reported, non-success outcome."""

    def __init__(self, message: str, result: Any = None) -> None:
        super().__init__(message)
        self.result = result


class ConflictError(OutcomeError):
    pass


class AuthenticationError(OutcomeError):
    pass


class RejectedError(OutcomeError):
    pass
