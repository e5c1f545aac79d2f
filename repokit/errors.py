"""Centralized exception hierarchy for RepoKit.

This module defines all custom exceptions used throughout RepoKit,
organized in a hierarchy so callers can tell an expected negative
classification (the path is simply not a repository) apart from a real
fault (git could not be started at all) without matching on messages.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence


class RepoKitError(Exception):
    """Base exception for all RepoKit errors.

    Attributes:
        message: Human-readable error message.
        code: Optional error code for programmatic handling.
        details: Optional dictionary with additional error context.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(RepoKitError):
    """Raised when there's a configuration problem."""
    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid configuration for '{field}': {reason}",
            code="INVALID_CONFIG",
            details={"field": field, "value": str(value)[:100], "reason": reason},
        )


# =============================================================================
# Repository Resolution Errors
# =============================================================================

class RepositoryError(RepoKitError):
    """Base exception for failures while resolving a repository path."""

    def __init__(self, message: str, path: str, code: str):
        super().__init__(message, code, {"path": path})
        self.path = path


class RepositoryNotFoundError(RepositoryError):
    """Raised when the path does not exist and creation was not requested."""

    def __init__(self, path: str):
        super().__init__(f'"{path}" does not exist', path, "NOT_FOUND")


class NotADirectoryPathError(RepositoryError):
    """Raised when the path exists but is not a directory."""

    def __init__(self, path: str):
        super().__init__(f'"{path}" is not a directory', path, "NOT_A_DIRECTORY")


class NotARepositoryError(RepositoryError):
    """Raised when a directory holds neither a work tree nor a bare repository."""

    def __init__(self, path: str):
        super().__init__(f'"{path}" is not a git repository', path, "NOT_A_REPOSITORY")


class ParentNotFoundError(RepositoryError):
    """Raised when a repository cannot be created because its parent is missing."""

    def __init__(self, path: str):
        super().__init__(
            f'cannot create repository "{path}" in non-existent directory',
            path,
            "PARENT_NOT_FOUND",
        )


# =============================================================================
# Git Errors
# =============================================================================

class GitError(RepoKitError):
    """Raised when a git operation fails."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
        code: str = "GIT_ERROR",
    ):
        details = {}
        if returncode is not None:
            details["returncode"] = returncode
        if stderr:
            details["stderr"] = stderr[:500]  # Truncate for safety
        super().__init__(message, code, details)
        self.returncode = returncode
        self.stderr = stderr


class CommandFailedError(GitError):
    """Raised when git exits non-zero and the outcome counts as a failure."""

    def __init__(
        self,
        message: str,
        returncode: int,
        stderr: str = "",
        stdout: str = "",
        command: Optional[Sequence[str]] = None,
        code: str = "COMMAND_FAILED",
    ):
        super().__init__(message, returncode, stderr, code)
        self.stdout = stdout
        self.command = list(command) if command else []
        if self.command:
            self.details["command"] = " ".join(self.command)


class NoOutputError(CommandFailedError):
    """Raised when git exits non-zero without writing to either stream."""

    def __init__(self, returncode: int, command: Optional[Sequence[str]] = None):
        super().__init__(
            "No output returned from git command",
            returncode,
            command=command,
            code="NO_OUTPUT",
        )


class CommandTimeoutError(GitError):
    """Raised when a git command exceeds its timeout and is killed."""

    def __init__(self, command: Sequence[str], timeout: float):
        super().__init__(
            f"Git command timed out after {timeout}s: {' '.join(command)}",
            code="COMMAND_TIMEOUT",
        )
        self.timeout = timeout
        self.details["timeout_seconds"] = timeout


class ProcessStartError(GitError):
    """Raised when the git process could not be spawned at all."""

    def __init__(self, binary: str, reason: str):
        super().__init__(
            f"Failed to start git process '{binary}': {reason}",
            code="PROCESS_START_FAILED",
        )
        self.binary = binary
        self.details["binary"] = binary


# =============================================================================
# Argument Errors
# =============================================================================

class InvalidArgumentError(RepoKitError, ValueError):
    """Raised when a call-site parameter has the wrong shape."""

    def __init__(self, parameter: str, reason: str):
        super().__init__(
            message=f"Invalid argument '{parameter}': {reason}",
            code="INVALID_ARGUMENT",
            details={"parameter": parameter, "reason": reason},
        )
