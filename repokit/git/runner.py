"""Git command execution for RepoKit."""

from __future__ import annotations

import functools
import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from repokit.config.settings import GitConfig
from repokit.errors import (
    CommandFailedError,
    CommandTimeoutError,
    NoOutputError,
    ProcessStartError,
)
from repokit.git.types import CommandResult, Outcome

logger = logging.getLogger(__name__)

Argument = Union[str, "os.PathLike[str]"]

WINDOWS_DEFAULT_BINARY = "git"
POSIX_DEFAULT_BINARY = "/usr/bin/git"


@functools.lru_cache(maxsize=None)
def find_git_binary() -> str:
    """Locate the git executable.

    Looks git up on PATH once per process and falls back to a
    platform default when it cannot be found.

    Returns:
        Path or name of the git executable.
    """
    default = WINDOWS_DEFAULT_BINARY if os.name == "nt" else POSIX_DEFAULT_BINARY
    found = shutil.which("git")
    if found is None:
        logger.debug(f"git not found on PATH, falling back to {default}")
        return default
    return found


def resolve_git_binary(configured: Optional[str] = None) -> str:
    """Return the configured git binary, discovering it if unset."""
    if configured:
        return configured
    return find_git_binary()


def classify_result(result: CommandResult, graceful_fail: bool = True) -> Outcome:
    """Decide whether a finished git command succeeded.

    With graceful failing on, a non-zero exit still counts as success
    when git wrote nothing to stderr but something to stdout; git does
    this for no-op commands such as committing with nothing staged.

    Args:
        result: The captured command result.
        graceful_fail: Whether graceful failing is enabled.

    Returns:
        The outcome of the command.
    """
    if result.returncode == 0:
        return Outcome.SUCCESS
    if not graceful_fail:
        return Outcome.HARD_FAILURE
    if not result.stderr and not result.stdout:
        return Outcome.NO_OUTPUT_FAILURE
    if not result.stderr:
        return Outcome.GRACEFUL_SUCCESS
    return Outcome.HARD_FAILURE


class CommandRunner:
    """Runs git subcommands inside one repository directory.

    Arguments are always passed to git as an argument vector, never
    through a shell, so no value needs quoting.
    """

    def __init__(
        self,
        cwd: Path | str,
        binary: Optional[str] = None,
        timeout: Optional[float] = None,
        graceful_fail: bool = True,
        env: Optional[Mapping[str, str]] = None,
    ):
        """Initialize a CommandRunner.

        Args:
            cwd: Working directory for every command.
            binary: Git executable; discovered on PATH when None.
            timeout: Seconds before a command is killed; None for no limit.
            graceful_fail: See classify_result.
            env: Environment overrides on top of the inherited environment.
        """
        self.cwd = Path(cwd)
        self.binary = resolve_git_binary(binary)
        self.timeout = timeout
        self.graceful_fail = graceful_fail
        self._env: dict[str, str] = dict(env or {})
        self._last_stderr = ""

    @classmethod
    def from_config(cls, cwd: Path | str, config: GitConfig) -> "CommandRunner":
        """Create a runner from a GitConfig."""
        return cls(
            cwd,
            binary=config.binary,
            timeout=config.timeout,
            graceful_fail=config.graceful_fail,
            env=config.env,
        )

    @property
    def last_stderr(self) -> str:
        """Standard error of the most recent command."""
        return self._last_stderr

    @property
    def env(self) -> dict[str, str]:
        """Copy of the environment overrides."""
        return dict(self._env)

    def set_env(self, key: str, value: Optional[str]) -> None:
        """Set an environment variable for git; None removes the override."""
        if value is None:
            self._env.pop(key, None)
        else:
            self._env[key] = value

    def build_args(self, command: str, arguments: Sequence[Argument] = ()) -> list[str]:
        """Build the full argument vector for a command."""
        return [self.binary, command.strip()] + [os.fspath(arg) for arg in arguments]

    def execute(self, command: str, arguments: Sequence[Argument] = ()) -> CommandResult:
        """Run a git command and capture its result without judging it.

        Raises:
            ProcessStartError: If the git process could not be started.
            CommandTimeoutError: If the command ran past the timeout.
        """
        cmd = self.build_args(command, arguments)
        self._last_stderr = ""

        logger.debug(f"Running git command: {' '.join(cmd)}")

        try:
            completed = subprocess.run(
                cmd,
                cwd=str(self.cwd),
                env={**os.environ, **self._env},
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            stderr = e.stderr
            if isinstance(stderr, bytes):
                stderr = stderr.decode("utf-8", errors="replace")
            self._last_stderr = stderr or ""
            raise CommandTimeoutError(cmd, e.timeout) from e
        except OSError as e:
            raise ProcessStartError(self.binary, str(e)) from e

        result = CommandResult(
            args=tuple(cmd),
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            returncode=completed.returncode,
        )
        self._last_stderr = result.stderr
        return result

    def run(self, command: str, arguments: Sequence[Argument] = ()) -> str:
        """Run a git command and return its standard output.

        Args:
            command: Git subcommand, e.g. "status".
            arguments: Additional arguments, in order.

        Returns:
            Standard output of the command.

        Raises:
            CommandFailedError: If the command failed (see classify_result).
            NoOutputError: If it failed without writing any output.
            ProcessStartError: If the git process could not be started.
            CommandTimeoutError: If the command ran past the timeout.
        """
        result = self.execute(command, arguments)
        outcome = classify_result(result, self.graceful_fail)

        if outcome is Outcome.GRACEFUL_SUCCESS:
            logger.debug(
                f"git {command} exited with {result.returncode} but wrote only to stdout"
            )
        if outcome.ok:
            return result.stdout

        logger.debug(f"git {command} failed with exit code {result.returncode}")

        if outcome is Outcome.NO_OUTPUT_FAILURE:
            raise NoOutputError(result.returncode, result.args)

        error_msg = (
            result.stderr.strip()
            or f"Git command failed with exit code {result.returncode}"
        )
        raise CommandFailedError(
            error_msg,
            result.returncode,
            stderr=result.stderr,
            stdout=result.stdout,
            command=result.args,
        )
