"""Value types shared by the git layer."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from repokit.errors import InvalidArgumentError


class RepositoryKind(Enum):
    """Kind of a resolved repository."""

    WORKING_TREE = "working_tree"
    BARE = "bare"


class PathState(Enum):
    """What a filesystem path looks like to the classifier."""

    MISSING = "missing"
    NOT_A_DIRECTORY = "not_a_directory"
    PLAIN_DIRECTORY = "plain_directory"
    WORKING_TREE = "working_tree"
    BARE = "bare"

    @property
    def kind(self) -> RepositoryKind | None:
        """Repository kind for repository states, else None."""
        if self is PathState.WORKING_TREE:
            return RepositoryKind.WORKING_TREE
        if self is PathState.BARE:
            return RepositoryKind.BARE
        return None


class Outcome(Enum):
    """Classification of a finished git command."""

    SUCCESS = "success"
    GRACEFUL_SUCCESS = "graceful_success"
    NO_OUTPUT_FAILURE = "no_output_failure"
    HARD_FAILURE = "hard_failure"

    @property
    def ok(self) -> bool:
        return self in (Outcome.SUCCESS, Outcome.GRACEFUL_SUCCESS)


@dataclass(frozen=True)
class CommandResult:
    """Captured result of one git invocation."""

    args: tuple[str, ...]
    stdout: str
    stderr: str
    returncode: int


@dataclass(frozen=True)
class Single:
    """A single pathspec."""

    name: str

    def to_args(self) -> list[str]:
        return [self.name]


@dataclass(frozen=True)
class Many:
    """An ordered collection of pathspecs."""

    names: tuple[str, ...] = field(default_factory=tuple)

    def to_args(self) -> list[str]:
        return list(self.names)


FileSelector = Union[Single, Many]


def _pathspec(value: object, parameter: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, os.PathLike):
        path = os.fspath(value)
        if isinstance(path, str):
            return path
    raise InvalidArgumentError(
        parameter,
        f"expecting a string or path, found {type(value).__name__}",
    )


def to_selector(value: object, parameter: str = "files") -> FileSelector:
    """Convert a call-site file argument into a FileSelector.

    Accepts a string or path-like (one pathspec), a list or tuple of them
    (several pathspecs in order), or an existing selector.

    Raises:
        InvalidArgumentError: For any other shape.
    """
    if isinstance(value, (Single, Many)):
        return value
    if isinstance(value, (list, tuple)):
        return Many(tuple(_pathspec(item, parameter) for item in value))
    if isinstance(value, (str, os.PathLike)):
        return Single(_pathspec(value, parameter))
    raise InvalidArgumentError(
        parameter,
        f"expecting a string or a list of strings, found {type(value).__name__}",
    )
