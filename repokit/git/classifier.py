"""Repository detection and creation for RepoKit."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Optional

from repokit.errors import (
    NotADirectoryPathError,
    NotARepositoryError,
    ParentNotFoundError,
    RepositoryNotFoundError,
)
from repokit.git.runner import CommandRunner
from repokit.git.types import PathState, RepositoryKind
from repokit.git.utils import read_bare_flag

logger = logging.getLogger(__name__)

# A work tree keeps its metadata in this directory
WORKING_TREE_MARKER = ".git"
# A bare repository has its config file at the top level
BARE_CONFIG_MARKER = "config"

RunnerFactory = Callable[[Path], CommandRunner]


def _resolve_existing(path: Path | str) -> Optional[Path]:
    """Resolve a path to its canonical form, or None if it does not exist."""
    try:
        return Path(path).expanduser().resolve(strict=True)
    except (OSError, RuntimeError):
        return None


def _classify_directory(directory: Path) -> PathState:
    if (directory / WORKING_TREE_MARKER).is_dir():
        return PathState.WORKING_TREE

    config_file = directory / BARE_CONFIG_MARKER
    if config_file.is_file() and read_bare_flag(config_file):
        return PathState.BARE

    return PathState.PLAIN_DIRECTORY


def classify_path(path: Path | str) -> PathState:
    """Classify a path without raising.

    Args:
        path: Path to inspect.

    Returns:
        PathState describing the path.
    """
    resolved = _resolve_existing(path)
    if resolved is None:
        return PathState.MISSING
    if not resolved.is_dir():
        return PathState.NOT_A_DIRECTORY
    return _classify_directory(resolved)


def _populate(
    directory: Path,
    runner_factory: RunnerFactory,
    remote: Optional[str],
    bare: bool,
) -> RepositoryKind:
    """Clone or initialize a repository inside an existing directory."""
    runner = runner_factory(directory)

    if remote:
        arguments = []
        if bare:
            arguments.append("--bare")
        arguments.append("--verbose")
        arguments.extend([remote, str(directory)])

        logger.info(f"Cloning {remote} into {directory}")
        runner.run("clone", arguments)
        return RepositoryKind.BARE if bare else RepositoryKind.WORKING_TREE

    logger.info(f"Initializing repository in {directory}")
    runner.run("init")
    return RepositoryKind.WORKING_TREE


def resolve_repository(
    path: Path | str,
    create: bool = False,
    remote: Optional[str] = None,
    bare: bool = False,
    runner_factory: Optional[RunnerFactory] = None,
) -> tuple[Path, RepositoryKind]:
    """Resolve a path to a repository, creating one on demand.

    Rules, first match wins:

    1. An existing non-directory is rejected, even with create=True.
    2. A directory with a `.git` directory is a work tree.
    3. A directory whose `config` declares `bare = true` is bare.
    4. Any other directory is cloned into (when a remote is given) or
       initialized, if create is set; otherwise it is rejected.
    5. A missing path is created when create is set and its parent
       exists, then handled as in 4.

    Nothing is rolled back if cloning or initializing fails halfway.

    Args:
        path: Path to the repository root.
        create: Create and initialize the repository if needed.
        remote: Clone this source when creating. Implies create=True.
        bare: Make the clone bare.
        runner_factory: Builds the runner used for init/clone.

    Returns:
        Tuple of (resolved path, repository kind).

    Raises:
        RepositoryNotFoundError: Path is missing and create is off.
        NotADirectoryPathError: Path exists but is not a directory.
        NotARepositoryError: Directory is not a repository and create is off.
        ParentNotFoundError: Path is missing and so is its parent.
    """
    if remote is not None:
        create = True
    if runner_factory is None:
        runner_factory = CommandRunner

    resolved = _resolve_existing(path)

    if resolved is None:
        if not create:
            raise RepositoryNotFoundError(str(path))

        target = Path(os.path.abspath(Path(path).expanduser()))
        if not target.parent.is_dir():
            raise ParentNotFoundError(str(path))

        try:
            target.mkdir()
        except FileExistsError as e:
            # e.g. a dangling symlink occupies the name
            raise NotADirectoryPathError(str(path)) from e

        logger.debug(f"Created directory {target}")
        resolved = target.resolve(strict=True)
        return resolved, _populate(resolved, runner_factory, remote, bare)

    if not resolved.is_dir():
        raise NotADirectoryPathError(str(resolved))

    state = _classify_directory(resolved)
    if state.kind is not None:
        logger.debug(f"{resolved} is a {state.kind.value} repository")
        return resolved, state.kind

    if not create:
        raise NotARepositoryError(str(resolved))

    return resolved, _populate(resolved, runner_factory, remote, bare)
