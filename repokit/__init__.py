"""RepoKit - drive local git repositories from Python."""

__version__ = "0.1.0"

from repokit.errors import (
    CommandFailedError,
    CommandTimeoutError,
    GitError,
    InvalidArgumentError,
    NoOutputError,
    NotADirectoryPathError,
    NotARepositoryError,
    ParentNotFoundError,
    ProcessStartError,
    RepoKitError,
    RepositoryError,
    RepositoryNotFoundError,
)
from repokit.git import GitRemote, GitRepository, RemoteDirection, RepositoryKind

__all__ = [
    "__version__",
    "GitRepository",
    "GitRemote",
    "RemoteDirection",
    "RepositoryKind",
    "RepoKitError",
    "RepositoryError",
    "RepositoryNotFoundError",
    "NotADirectoryPathError",
    "NotARepositoryError",
    "ParentNotFoundError",
    "GitError",
    "CommandFailedError",
    "NoOutputError",
    "CommandTimeoutError",
    "ProcessStartError",
    "InvalidArgumentError",
]
