"""Git integration for RepoKit.

This package resolves repository paths, runs git as a subprocess and
parses its textual output into structured results.
"""

from repokit.git.classifier import classify_path, resolve_repository
from repokit.git.remote import GitRemote, RemoteDirection
from repokit.git.repository import GitRepository
from repokit.git.runner import (
    CommandRunner,
    classify_result,
    find_git_binary,
    resolve_git_binary,
)
from repokit.git.types import (
    CommandResult,
    FileSelector,
    Many,
    Outcome,
    PathState,
    RepositoryKind,
    Single,
    to_selector,
)
from repokit.git.utils import (
    parse_active_branch,
    parse_bare_flag,
    parse_branch_list,
    parse_remote_branch_list,
    parse_remote_list,
    parse_tag_list,
    read_bare_flag,
    split_lines,
)

__all__ = [
    # Main class
    "GitRepository",
    # Resolution
    "classify_path",
    "resolve_repository",
    # Execution
    "CommandRunner",
    "classify_result",
    "find_git_binary",
    "resolve_git_binary",
    # Data classes
    "CommandResult",
    "FileSelector",
    "GitRemote",
    "Many",
    "Outcome",
    "PathState",
    "RemoteDirection",
    "RepositoryKind",
    "Single",
    "to_selector",
    # Parsers
    "parse_active_branch",
    "parse_bare_flag",
    "parse_branch_list",
    "parse_remote_branch_list",
    "parse_remote_list",
    "parse_tag_list",
    "read_bare_flag",
    "split_lines",
]
