"""Git output parsing utilities for RepoKit.

Every function here is a pure text transform over git output; none of
them runs git.
"""

from __future__ import annotations

import logging
from pathlib import Path

from repokit.errors import GitError
from repokit.git.remote import GitRemote, RemoteDirection

logger = logging.getLogger(__name__)

ACTIVE_BRANCH_MARKER = "* "
HEAD_ALIAS_MARKER = "HEAD -> "

_TRUE_VALUES = {"true", "yes", "on", "1"}


def split_lines(output: str) -> list[str]:
    """Split command output into trimmed, non-empty lines.

    Only a newline ends a line. Ref names may contain other characters that
    str.splitlines() treats as line breaks.

    Args:
        output: Raw command output.

    Returns:
        Lines in the order git printed them.
    """
    lines = []
    for line in output.split("\n"):
        line = line.strip()
        if line:
            lines.append(line)
    return lines


def parse_branch_list(output: str, keep_marker: bool = False) -> list[str]:
    """Parse `git branch` output.

    Args:
        output: Output from 'git branch'.
        keep_marker: Keep the "* " prefix on the active branch.

    Returns:
        Branch names in git's order.
    """
    branches = []
    for line in output.split("\n"):
        line = line.strip()
        if not keep_marker:
            line = line.replace(ACTIVE_BRANCH_MARKER, "")
        if line:
            branches.append(line)
    return branches


def parse_active_branch(output: str, keep_marker: bool = False) -> str:
    """Find the active branch in `git branch` output.

    Args:
        output: Output from 'git branch'.
        keep_marker: Return the name with its "* " prefix.

    Returns:
        Name of the active branch.

    Raises:
        GitError: If no line carries the active marker.
    """
    marked = [
        line for line in parse_branch_list(output, keep_marker=True)
        if line.startswith("*")
    ]
    if not marked:
        raise GitError("No active branch found in branch listing")

    active = marked[0]
    if keep_marker:
        return active
    return active.replace(ACTIVE_BRANCH_MARKER, "")


def parse_remote_branch_list(output: str) -> list[str]:
    """Parse `git branch -r` output, dropping symbolic HEAD pointers.

    Lines like "origin/HEAD -> origin/main" are aliases, not branches.
    """
    return [line for line in split_lines(output) if HEAD_ALIAS_MARKER not in line]


def parse_tag_list(output: str) -> list[str]:
    """Parse `git tag -l` output."""
    return split_lines(output)


def parse_remote_list(output: str) -> list[GitRemote]:
    """Parse `git remote -v` output into remotes.

    Each remote is printed twice, once per direction:

        origin  https://example.com/repo.git (fetch)
        origin  https://example.com/repo.git (push)

    Args:
        output: Output from 'git remote -v'.

    Returns:
        One PUSH_FETCH remote per name when both urls agree, otherwise
        one remote per direction. Order follows first appearance.
    """
    urls: dict[str, dict[str, str]] = {}

    for line in split_lines(output):
        # name<TAB>url (direction); the url itself may contain spaces
        if "\t" not in line:
            continue
        name, rest = line.split("\t", 1)

        url, _, suffix = rest.rpartition(" ")
        if suffix == "(push)":
            direction = "push"
        elif suffix == "(fetch)":
            direction = "fetch"
        else:
            url, direction = rest, "fetch"

        url = url.strip()
        if not url:
            continue

        urls.setdefault(name.strip(), {}).setdefault(direction, url)

    remotes = []
    for name, by_direction in urls.items():
        fetch_url = by_direction.get("fetch")
        push_url = by_direction.get("push")

        if fetch_url is not None and fetch_url == push_url:
            remotes.append(GitRemote(fetch_url, name, RemoteDirection.PUSH_FETCH))
            continue
        if fetch_url is not None:
            remotes.append(GitRemote(fetch_url, name, RemoteDirection.FETCH))
        if push_url is not None:
            remotes.append(GitRemote(push_url, name, RemoteDirection.PUSH))

    return remotes


def parse_bare_flag(content: str) -> bool:
    """Read the `bare` flag out of a git config file body.

    Only `key = value` lines and bare keys are looked at; section headers,
    comments and anything else are skipped. A lone `bare` key means true,
    as in git. The last `bare` entry wins.

    Args:
        content: Text of the repository's config file.

    Returns:
        True if the file declares the repository bare.
    """
    bare = False
    for line in content.splitlines():
        line = line.strip()
        if not line or line[0] in "#;[":
            continue
        if "=" not in line:
            key = line.split("#", 1)[0].split(";", 1)[0]
            if key.strip().lower() == "bare":
                bare = True
            continue

        key, value = line.split("=", 1)
        if key.strip().lower() == "bare":
            value = value.split("#", 1)[0].split(";", 1)[0]
            bare = value.strip().strip('"').lower() in _TRUE_VALUES

    return bare


def read_bare_flag(config_path: Path | str) -> bool:
    """Check whether a repository config file declares the repository bare.

    Unreadable or undecodable files count as "not bare", so a broken
    config never turns a plain directory into a repository.

    Args:
        config_path: Path to the repository's `config` file.

    Returns:
        True if the config declares `bare = true`.
    """
    try:
        content = Path(config_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Could not read git config {config_path}: {e}")
        return False

    return parse_bare_flag(content)
