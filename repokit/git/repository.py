"""Git repository operations for RepoKit."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from repokit.config import get_settings
from repokit.config.settings import GitConfig
from repokit.errors import RepositoryError
from repokit.git.classifier import resolve_repository
from repokit.git.remote import GitRemote, RemoteDirection
from repokit.git.runner import Argument, CommandRunner
from repokit.git.types import RepositoryKind, to_selector
from repokit.git.utils import (
    parse_active_branch,
    parse_branch_list,
    parse_remote_branch_list,
    parse_remote_list,
    parse_tag_list,
)

logger = logging.getLogger(__name__)

DESCRIPTION_FILE = "description"


class GitRepository:
    """A local git repository driven through the git executable.

    The path and kind are fixed once the repository is resolved.
    Branches, tags and commits live in git; nothing is cached here.
    """

    def __init__(
        self,
        path: Path | str,
        create: bool = False,
        remote: Optional[str] = None,
        bare: bool = False,
        config: Optional[GitConfig] = None,
    ):
        """Open or create a GitRepository.

        Args:
            path: Path to the repository root.
            create: Create directory and initialize it if needed.
            remote: Clone this source when creating. Implies create=True.
            bare: Make the clone bare.
            config: Git invocation settings; defaults to the loaded settings.

        Raises:
            RepositoryError: If the path cannot be resolved to a repository.
            GitError: If initializing or cloning fails.
        """
        self._config = config if config is not None else get_settings().get_git_config()
        self._runner: Optional[CommandRunner] = None

        def make_runner(directory: Path) -> CommandRunner:
            self._runner = CommandRunner.from_config(directory, self._config)
            return self._runner

        self._path, self._kind = resolve_repository(
            path,
            create=create,
            remote=remote,
            bare=bare,
            runner_factory=make_runner,
        )
        if self._runner is None:
            self._runner = CommandRunner.from_config(self._path, self._config)

    @classmethod
    def open(cls, path: Path | str, config: Optional[GitConfig] = None) -> "GitRepository":
        """Open an existing repository."""
        return cls(path, config=config)

    @classmethod
    def init(cls, path: Path | str, config: Optional[GitConfig] = None) -> "GitRepository":
        """Open a repository, initializing it first if needed."""
        return cls(path, create=True, config=config)

    @classmethod
    def clone(
        cls,
        path: Path | str,
        remote: str,
        bare: bool = False,
        config: Optional[GitConfig] = None,
    ) -> "GitRepository":
        """Clone a remote into path and open the result.

        Args:
            path: Target directory (created if missing).
            remote: Repository to clone.
            bare: Make a bare clone.
            config: Git invocation settings.
        """
        return cls(path, remote=remote, bare=bare, config=config)

    @classmethod
    def probe(
        cls, path: Path | str, config: Optional[GitConfig] = None
    ) -> Optional["GitRepository"]:
        """Open a repository if path is one.

        Returns:
            GitRepository instance, or None if path is not a repository.
        """
        try:
            return cls(path, config=config)
        except RepositoryError:
            return None

    def __repr__(self) -> str:
        return f"GitRepository(path={str(self._path)!r}, kind={self._kind.value})"

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def path(self) -> Path:
        """Resolved repository root."""
        return self._path

    @property
    def kind(self) -> RepositoryKind:
        return self._kind

    @property
    def is_bare(self) -> bool:
        return self._kind is RepositoryKind.BARE

    @property
    def git_dir(self) -> Path:
        """The repository's metadata directory (".git" unless bare)."""
        if self.is_bare:
            return self._path
        return self._path / ".git"

    @property
    def config(self) -> GitConfig:
        return self._config

    @property
    def runner(self) -> CommandRunner:
        return self._runner

    @property
    def last_stderr(self) -> str:
        """Standard error of the last command.

        Git reports progress on stderr even when it succeeds, e.g. for
        clone and checkout.
        """
        return self._runner.last_stderr

    @property
    def timeout(self) -> Optional[float]:
        """Seconds before a git command is killed."""
        return self._runner.timeout

    @timeout.setter
    def timeout(self, value: Optional[float]) -> None:
        self._runner.timeout = value

    @property
    def graceful_fail(self) -> bool:
        """Whether a non-zero exit with only stdout output counts as success."""
        return self._runner.graceful_fail

    @graceful_fail.setter
    def graceful_fail(self, value: bool) -> None:
        self._runner.graceful_fail = value

    def set_env(self, key: str, value: Optional[str]) -> None:
        """Set an environment variable for git; None removes it."""
        self._runner.set_env(key, value)

    @property
    def description(self) -> str:
        """Contents of the repository description file."""
        return (self.git_dir / DESCRIPTION_FILE).read_text(encoding="utf-8")

    @description.setter
    def description(self, value: str) -> None:
        (self.git_dir / DESCRIPTION_FILE).write_text(value, encoding="utf-8")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def run(self, command: str, arguments: Sequence[Argument] = ()) -> str:
        """Run a git command in the repository.

        Args:
            command: Git subcommand.
            arguments: Additional arguments, in order.

        Returns:
            Command stdout.
        """
        return self._runner.run(command, arguments)

    def status(self, exclude_untracked: bool = False) -> str:
        """Run `git status`.

        Args:
            exclude_untracked: Leave untracked files out (-uno).
        """
        arguments = []
        if exclude_untracked:
            arguments.append("-uno")
        return self.run("status", arguments)

    def add(
        self,
        files: object = "*",
        verbose: bool = True,
        force: bool = False,
        dry_run: bool = False,
    ) -> str:
        """Stage files for commit.

        Args:
            files: A pathspec, or a list of pathspecs.
            verbose: Be verbose (--verbose).
            force: Allow adding otherwise ignored files (--force).
            dry_run: Only show what would be added (--dry-run).

        Returns:
            Command output.

        Raises:
            InvalidArgumentError: If files is neither a string nor a list.
        """
        selector = to_selector(files)

        arguments = []
        if verbose:
            arguments.append("--verbose")
        if force:
            arguments.append("--force")
        if dry_run:
            arguments.append("--dry-run")
        arguments.extend(selector.to_args())

        return self.run("add", arguments)

    def rm(
        self,
        files: object = "*",
        cached: bool = False,
        force: bool = False,
        verbose: bool = True,
        dry_run: bool = False,
    ) -> str:
        """Remove files from the index and the work tree.

        Args:
            files: A pathspec, or a list of pathspecs.
            cached: Only unstage, leaving work tree files alone (--cached).
            force: Override the up-to-date check (--force).
            verbose: When False, suppress per-file output (--quiet).
            dry_run: Only show what would be removed (--dry-run).

        Raises:
            InvalidArgumentError: If files is neither a string nor a list.
        """
        selector = to_selector(files)

        arguments = []
        if cached:
            arguments.append("--cached")
        if force:
            arguments.append("--force")
        if not verbose:
            arguments.append("--quiet")
        if dry_run:
            arguments.append("--dry-run")
        arguments.extend(selector.to_args())

        return self.run("rm", arguments)

    def commit(
        self,
        message: str,
        all: bool = True,
        verbose: bool = True,
        dry_run: bool = False,
    ) -> str:
        """Create a commit.

        Committing with nothing to commit makes git exit non-zero with a
        message on stdout only; with graceful failing on, that message is
        returned instead of raising.

        Args:
            message: Commit message.
            all: Stage modified and deleted tracked files first (--all).
            verbose: Be verbose (--verbose).
            dry_run: Only show what would be committed (--dry-run).
        """
        arguments = []
        if all:
            arguments.append("--all")
        if verbose:
            arguments.append("--verbose")
        if dry_run:
            arguments.append("--dry-run")
        arguments.append(f"--message={message}")

        return self.run("commit", arguments)

    def clone_to(self, target: Path | str, bare: bool = False) -> str:
        """Clone this repository into another local directory.

        Args:
            target: Target directory.
            bare: Make the clone bare (--bare).
        """
        arguments = ["--local"]
        if bare:
            arguments.append("--bare")
        arguments.extend([str(self._path), str(target)])

        return self.run("clone", arguments)

    def clean(
        self,
        directories: bool = False,
        force: bool = False,
        dry_run: bool = False,
    ) -> str:
        """Remove untracked files.

        Args:
            directories: Remove untracked directories too (-d).
            force: Required unless clean.requireForce is false (--force).
            dry_run: Only show what would be removed (--dry-run).
        """
        arguments = []
        if directories:
            arguments.append("-d")
        if force:
            arguments.append("--force")
        if dry_run:
            arguments.append("--dry-run")

        return self.run("clean", arguments)

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    def create_branch(self, name: str) -> str:
        """Create a branch at HEAD."""
        return self.run("branch", [name])

    def delete_branch(self, name: str, force: bool = False, remotes: bool = False) -> str:
        """Delete a branch.

        Args:
            name: Branch name.
            force: Delete even if not merged (-D instead of -d).
            remotes: Delete remote-tracking branches (-r).
        """
        arguments = ["-D" if force else "-d"]
        if remotes:
            arguments.append("-r")
        arguments.append(name)

        return self.run("branch", arguments)

    def list_branches(self, keep_marker: bool = False) -> list[str]:
        """List local branches.

        Args:
            keep_marker: Keep the "* " prefix on the active branch.
        """
        return parse_branch_list(self.run("branch"), keep_marker=keep_marker)

    def list_remote_branches(self) -> list[str]:
        """List remote-tracking branches, without the origin/HEAD alias."""
        return parse_remote_branch_list(self.run("branch", ["-r"]))

    def active_branch(self, keep_marker: bool = False) -> str:
        """Get the name of the checked out branch."""
        return parse_active_branch(self.run("branch"), keep_marker=keep_marker)

    def checkout(self, branch: str, detach: bool = False) -> str:
        """Switch branches.

        Args:
            branch: Branch or commit to check out.
            detach: Detach HEAD at the commit (--detach).
        """
        arguments = []
        if detach:
            arguments.append("--detach")
        arguments.append(branch)

        return self.run("checkout", arguments)

    def merge(self, branch: str, no_commit: bool = False) -> str:
        """Merge a branch into the current one, always with a merge commit.

        Args:
            branch: Branch to merge.
            no_commit: Stop before committing the merge (--no-commit).
        """
        arguments = ["--no-ff"]
        if no_commit:
            arguments.append("--no-commit")
        arguments.append(branch)

        return self.run("merge", arguments)

    # ------------------------------------------------------------------
    # Remotes
    # ------------------------------------------------------------------

    def fetch(self) -> str:
        """Fetch from the default remote."""
        return self.run("fetch")

    def push(
        self,
        remote: Optional[str] = None,
        branch: Optional[str] = None,
        tags: bool = False,
        dry_run: bool = False,
    ) -> str:
        """Push to a remote.

        Args:
            remote: Remote name.
            branch: Branch or refspec to push.
            tags: Push all tags as well (--tags).
            dry_run: Do everything except send the updates (--dry-run).
        """
        arguments = []
        if tags:
            arguments.append("--tags")
        if dry_run:
            arguments.append("--dry-run")
        if remote is not None:
            arguments.append(remote)
        if branch is not None:
            arguments.append(branch)

        return self.run("push", arguments)

    def pull(
        self,
        remote: Optional[str] = None,
        branch: Optional[str] = None,
        no_commit: bool = False,
    ) -> str:
        """Pull from a remote, always merging with a merge commit.

        Args:
            remote: Remote name.
            branch: Remote branch.
            no_commit: Stop before committing the merge (--no-commit).
        """
        arguments = ["--no-ff"]
        if no_commit:
            arguments.append("--no-commit")
        if remote is not None:
            arguments.append(remote)
        if branch is not None:
            arguments.append(branch)

        return self.run("pull", arguments)

    def add_remote(self, remote: GitRemote) -> str:
        """Register a remote.

        A PUSH remote whose name is already registered only replaces
        that remote's push url; any other remote is added as new, and
        git refuses duplicate names.
        """
        if remote.is_push() and self.get_remote(remote.name) is not None:
            return self.run("remote", ["set-url", "--push", remote.name, remote.url])
        return self.run("remote", ["add", remote.name, remote.url])

    def remove_remote(self, name: str) -> str:
        """Unregister a remote and its tracking branches."""
        return self.run("remote", ["remove", name])

    def list_remotes(self) -> list[GitRemote]:
        """List registered remotes."""
        return parse_remote_list(self.run("remote", ["-v"]))

    def get_remote(self, name: str = "origin") -> Optional[GitRemote]:
        """Find a registered remote by name.

        Returns:
            The fetch side of a split remote, or None if unknown.
        """
        matches = [r for r in self.list_remotes() if r.name == name]
        for remote in matches:
            if remote.direction != RemoteDirection.PUSH:
                return remote
        return matches[0] if matches else None

    # ------------------------------------------------------------------
    # Tags and history
    # ------------------------------------------------------------------

    def add_tag(
        self,
        tag: str,
        message: Optional[str] = None,
        force: bool = False,
        commit: Optional[str] = None,
    ) -> str:
        """Create an annotated tag.

        Args:
            tag: Tag name.
            message: Tag message; defaults to the tag name.
            force: Replace an existing tag of that name (--force).
            commit: Object to tag; defaults to HEAD.
        """
        if message is None:
            message = tag

        arguments = ["--annotate", f"--message={message}"]
        if force:
            arguments.append("--force")
        arguments.append(tag)
        if commit is not None:
            arguments.append(commit)

        return self.run("tag", arguments)

    def delete_tag(self, tag: str) -> str:
        """Delete a tag."""
        return self.run("tag", ["-d", tag])

    def list_tags(self, pattern: Optional[str] = None) -> list[str]:
        """List tags.

        Args:
            pattern: Shell wildcard pattern to match tags against.
        """
        arguments = ["-l"]
        if pattern:
            arguments.append(pattern)
        return parse_tag_list(self.run("tag", arguments))

    def log(self, format: Optional[str] = None) -> str:
        """Show the commit log.

        Args:
            format: Format string for --pretty=format:.
        """
        if format is None:
            return self.run("log")
        return self.run("log", [f"--pretty=format:{format}"])
