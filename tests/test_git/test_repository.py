"""Tests for GitRepository class."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from repokit.config import GitConfig
from repokit.errors import (
    CommandFailedError,
    InvalidArgumentError,
    NotARepositoryError,
    RepositoryNotFoundError,
)
from repokit.git.remote import GitRemote, RemoteDirection
from repokit.git.repository import GitRepository
from repokit.git.types import RepositoryKind


@pytest.fixture
def repo(fake_work_tree: Path, git_config: GitConfig) -> GitRepository:
    """A work tree repository whose git calls are mocked per test."""
    return GitRepository(fake_work_tree, config=git_config)


def _ok(stdout: str = "", stderr: str = "") -> MagicMock:
    return MagicMock(stdout=stdout, stderr=stderr, returncode=0)


def _argv(mock_run: MagicMock) -> list[str]:
    """Arguments after the binary of the last git call."""
    return mock_run.call_args[0][0][1:]


class TestGitRepositoryState:
    """Tests for repository construction and state."""

    def test_open_work_tree(self, fake_work_tree, git_config):
        """Test opening a work tree."""
        repo = GitRepository(fake_work_tree, config=git_config)

        assert repo.path == fake_work_tree.resolve()
        assert repo.kind is RepositoryKind.WORKING_TREE
        assert repo.is_bare is False
        assert repo.git_dir == repo.path / ".git"

    def test_open_bare(self, fake_bare_repo, git_config):
        """Test opening a bare repository."""
        repo = GitRepository(fake_bare_repo, config=git_config)

        assert repo.kind is RepositoryKind.BARE
        assert repo.is_bare is True
        assert repo.git_dir == repo.path

    def test_open_missing(self, temp_dir, git_config):
        """Test opening a missing path."""
        with pytest.raises(RepositoryNotFoundError):
            GitRepository.open(temp_dir / "missing", config=git_config)

    def test_probe(self, temp_dir, fake_work_tree, git_config):
        """Test probe returns None instead of raising."""
        assert GitRepository.probe(temp_dir / "missing", config=git_config) is None
        assert GitRepository.probe(fake_work_tree, config=git_config) is not None

    def test_config_reaches_runner(self, fake_work_tree):
        """Test the configuration is used for the runner."""
        config = GitConfig(binary="/opt/git", timeout=3, graceful_fail=False, env={"X": "1"})
        repo = GitRepository(fake_work_tree, config=config)

        assert repo.config is config
        assert repo.runner.binary == "/opt/git"
        assert repo.timeout == 3
        assert repo.graceful_fail is False
        assert repo.runner.env == {"X": "1"}
        assert repo.runner.cwd == repo.path

    def test_default_config_from_settings(self, fake_work_tree, clean_env, monkeypatch):
        """Test settings are used when no config is passed."""
        monkeypatch.setenv("REPOKIT_GIT__TIMEOUT", "7")
        monkeypatch.setattr("repokit.config.CONFIG_FILE", fake_work_tree / "none.yaml")

        repo = GitRepository(fake_work_tree)

        assert repo.timeout == 7

    def test_settable_runtime_options(self, repo):
        """Test timeout and graceful_fail setters."""
        repo.timeout = 10
        repo.graceful_fail = False

        assert repo.runner.timeout == 10
        assert repo.runner.graceful_fail is False

    def test_description(self, repo):
        """Test the description file is read and written verbatim."""
        repo.description = "My project\n"

        assert (repo.git_dir / "description").read_text() == "My project\n"
        assert repo.description == "My project\n"

    def test_bare_description_location(self, fake_bare_repo, git_config):
        """Test bare repositories keep the description at the top."""
        repo = GitRepository(fake_bare_repo, config=git_config)
        repo.description = "bare"

        assert (fake_bare_repo / "description").read_text() == "bare"

    def test_repr(self, repo):
        """Test repr shows path and kind."""
        assert "working_tree" in repr(repo)


class TestGitRepositoryCommands:
    """Tests for the argument vectors GitRepository builds."""

    @patch("subprocess.run")
    def test_run_passthrough(self, mock_run, repo):
        """Test raw command passthrough."""
        mock_run.return_value = _ok("out")

        assert repo.run("rev-parse", ["HEAD"]) == "out"
        assert mock_run.call_args[0][0] == ["git", "rev-parse", "HEAD"]
        assert mock_run.call_args[1]["cwd"] == str(repo.path)

    @patch("subprocess.run")
    def test_status(self, mock_run, repo):
        """Test status flags."""
        mock_run.return_value = _ok()

        repo.status()
        assert _argv(mock_run) == ["status"]

        repo.status(exclude_untracked=True)
        assert _argv(mock_run) == ["status", "-uno"]

    @patch("subprocess.run")
    def test_add_defaults(self, mock_run, repo):
        """Test add stages everything verbosely by default."""
        mock_run.return_value = _ok()

        repo.add()

        assert _argv(mock_run) == ["add", "--verbose", "*"]

    @patch("subprocess.run")
    def test_add_flags_and_files(self, mock_run, repo):
        """Test add flags come before the pathspecs."""
        mock_run.return_value = _ok()

        repo.add(["b.txt", "a b.txt"], verbose=False, force=True, dry_run=True)

        assert _argv(mock_run) == ["add", "--force", "--dry-run", "b.txt", "a b.txt"]

    def test_add_invalid_files(self, repo):
        """Test add rejects a malformed selector before running git."""
        with patch("subprocess.run") as mock_run:
            with pytest.raises(InvalidArgumentError):
                repo.add(42)
            mock_run.assert_not_called()

    @patch("subprocess.run")
    def test_rm(self, mock_run, repo):
        """Test rm flags."""
        mock_run.return_value = _ok()

        repo.rm("old.txt", cached=True, force=True, verbose=False, dry_run=True)

        assert _argv(mock_run) == [
            "rm", "--cached", "--force", "--quiet", "--dry-run", "old.txt",
        ]

    def test_rm_invalid_files(self, repo):
        """Test rm rejects a malformed selector."""
        with pytest.raises(InvalidArgumentError):
            repo.rm({"file": "x"})

    @patch("subprocess.run")
    def test_commit_defaults(self, mock_run, repo):
        """Test commit message is a single literal argument."""
        mock_run.return_value = _ok()

        repo.commit("Fix 'quoted' thing")

        assert _argv(mock_run) == [
            "commit", "--all", "--verbose", "--message=Fix 'quoted' thing",
        ]

    @patch("subprocess.run")
    def test_commit_flags(self, mock_run, repo):
        """Test commit flags can be turned off."""
        mock_run.return_value = _ok()

        repo.commit("msg", all=False, verbose=False, dry_run=True)

        assert _argv(mock_run) == ["commit", "--dry-run", "--message=msg"]

    @patch("subprocess.run")
    def test_clone_to(self, mock_run, repo):
        """Test cloning this repository elsewhere."""
        mock_run.return_value = _ok()

        repo.clone_to("/tmp/target", bare=True)

        assert _argv(mock_run) == ["clone", "--local", "--bare", str(repo.path), "/tmp/target"]

    @patch("subprocess.run")
    def test_clean(self, mock_run, repo):
        """Test clean flags."""
        mock_run.return_value = _ok()

        repo.clean(directories=True, force=True, dry_run=True)

        assert _argv(mock_run) == ["clean", "-d", "--force", "--dry-run"]

    @patch("subprocess.run")
    def test_branch_commands(self, mock_run, repo):
        """Test branch create and delete."""
        mock_run.return_value = _ok()

        repo.create_branch("feature")
        assert _argv(mock_run) == ["branch", "feature"]

        repo.delete_branch("feature")
        assert _argv(mock_run) == ["branch", "-d", "feature"]

        repo.delete_branch("origin/feature", force=True, remotes=True)
        assert _argv(mock_run) == ["branch", "-D", "-r", "origin/feature"]

    @patch("subprocess.run")
    def test_list_branches(self, mock_run, repo):
        """Test branch listing is parsed."""
        mock_run.return_value = _ok("  dev\n* main\n")

        assert repo.list_branches() == ["dev", "main"]
        assert repo.list_branches(keep_marker=True) == ["dev", "* main"]
        assert repo.active_branch() == "main"
        assert _argv(mock_run) == ["branch"]

    @patch("subprocess.run")
    def test_list_remote_branches(self, mock_run, repo):
        """Test remote branch listing drops the HEAD alias."""
        mock_run.return_value = _ok("  origin/HEAD -> origin/main\n  origin/main\n")

        assert repo.list_remote_branches() == ["origin/main"]
        assert _argv(mock_run) == ["branch", "-r"]

    @patch("subprocess.run")
    def test_checkout(self, mock_run, repo):
        """Test checkout flags."""
        mock_run.return_value = _ok(stderr="Switched to branch 'dev'\n")

        repo.checkout("dev")
        assert _argv(mock_run) == ["checkout", "dev"]
        assert "Switched" in repo.last_stderr

        repo.checkout("abc123", detach=True)
        assert _argv(mock_run) == ["checkout", "--detach", "abc123"]

    @patch("subprocess.run")
    def test_merge(self, mock_run, repo):
        """Test merge always disables fast-forward."""
        mock_run.return_value = _ok()

        repo.merge("dev")
        assert _argv(mock_run) == ["merge", "--no-ff", "dev"]

        repo.merge("dev", no_commit=True)
        assert _argv(mock_run) == ["merge", "--no-ff", "--no-commit", "dev"]

    @patch("subprocess.run")
    def test_fetch(self, mock_run, repo):
        """Test fetch."""
        mock_run.return_value = _ok()

        repo.fetch()

        assert _argv(mock_run) == ["fetch"]

    @patch("subprocess.run")
    def test_push(self, mock_run, repo):
        """Test push flags and positionals."""
        mock_run.return_value = _ok()

        repo.push()
        assert _argv(mock_run) == ["push"]

        repo.push("origin", "main", tags=True, dry_run=True)
        assert _argv(mock_run) == ["push", "--tags", "--dry-run", "origin", "main"]

    @patch("subprocess.run")
    def test_pull(self, mock_run, repo):
        """Test pull flags and positionals."""
        mock_run.return_value = _ok()

        repo.pull()
        assert _argv(mock_run) == ["pull", "--no-ff"]

        repo.pull("origin", "main", no_commit=True)
        assert _argv(mock_run) == ["pull", "--no-ff", "--no-commit", "origin", "main"]

    @patch("subprocess.run")
    def test_add_tag(self, mock_run, repo):
        """Test annotated tags default their message to the name."""
        mock_run.return_value = _ok()

        repo.add_tag("v1.0")
        assert _argv(mock_run) == ["tag", "--annotate", "--message=v1.0", "v1.0"]

        repo.add_tag("v1.1", message="Release 1.1", force=True, commit="abc123")
        assert _argv(mock_run) == [
            "tag", "--annotate", "--message=Release 1.1", "--force", "v1.1", "abc123",
        ]

    @patch("subprocess.run")
    def test_delete_tag(self, mock_run, repo):
        """Test tag deletion."""
        mock_run.return_value = _ok()

        repo.delete_tag("v1.0")

        assert _argv(mock_run) == ["tag", "-d", "v1.0"]

    @patch("subprocess.run")
    def test_list_tags(self, mock_run, repo):
        """Test tag listing with and without a pattern."""
        mock_run.return_value = _ok("v1.0\nv1.1\n")

        assert repo.list_tags() == ["v1.0", "v1.1"]
        assert _argv(mock_run) == ["tag", "-l"]

        repo.list_tags("v1.*")
        assert _argv(mock_run) == ["tag", "-l", "v1.*"]

    @patch("subprocess.run")
    def test_log(self, mock_run, repo):
        """Test log format is passed without extra quoting."""
        mock_run.return_value = _ok()

        repo.log()
        assert _argv(mock_run) == ["log"]

        repo.log("%H %s")
        assert _argv(mock_run) == ["log", "--pretty=format:%H %s"]

    @patch("subprocess.run")
    def test_remotes(self, mock_run, repo):
        """Test remote registration and listing."""
        mock_run.return_value = _ok()

        repo.add_remote(GitRemote("/srv/repo.git", "upstream"))
        assert _argv(mock_run) == ["remote", "add", "upstream", "/srv/repo.git"]

        repo.remove_remote("upstream")
        assert _argv(mock_run) == ["remote", "remove", "upstream"]

        mock_run.return_value = _ok("origin\t/srv/a.git (fetch)\norigin\t/srv/a.git (push)\n")
        remotes = repo.list_remotes()
        assert _argv(mock_run) == ["remote", "-v"]
        assert remotes == [GitRemote("/srv/a.git", "origin", RemoteDirection.PUSH_FETCH)]
        assert repo.get_remote("origin") == remotes[0]
        assert repo.get_remote("missing") is None

    @patch("subprocess.run")
    def test_add_push_remote_to_existing(self, mock_run, repo):
        """Test a push remote for a known name sets its push url."""
        mock_run.return_value = _ok("origin\t/srv/a.git (fetch)\norigin\t/srv/a.git (push)\n")

        repo.add_remote(GitRemote("/srv/b.git", "origin", RemoteDirection.PUSH))

        assert _argv(mock_run) == ["remote", "set-url", "--push", "origin", "/srv/b.git"]

    @patch("subprocess.run")
    def test_set_env(self, mock_run, repo):
        """Test env overrides reach git."""
        mock_run.return_value = _ok()

        repo.set_env("GIT_AUTHOR_NAME", "Tester")
        repo.status()

        assert mock_run.call_args[1]["env"]["GIT_AUTHOR_NAME"] == "Tester"

    @patch("subprocess.run")
    def test_failure_propagates(self, mock_run, repo):
        """Test command failures reach the caller."""
        mock_run.return_value = MagicMock(
            stdout="", stderr="error: pathspec 'x' did not match", returncode=1
        )

        with pytest.raises(CommandFailedError) as exc_info:
            repo.checkout("x")

        assert "did not match" in exc_info.value.stderr
