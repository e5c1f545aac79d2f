"""Pytest configuration and fixtures for RepoKit tests."""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from repokit.config import GitConfig, reset_settings

GIT_IDENTITY = {
    "GIT_AUTHOR_NAME": "RepoKit Tests",
    "GIT_AUTHOR_EMAIL": "tests@repokit.invalid",
    "GIT_COMMITTER_NAME": "RepoKit Tests",
    "GIT_COMMITTER_EMAIL": "tests@repokit.invalid",
    "GIT_MERGE_AUTOEDIT": "no",
}


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def temp_config_file(temp_dir: Path) -> Path:
    """Create a temporary config file."""
    config_path = temp_dir / "config.yaml"
    config_path.write_text(
        """
git:
  binary: /opt/git/bin/git
  timeout: 45
  graceful_fail: false
  env:
    GIT_AUTHOR_NAME: Config Author

logging:
  level: DEBUG
  file: "{log_path}"
""".format(log_path=str(temp_dir / "repokit.log").replace("\\", "/"))
    )
    return config_path


@pytest.fixture
def git_config() -> GitConfig:
    """Git settings with a fixed binary name, for argument assertions."""
    return GitConfig(binary="git")


@pytest.fixture
def real_git_config() -> GitConfig:
    """Git settings for end-to-end tests against the real executable."""
    return GitConfig(env=GIT_IDENTITY)


@pytest.fixture
def fake_work_tree(temp_dir: Path) -> Path:
    """A directory that classifies as a work tree without running git."""
    repo_dir = temp_dir / "repo"
    (repo_dir / ".git").mkdir(parents=True)
    return repo_dir


@pytest.fixture
def fake_bare_repo(temp_dir: Path) -> Path:
    """A directory that classifies as a bare repository without running git."""
    repo_dir = temp_dir / "bare.git"
    repo_dir.mkdir()
    (repo_dir / "config").write_text(
        "[core]\n\trepositoryformatversion = 0\n\tbare = true\n"
    )
    return repo_dir


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Clean RepoKit environment variables for testing."""
    original = {
        var: os.environ.pop(var)
        for var in list(os.environ)
        if var.startswith("REPOKIT_") or var == "GIT_BINARY"
    }

    reset_settings()

    yield

    for var in list(os.environ):
        if var.startswith("REPOKIT_") or var == "GIT_BINARY":
            del os.environ[var]
    os.environ.update(original)

    reset_settings()
