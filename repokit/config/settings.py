"""Configuration settings models using Pydantic."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GitConfig(BaseModel):
    """How git is invoked.

    Frozen: a repository keeps the exact configuration it was built with.
    """

    model_config = ConfigDict(frozen=True)

    binary: Optional[str] = None
    timeout: Optional[float] = Field(default=None, gt=0)
    graceful_fail: bool = True
    env: dict[str, str] = Field(default_factory=dict)

    @field_validator("binary")
    @classmethod
    def validate_binary(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty binary path as unset."""
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v

    def with_overrides(self, **changes) -> "GitConfig":
        """Return a copy with some fields replaced."""
        return self.model_copy(update=changes)


class LoggingConfig(BaseModel):
    """Configuration for log output."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    file: Optional[str] = None

    @property
    def resolved_file(self) -> Optional[Path]:
        """Get the log file path with ~ expanded."""
        if not self.file:
            return None
        return Path(self.file).expanduser()


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="REPOKIT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # GIT_BINARY is honoured as a shortcut for REPOKIT_GIT__BINARY
    git_binary: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("git_binary", "GIT_BINARY"),
    )

    git: GitConfig = Field(default_factory=GitConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("git_binary")
    @classmethod
    def validate_git_binary(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    def get_git_config(self) -> GitConfig:
        """Get the effective git configuration."""
        if self.git.binary is None and self.git_binary:
            return self.git.with_overrides(binary=self.git_binary)
        return self.git
