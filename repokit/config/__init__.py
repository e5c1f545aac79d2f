"""Configuration management for RepoKit."""

import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from ..errors import ConfigurationError, InvalidConfigError
from .settings import GitConfig, LoggingConfig, Settings

# Singleton instance
_settings: Optional[Settings] = None

# Default config directory
CONFIG_DIR = Path.home() / ".repokit"
CONFIG_FILE = CONFIG_DIR / "config.yaml"
DEFAULTS_FILE = Path(__file__).parent / "defaults.yaml"


def _expand_env_vars(value: Any) -> Any:
    """Recursively expand ${ENV_VAR} syntax in strings."""
    if isinstance(value, str):
        # Match ${VAR_NAME} pattern
        pattern = r"\$\{([^}]+)\}"
        matches = re.findall(pattern, value)
        for var_name in matches:
            env_value = os.environ.get(var_name, "")
            value = value.replace(f"${{{var_name}}}", env_value)
        return value if value else None
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file and return its contents."""
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        try:
            content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Could not parse {path}: {e}",
                code="CONFIG_PARSE_ERROR",
                details={"path": str(path)},
            ) from e
    if content and not isinstance(content, dict):
        raise ConfigurationError(
            f"{path} must contain a mapping",
            code="CONFIG_PARSE_ERROR",
            details={"path": str(path)},
        )
    return content if content else {}


def _drop_none(value: Any) -> Any:
    """Remove unset (None) entries so model defaults apply."""
    if isinstance(value, dict):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    return value


def _transform_config_to_settings(config: dict) -> dict:
    """Transform YAML config structure to Settings model structure."""
    settings_dict = {}

    for section in ["git", "logging"]:
        if isinstance(config.get(section), dict):
            settings_dict[section] = _drop_none(config[section])

    return settings_dict


def ensure_config_dir() -> None:
    """Ensure the config directory exists."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)


def create_default_config() -> bool:
    """Copy the shipped defaults to the user config file.

    Returns:
        True if the file was written, False if it already existed.
    """
    ensure_config_dir()
    if CONFIG_FILE.exists():
        return False

    defaults = DEFAULTS_FILE.read_text(encoding="utf-8")
    CONFIG_FILE.write_text(defaults, encoding="utf-8")
    return True


def load_settings(config_path: Optional[Path] = None, force_reload: bool = False) -> Settings:
    """
    Load settings: user config over shipped defaults, with REPOKIT_*
    environment variables filling whatever the YAML leaves unset.

    Args:
        config_path: Optional path to a custom config file
        force_reload: Force reload even if settings are cached

    Returns:
        Settings instance
    """
    global _settings

    if _settings is not None and not force_reload:
        return _settings

    # Load defaults
    defaults = _load_yaml_file(DEFAULTS_FILE)

    # Load user config
    user_config_path = config_path or CONFIG_FILE
    user_config = _load_yaml_file(user_config_path)

    # Merge configs (user overrides defaults)
    merged = _deep_merge(defaults, user_config)

    # Expand environment variables in the merged config
    expanded = _expand_env_vars(merged)

    # Transform to settings structure
    settings_dict = _transform_config_to_settings(expanded or {})

    # Create Settings instance (this also reads from environment variables)
    try:
        _settings = Settings(**settings_dict)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise InvalidConfigError(field, first.get("input"), first["msg"]) from e

    return _settings


def get_settings() -> Settings:
    """Get the current settings instance, loading if necessary."""
    if _settings is None:
        return load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None


__all__ = [
    "GitConfig",
    "LoggingConfig",
    "Settings",
    "get_settings",
    "load_settings",
    "reset_settings",
    "ensure_config_dir",
    "create_default_config",
    "CONFIG_DIR",
    "CONFIG_FILE",
]
