"""TOML configuration loader."""

import os
import tomllib
from pathlib import Path

from tailor_backup.config.models import AppConfig, BackupSettings, StoreProfile

CONFIG_ENV_VAR = "TAILOR_CONFIG"
DEFAULT_CONFIG_NAME = "tailor.toml"


def default_config_path() -> Path:
    """Return ``$TAILOR_CONFIG`` if set, else ``./tailor.toml``."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.cwd() / DEFAULT_CONFIG_NAME


def load_config(config_path: Path | str | None = None) -> AppConfig:
    """Load store profiles and backup settings from a TOML file.

    Args:
        config_path: Path to tailor.toml (default: ``default_config_path()``)

    Returns:
        AppConfig with all profiles and backup settings

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config format is invalid (pydantic ``ValidationError``
            is a ``ValueError``)
    """
    config_path = Path(config_path) if config_path is not None else default_config_path()

    if not config_path.exists():
        raise FileNotFoundError(
            f"Config not found: {config_path}\n"
            f"Create {DEFAULT_CONFIG_NAME} with at least one [profiles.<name>] section."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse profiles
    profiles = {}
    for name, profile_data in data.get("profiles", {}).items():
        profiles[name] = StoreProfile(**profile_data)

    return AppConfig(
        profiles=profiles,
        backup=BackupSettings(**data.get("backup", {})),
    )
