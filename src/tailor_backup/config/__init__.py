"""Configuration management: store profiles, backup settings, TOML loading.

Usage:
    >>> from tailor_backup.config import load_config, StoreProfile, AppConfig
"""

from tailor_backup.config.loader import load_config
from tailor_backup.config.models import AppConfig, BackupSettings, StoreProfile

__all__ = ["load_config", "AppConfig", "BackupSettings", "StoreProfile"]
