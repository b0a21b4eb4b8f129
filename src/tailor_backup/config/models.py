"""Pydantic models for store profiles and backup settings."""

from typing import Literal

from pydantic import BaseModel, Field

from tailor_backup.backup.models import MAX_BACKUP_BYTES


# ============================================================================
# Configuration Models
# ============================================================================


class StoreProfile(BaseModel):
    """Record store connection profile from tailor.toml."""

    provider: Literal["rest", "postgres", "supabase"] = "rest"
    url: str
    api_key: str | None = None  # Bearer token (rest) or service key (supabase)
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution
    customers_table: str = "tailor_customers"
    orders_table: str = "tailor_orders"
    timeout: float = 30.0


class BackupSettings(BaseModel):
    """The ``[backup]`` section of tailor.toml."""

    output_dir: str = "backups"
    max_bytes: int = Field(default=MAX_BACKUP_BYTES, gt=0)
    share_phone: str | None = None


class AppConfig(BaseModel):
    """Complete configuration from tailor.toml."""

    profiles: dict[str, StoreProfile]
    backup: BackupSettings = Field(default_factory=BackupSettings)
