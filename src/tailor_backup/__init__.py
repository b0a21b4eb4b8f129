"""tailor-backup: full-dataset backup and destructive restore for a tailor shop.

Exports every customer and order from the shop's record store into a
versioned JSON snapshot, and restores such a snapshot after validating it,
checking that every order's customer is present, and sanitizing it.

Usage:
    from tailor_backup import get_store, export_snapshot, write_snapshot
    from tailor_backup import restore_backup, validate_snapshot
"""

__version__ = "0.1.0"

# Stores
from tailor_backup.adapters.base import RecordStore, RecordStoreError
from tailor_backup.adapters.postgres import AsyncPostgresRecordStore
from tailor_backup.adapters.rest import AsyncRestRecordStore

# Backup pipeline
from tailor_backup.backup.exporter import export_snapshot, serialize_snapshot, write_snapshot
from tailor_backup.backup.integrity import check_integrity
from tailor_backup.backup.models import Customer, Order, Snapshot
from tailor_backup.backup.outcomes import RestoreResult
from tailor_backup.backup.restorer import restore_backup, restore_bytes
from tailor_backup.backup.sanitizer import sanitize_snapshot
from tailor_backup.backup.validator import validate_snapshot

# Config
from tailor_backup.config.loader import load_config
from tailor_backup.config.models import AppConfig, StoreProfile

# Factory
from tailor_backup.factory import ProfileNotFoundError, get_store, resolve_url

__all__ = [
    # Stores
    "RecordStore",
    "RecordStoreError",
    "AsyncRestRecordStore",
    "AsyncPostgresRecordStore",
    # Backup pipeline
    "Snapshot",
    "Customer",
    "Order",
    "validate_snapshot",
    "check_integrity",
    "sanitize_snapshot",
    "export_snapshot",
    "serialize_snapshot",
    "write_snapshot",
    "restore_backup",
    "restore_bytes",
    "RestoreResult",
    # Config
    "load_config",
    "AppConfig",
    "StoreProfile",
    # Factory
    "get_store",
    "ProfileNotFoundError",
    "resolve_url",
]
