"""Backup export and destructive restore for customers and orders.

Usage:
    from tailor_backup.backup import export_snapshot, write_snapshot
    from tailor_backup.backup import restore_backup, validate_snapshot
"""

from tailor_backup.backup.exporter import (
    build_share_message,
    build_share_url,
    export_snapshot,
    serialize_snapshot,
    write_snapshot,
)
from tailor_backup.backup.integrity import IntegrityResult, check_integrity
from tailor_backup.backup.models import (
    FORMAT_VERSION,
    MAX_BACKUP_BYTES,
    Customer,
    Order,
    Snapshot,
)
from tailor_backup.backup.outcomes import RestoreError, RestoreResult
from tailor_backup.backup.restorer import (
    apply_restore,
    load_backup_bytes,
    parse_backup,
    prepare_restore,
    restore_backup,
    restore_bytes,
)
from tailor_backup.backup.sanitizer import SanitizedRecords, sanitize_snapshot
from tailor_backup.backup.validator import ValidationResult, Violation, validate_snapshot

__all__ = [
    # Schema
    "FORMAT_VERSION",
    "MAX_BACKUP_BYTES",
    "Snapshot",
    "Customer",
    "Order",
    # Pipeline
    "validate_snapshot",
    "ValidationResult",
    "Violation",
    "check_integrity",
    "IntegrityResult",
    "sanitize_snapshot",
    "SanitizedRecords",
    # Export
    "export_snapshot",
    "serialize_snapshot",
    "write_snapshot",
    "build_share_message",
    "build_share_url",
    # Restore
    "load_backup_bytes",
    "parse_backup",
    "prepare_restore",
    "apply_restore",
    "restore_bytes",
    "restore_backup",
    "RestoreResult",
    "RestoreError",
]
