"""Destructive restore from a backup file.

A restore runs these stages in order and stops at the first failure:

1. Load -- filename must end in ``.json``; size is capped before reading.
2. Parse -- strict UTF-8 JSON.
3. Validate -- ``validate_snapshot``.
4. Check integrity -- ``check_integrity``.
5. Sanitize -- ``sanitize_snapshot`` (cannot fail).
6. Wipe -- delete every order, then every customer.
7. Reinsert -- create every customer, then every order.

Stages 1-5 happen before any store call, so rejected input never touches
live data.  Stages 6-7 are not atomic: the store has no transaction
primitive, and a failure there is reported with partial progress counts and
is not rolled back.  Store calls are awaited one at a time.

Usage:
    from tailor_backup.backup.restorer import restore_backup

    result = await restore_backup(store, "backups/tailor-backup-2024-01-01.json")
    if result.success:
        print(result.format_report())
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from tailor_backup.adapters.base import RecordStore
from tailor_backup.backup.integrity import check_integrity
from tailor_backup.backup.models import MAX_BACKUP_BYTES
from tailor_backup.backup.outcomes import (
    MalformedInputError,
    OrphanReferenceError,
    RestoreError,
    RestoreResult,
    RestoreStage,
    SchemaViolationError,
    SizeExceededError,
    WrongFileTypeError,
)
from tailor_backup.backup.sanitizer import SanitizedRecords, sanitize_snapshot
from tailor_backup.backup.validator import validate_snapshot

logger = logging.getLogger(__name__)

BACKUP_EXTENSION = ".json"


# ============================================================================
# Input stages (no store access)
# ============================================================================


def check_file_type(filename: str) -> None:
    """Raise ``WrongFileTypeError`` unless ``filename`` ends in ``.json``."""
    if not filename.lower().endswith(BACKUP_EXTENSION):
        raise WrongFileTypeError(filename)


def check_size(size: int, max_bytes: int = MAX_BACKUP_BYTES) -> None:
    """Raise ``SizeExceededError`` when ``size`` is over ``max_bytes``."""
    if size > max_bytes:
        raise SizeExceededError(size, max_bytes)


def load_backup_bytes(path: str | Path, max_bytes: int = MAX_BACKUP_BYTES) -> bytes:
    """Read a backup file, enforcing the filename and size gates first.

    The extension is checked before the file is touched, and the size is
    checked from ``stat()`` before reading.  At most ``max_bytes + 1``
    bytes are ever read, so a file that grows after ``stat()`` is still
    rejected without loading it whole.

    Args:
        path: Backup file path.
        max_bytes: Size cap in bytes.

    Returns:
        The raw file contents.

    Raises:
        WrongFileTypeError: If the filename does not end in ``.json``.
        SizeExceededError: If the file is larger than ``max_bytes``.
        MalformedInputError: If the file cannot be read.
    """
    path = Path(path)
    check_file_type(path.name)

    try:
        check_size(path.stat().st_size, max_bytes)
        with open(path, "rb") as f:
            payload = f.read(max_bytes + 1)
    except OSError as e:
        raise MalformedInputError(f"Cannot read backup file: {e}") from e

    check_size(len(payload), max_bytes)
    return payload


def parse_backup(payload: bytes) -> Any:
    """Decode UTF-8 bytes and parse them as JSON.

    ``NaN``/``Infinity`` literals and nesting too deep for the parser are
    rejected along with ordinary syntax errors. So are ``\\uXXXX`` escapes
    that decode to lone surrogates: the parsed document must re-encode as
    UTF-8, or the store would only reject it after the wipe.

    Raises:
        MalformedInputError: On any decode or parse failure.
    """
    try:
        raw = json.loads(payload.decode("utf-8-sig"), parse_constant=_reject_constant)
        json.dumps(raw, ensure_ascii=False).encode("utf-8")
    except UnicodeEncodeError as e:
        raise MalformedInputError(f"Backup contains text that is not valid Unicode: {e}") from e
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedInputError(f"Backup is not valid JSON: {e}") from e
    except RecursionError as e:
        raise MalformedInputError("Backup JSON is nested too deeply") from e
    return raw


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def prepare_restore(
    payload: bytes,
    filename: str,
    max_bytes: int = MAX_BACKUP_BYTES,
    now: datetime | str | None = None,
) -> SanitizedRecords:
    """Run every non-destructive stage and stage the records to write.

    Args:
        payload: Raw backup bytes.
        filename: Name the bytes were uploaded under (extension is checked).
        max_bytes: Size cap in bytes.
        now: Timestamp for missing record timestamps (default: current time).

    Returns:
        Sanitized records, ready for ``apply_restore``.

    Raises:
        RestoreError: The subclass matching the first failed stage.
    """
    check_file_type(filename)
    check_size(len(payload), max_bytes)

    raw = parse_backup(payload)

    validation = validate_snapshot(raw)
    if not validation.valid:
        raise SchemaViolationError(validation.violations)

    integrity = check_integrity(validation.snapshot)
    if not integrity.valid:
        raise OrphanReferenceError(integrity.orphan_order_ids)

    return sanitize_snapshot(integrity.snapshot, now=now)


# ============================================================================
# Destructive stages
# ============================================================================


async def apply_restore(store: RecordStore, records: SanitizedRecords) -> RestoreResult:
    """Replace the whole store contents with ``records``.

    Deletes all orders before any customer, then creates all customers
    before any order.  Each call is awaited before the next is issued.

    Args:
        store: Record store client.
        records: Output of ``prepare_restore``.

    Returns:
        ``RestoreResult`` with ``status="success"``, or ``"store_error"``
        with the failing stage and the progress made before it.
    """
    progress = {
        "orders_deleted": 0,
        "customers_deleted": 0,
        "customers_created": 0,
        "orders_created": 0,
    }
    stage: RestoreStage = "wipe_orders"

    try:
        for order in await store.list_orders():
            await store.delete_order(order["id"])
            progress["orders_deleted"] += 1

        stage = "wipe_customers"
        for customer in await store.list_customers():
            await store.delete_customer(customer["id"])
            progress["customers_deleted"] += 1

        logger.info(
            f"Wiped {progress['orders_deleted']} orders and "
            f"{progress['customers_deleted']} customers"
        )

        stage = "reinsert_customers"
        for payload in records.customer_payloads():
            await store.create_customer(payload)
            progress["customers_created"] += 1

        stage = "reinsert_orders"
        for payload in records.order_payloads():
            await store.create_order(payload)
            progress["orders_created"] += 1
    except Exception as e:
        logger.exception(f"Restore failed during {stage}; store may be partially restored")
        return RestoreResult(
            status="store_error",
            error=str(e) or type(e).__name__,
            stage=stage,
            **progress,
        )

    logger.info(
        f"Restored {progress['customers_created']} customers and "
        f"{progress['orders_created']} orders"
    )
    return RestoreResult(
        status="success",
        customers_restored=progress["customers_created"],
        orders_restored=progress["orders_created"],
        **progress,
    )


# ============================================================================
# Orchestrators
# ============================================================================


async def restore_bytes(
    store: RecordStore,
    payload: bytes,
    filename: str,
    max_bytes: int = MAX_BACKUP_BYTES,
    dry_run: bool = False,
    now: datetime | str | None = None,
) -> RestoreResult:
    """Restore the store from uploaded backup bytes.

    Args:
        store: Record store client.
        payload: Raw backup bytes.
        filename: Name the bytes were uploaded under.
        max_bytes: Size cap in bytes.
        dry_run: When ``True``, stop after sanitizing and report the counts
            that would be restored without calling the store.
        now: Timestamp for missing record timestamps.

    Returns:
        ``RestoreResult`` -- never raises for bad input or store failures.
    """
    try:
        records = prepare_restore(payload, filename, max_bytes=max_bytes, now=now)
    except RestoreError as e:
        logger.warning(f"Backup rejected ({e.status}): {e}")
        return e.to_result()

    if dry_run:
        return RestoreResult(
            status="success",
            customers_restored=len(records.customers),
            orders_restored=len(records.orders),
            dry_run=True,
        )

    return await apply_restore(store, records)


async def restore_backup(
    store: RecordStore,
    backup_path: str | Path,
    max_bytes: int = MAX_BACKUP_BYTES,
    dry_run: bool = False,
    now: datetime | str | None = None,
) -> RestoreResult:
    """Restore the store from a backup file on disk.

    Args:
        store: Record store client.
        backup_path: Path to the ``.json`` backup file.
        max_bytes: Size cap in bytes.
        dry_run: Validate and count only; do not touch the store.
        now: Timestamp for missing record timestamps.

    Returns:
        ``RestoreResult`` -- never raises for bad input or store failures.

    Example:
        result = await restore_backup(store, "backups/backup.json", dry_run=True)
        print(result.format_report())
        # Would restore 12 customers and 30 orders
    """
    try:
        payload = load_backup_bytes(backup_path, max_bytes=max_bytes)
    except RestoreError as e:
        logger.warning(f"Backup rejected ({e.status}): {e}")
        return e.to_result()

    return await restore_bytes(
        store,
        payload,
        Path(backup_path).name,
        max_bytes=max_bytes,
        dry_run=dry_run,
        now=now,
    )
