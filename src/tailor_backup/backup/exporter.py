"""Full-dataset export.

Reads every customer and order from the record store and wraps them in a
``Snapshot``.  Two sinks are provided: a JSON file on disk and a short share
message (with a WhatsApp link) summarising the counts.

Usage:
    from tailor_backup.backup.exporter import export_snapshot, write_snapshot

    snapshot = await export_snapshot(store)
    path = write_snapshot(snapshot)
"""

import logging
import re
from datetime import date, datetime, timezone
from pathlib import Path
from urllib.parse import quote

from tailor_backup.adapters.base import RecordStore
from tailor_backup.backup.models import FORMAT_VERSION, Snapshot

logger = logging.getLogger(__name__)

SHARE_BASE_URL = "https://wa.me"


async def export_snapshot(store: RecordStore) -> Snapshot:
    """Read the entire store into a snapshot.

    Issues exactly two reads (customers, then orders) with no filtering.
    Store errors propagate unchanged; nothing is written.

    Args:
        store: Record store client.

    Returns:
        ``Snapshot`` stamped with the current format version and time.

    Raises:
        pydantic.ValidationError: If the store returns records that do not
            fit the snapshot schema.
    """
    customers = await store.list_customers()
    orders = await store.list_orders()

    snapshot = Snapshot(
        version=FORMAT_VERSION,
        created_at=datetime.now(timezone.utc).isoformat(),
        customers=customers,
        orders=orders,
    )
    logger.info(
        f"Exported {len(snapshot.customers)} customers and {len(snapshot.orders)} orders"
    )
    return snapshot


def serialize_snapshot(snapshot: Snapshot) -> bytes:
    """Encode a snapshot as pretty-printed UTF-8 JSON."""
    return snapshot.model_dump_json(indent=2).encode("utf-8")


def default_backup_filename(today: date | None = None) -> str:
    """Return ``tailor-backup-YYYY-MM-DD.json`` for ``today``."""
    today = today or date.today()
    return f"tailor-backup-{today.isoformat()}.json"


def write_snapshot(
    snapshot: Snapshot,
    output_path: str | Path | None = None,
    output_dir: str | Path = "backups",
) -> str:
    """Write a snapshot to disk.

    Args:
        snapshot: Snapshot to write.
        output_path: Destination file.  When ``None``, a dated filename is
            generated under ``output_dir``.
        output_dir: Directory for generated filenames.

    Returns:
        Path of the written file.
    """
    if output_path is None:
        output_path = Path(output_dir) / default_backup_filename()

    output_path_obj = Path(output_path)
    output_path_obj.parent.mkdir(parents=True, exist_ok=True)
    output_path_obj.write_bytes(serialize_snapshot(snapshot))

    logger.info(f"Backup written to {output_path_obj}")
    return str(output_path_obj)


def build_share_message(snapshot: Snapshot, today: date | None = None) -> str:
    """Build the short summary sent alongside a backup file."""
    today = today or date.today()
    return (
        "Tailor shop backup\n"
        f"Date: {today.isoformat()}\n"
        f"Customers: {len(snapshot.customers)}\n"
        f"Orders: {len(snapshot.orders)}\n"
        "\n"
        "The backup file has been saved."
    )


def build_share_url(message: str, phone_number: str) -> str:
    """Build a WhatsApp link that opens a chat with ``message`` prefilled.

    Args:
        message: Text to prefill.
        phone_number: Recipient in international format; non-digits are
            ignored (``+92 300-0000000`` works).

    Raises:
        ValueError: If ``phone_number`` contains no digits.
    """
    digits = re.sub(r"\D", "", phone_number)
    if not digits:
        raise ValueError(f"Invalid share phone number: {phone_number!r}")
    return f"{SHARE_BASE_URL}/{digits}?text={quote(message, safe='')}"
