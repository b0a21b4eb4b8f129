"""Canonicalize validated snapshot records before they are written back.

Sanitizing is total: given a validated, integrity-checked snapshot it never
fails.  Over-length text is truncated rather than rejected so a restore is
all-or-nothing on validation, never partial on length.

Rules:
    - text fields are trimmed, truncated to ``FIELD_CAPS`` and trimmed again
    - optional text that ends up empty becomes ``None``
    - missing timestamps become the sanitize-time ``now``
    - a missing order status becomes ``pending``

Applying ``sanitize_snapshot`` to its own output changes nothing.
"""

from datetime import datetime, timezone

from pydantic import BaseModel

from tailor_backup.backup.models import (
    DEFAULT_ORDER_STATUS,
    FIELD_CAPS,
    TIMESTAMP_FIELDS,
    Customer,
    Order,
    Snapshot,
)

REQUIRED_TEXT_FIELDS = frozenset({"name", "order_number"})


class SanitizedRecords(BaseModel):
    """Customer and order records ready for the record store."""

    customers: list[Customer]
    orders: list[Order]

    def customer_payloads(self) -> list[dict]:
        """Store payloads with every customer field present (``None`` = absent)."""
        return [customer.model_dump() for customer in self.customers]

    def order_payloads(self) -> list[dict]:
        """Store payloads with every order field present (``None`` = absent)."""
        return [order.model_dump() for order in self.orders]


def clean_text(value: str | None, cap: int | None = None) -> str | None:
    """Trim, truncate to ``cap`` and trim again; blank becomes ``None``."""
    if value is None:
        return None
    text = value.strip()
    if cap is not None and len(text) > cap:
        text = text[:cap].rstrip()
    return text or None


def default_timestamp(value: str | None, now: str) -> str:
    """Return the supplied timestamp, or ``now`` when it is missing or blank.

    This is the only place absent timestamps are defaulted.  ``now`` is the
    sanitize time, not the snapshot's export time.
    """
    return clean_text(value, FIELD_CAPS["created_at"]) or now


def sanitize_snapshot(
    snapshot: Snapshot | SanitizedRecords,
    now: datetime | str | None = None,
) -> SanitizedRecords:
    """Produce canonical records from a validated snapshot.

    Args:
        snapshot: Validated, integrity-checked snapshot (or the output of a
            previous ``sanitize_snapshot`` call).
        now: Timestamp used for missing ``created_at``/``updated_at``.
            Defaults to the current UTC time.

    Returns:
        ``SanitizedRecords`` in the same order as the input.

    Example:
        records = sanitize_snapshot(snapshot, now="2024-06-01T00:00:00+00:00")
        records.orders[0].status
        # 'pending'
    """
    stamp = _format_now(now)
    return SanitizedRecords(
        customers=[_sanitize_record(c, stamp) for c in snapshot.customers],
        orders=[
            _sanitize_record(o, stamp, status=o.status or DEFAULT_ORDER_STATUS)
            for o in snapshot.orders
        ],
    )


def _format_now(now: datetime | str | None) -> str:
    if now is None:
        return datetime.now(timezone.utc).isoformat()
    if isinstance(now, datetime):
        return now.isoformat()
    return now


def _sanitize_record(record: Customer | Order, stamp: str, **overrides) -> Customer | Order:
    """Apply the text, timestamp and default rules to one record."""
    updates = dict(overrides)
    for field in type(record).model_fields:
        value = getattr(record, field)
        if field in TIMESTAMP_FIELDS:
            updates[field] = default_timestamp(value, stamp)
        elif field in FIELD_CAPS:
            cleaned = clean_text(value, FIELD_CAPS[field])
            if cleaned is None and field in REQUIRED_TEXT_FIELDS:
                cleaned = ""
            updates[field] = cleaned
    return record.model_copy(update=updates)
