"""Referential integrity check between orders and customers.

The check is snapshot-local: every order's ``customer_id`` must name a
customer in the same snapshot.  The live store is never consulted because a
restore is about to wipe it.
"""

from pydantic import BaseModel, Field

from tailor_backup.backup.models import Snapshot


class IntegrityResult(BaseModel):
    """Result of ``check_integrity``."""

    valid: bool
    snapshot: Snapshot | None = None
    orphan_order_ids: list[str] = Field(default_factory=list)

    def format_report(self) -> str:
        """Format the result as a human-readable report."""
        if self.valid:
            return "All orders reference a customer in the backup"
        return (
            f"{len(self.orphan_order_ids)} orders reference missing customers: "
            f"{', '.join(self.orphan_order_ids)}"
        )


def check_integrity(snapshot: Snapshot) -> IntegrityResult:
    """Verify every order references a customer present in the snapshot.

    Orphans are reported, never dropped or repaired.

    Args:
        snapshot: A validated snapshot.

    Returns:
        ``IntegrityResult`` carrying the snapshot on success, or the ids of
        the orphaned orders (in snapshot order) on failure.
    """
    customer_ids = {customer.id for customer in snapshot.customers}
    orphans = [
        order.id for order in snapshot.orders
        if order.customer_id not in customer_ids
    ]

    if orphans:
        return IntegrityResult(valid=False, orphan_order_ids=orphans)
    return IntegrityResult(valid=True, snapshot=snapshot)
