"""Tests for check_integrity."""

from tailor_backup.backup.integrity import check_integrity
from tailor_backup.backup.models import Customer, Order, Snapshot


def _snapshot(customer_ids: list[str], order_refs: list[tuple[str, str]]) -> Snapshot:
    return Snapshot(
        version="1.0",
        created_at="2024-01-01T00:00:00Z",
        customers=[Customer(id=cid, name=f"Customer {cid}") for cid in customer_ids],
        orders=[
            Order(id=oid, customer_id=cid, order_number=f"N-{oid}")
            for oid, cid in order_refs
        ],
    )


class TestCheckIntegrity:
    """Orders must reference customers present in the same snapshot."""

    def test_all_references_resolve(self):
        snapshot = _snapshot(["c1", "c2"], [("o1", "c1"), ("o2", "c2"), ("o3", "c1")])
        result = check_integrity(snapshot)
        assert result.valid is True
        assert result.snapshot is snapshot
        assert result.orphan_order_ids == []

    def test_empty_snapshot(self):
        assert check_integrity(_snapshot([], [])).valid is True

    def test_customers_without_orders(self):
        assert check_integrity(_snapshot(["c1"], [])).valid is True

    def test_single_orphan(self):
        result = check_integrity(_snapshot(["c1"], [("o1", "missing")]))
        assert result.valid is False
        assert result.snapshot is None
        assert result.orphan_order_ids == ["o1"]

    def test_orphans_listed_in_snapshot_order(self):
        snapshot = _snapshot(
            ["c1"], [("o3", "x"), ("o1", "c1"), ("o2", "y"), ("o4", "x")]
        )
        assert check_integrity(snapshot).orphan_order_ids == ["o3", "o2", "o4"]

    def test_reference_is_case_sensitive(self):
        result = check_integrity(_snapshot(["c1"], [("o1", "C1")]))
        assert result.orphan_order_ids == ["o1"]

    def test_report(self):
        result = check_integrity(_snapshot([], [("o1", "c1"), ("o2", "c1")]))
        assert result.format_report() == "2 orders reference missing customers: o1, o2"
