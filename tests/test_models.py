"""Tests for the snapshot schema models.

Covers key aliases (snake_case and camelCase), strict typing of numbers
and identifiers, order status values and the version/timestamp checks on
the root document.
"""

import pytest
from pydantic import ValidationError

from tailor_backup.backup.models import (
    CUSTOMER_MEASUREMENT_FIELDS,
    DEFAULT_ORDER_STATUS,
    FIELD_CAPS,
    FORMAT_VERSION,
    ORDER_STATUSES,
    Customer,
    Order,
    Snapshot,
)


class TestConstants:
    """Schema constants."""

    def test_format_version_major_is_one(self):
        assert FORMAT_VERSION.split(".")[0] == "1"

    def test_default_status_is_a_valid_status(self):
        assert DEFAULT_ORDER_STATUS == "pending"
        assert DEFAULT_ORDER_STATUS in ORDER_STATUSES

    def test_every_measurement_is_a_customer_field(self):
        for field in CUSTOMER_MEASUREMENT_FIELDS:
            assert field in Customer.model_fields

    def test_caps_name_known_fields(self):
        fields = set(Customer.model_fields) | set(Order.model_fields)
        assert set(FIELD_CAPS) <= fields


class TestCustomer:
    """Customer record validation."""

    def test_minimal_customer(self):
        customer = Customer(id="c1", name="Ali")
        assert customer.phone is None
        assert customer.chest is None

    def test_camel_case_keys_accepted(self):
        customer = Customer.model_validate(
            {"id": "c1", "name": "Ali", "qameezLength": 40, "createdAt": "2024-01-01"}
        )
        assert customer.qameez_length == 40
        assert customer.created_at == "2024-01-01"

    def test_int_and_float_preserved(self):
        customer = Customer(id="c1", name="Ali", chest=38, neck=15.5)
        assert isinstance(customer.chest, int)
        assert isinstance(customer.neck, float)

    def test_numeric_string_rejected(self):
        with pytest.raises(ValidationError):
            Customer(id="c1", name="Ali", chest="38")

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            Customer(id="c1", name="   ")

    def test_name_over_cap_rejected(self):
        with pytest.raises(ValidationError):
            Customer(id="c1", name="a" * 256)

    def test_name_at_cap_accepted(self):
        customer = Customer(id="c1", name="a" * 255)
        assert len(customer.name) == 255

    def test_surrounding_whitespace_not_counted(self):
        """The cap applies to the trimmed name."""
        customer = Customer(id="c1", name="  " + "a" * 255 + "  ")
        assert customer.name.strip() == "a" * 255

    def test_uuid_id_accepted(self):
        customer = Customer(id="3f2b8c1e-9a4d-4c6b-8e2f-1a2b3c4d5e6f", name="Ali")
        assert customer.id.startswith("3f2b")

    @pytest.mark.parametrize("bad_id", ["", "a/b", "c 1", "x" * 65, "../etc"])
    def test_bad_id_rejected(self, bad_id):
        with pytest.raises(ValidationError):
            Customer(id=bad_id, name="Ali")

    def test_integer_id_rejected(self):
        with pytest.raises(ValidationError):
            Customer(id=1, name="Ali")

    def test_unknown_keys_ignored(self):
        customer = Customer.model_validate({"id": "c1", "name": "Ali", "deleted_at": None})
        assert "deleted_at" not in customer.model_dump()


class TestOrder:
    """Order record validation."""

    def test_minimal_order(self):
        order = Order(id="o1", customer_id="c1", order_number="20240101-001")
        assert order.status is None
        assert order.price is None

    def test_camel_case_keys_accepted(self):
        order = Order.model_validate(
            {"id": "o1", "customerId": "c1", "orderNumber": "N-1", "advancePayment": 500}
        )
        assert order.customer_id == "c1"
        assert order.order_number == "N-1"
        assert order.advance_payment == 500

    @pytest.mark.parametrize("status", ORDER_STATUSES)
    def test_known_statuses_accepted(self, status):
        order = Order(id="o1", customer_id="c1", order_number="N-1", status=status)
        assert order.status == status

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            Order(id="o1", customer_id="c1", order_number="N-1", status="shipped")

    def test_blank_order_number_rejected(self):
        with pytest.raises(ValidationError):
            Order(id="o1", customer_id="c1", order_number="  ")


class TestSnapshot:
    """Root document validation."""

    def _raw(self, **overrides) -> dict:
        raw = {
            "version": "1.0",
            "created_at": "2024-01-01T00:00:00Z",
            "customers": [],
            "orders": [],
        }
        raw.update(overrides)
        return raw

    def test_empty_snapshot(self):
        snapshot = Snapshot.model_validate(self._raw())
        assert snapshot.customers == []
        assert snapshot.orders == []

    def test_format_version_alias(self):
        raw = self._raw()
        raw["formatVersion"] = raw.pop("version")
        raw["createdAt"] = raw.pop("created_at")
        snapshot = Snapshot.model_validate(raw)
        assert snapshot.version == "1.0"
        assert snapshot.created_at == "2024-01-01T00:00:00Z"

    def test_minor_version_accepted(self):
        assert Snapshot.model_validate(self._raw(version="1.7")).version == "1.7"

    @pytest.mark.parametrize("version", ["2.0", "0.9", "", "v1"])
    def test_other_major_version_rejected(self, version):
        with pytest.raises(ValidationError):
            Snapshot.model_validate(self._raw(version=version))

    def test_numeric_version_rejected(self):
        with pytest.raises(ValidationError):
            Snapshot.model_validate(self._raw(version=1.0))

    @pytest.mark.parametrize(
        "created_at", ["2024-01-01", "2024-01-01T10:30:00+05:00", "2024-01-01T00:00:00.123Z"]
    )
    def test_iso_timestamps_accepted(self, created_at):
        assert Snapshot.model_validate(self._raw(created_at=created_at)).created_at == created_at

    def test_non_iso_timestamp_rejected(self):
        with pytest.raises(ValidationError):
            Snapshot.model_validate(self._raw(created_at="yesterday"))
