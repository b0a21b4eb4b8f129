"""Tests for validate_snapshot.

validate_snapshot must never raise for any parsed input; every problem
comes back as a Violation.
"""

import pytest

from tailor_backup.backup.validator import ValidationResult, Violation, validate_snapshot


def _scenario_a() -> dict:
    """One customer and one order, camelCase keys as older exports wrote them."""
    return {
        "formatVersion": "1.0",
        "createdAt": "2024-01-01T00:00:00Z",
        "customers": [{"id": "c1", "name": "Ali"}],
        "orders": [{"id": "o1", "customerId": "c1", "orderNumber": "20240101-001"}],
    }


def _deeply_nested(depth: int) -> list:
    value: list = []
    for _ in range(depth):
        value = [value]
    return value


# ------------------------------------------------------------------
# Totality
# ------------------------------------------------------------------


class TestNeverRaises:
    """Arbitrary parsed values produce a result, never an exception."""

    @pytest.mark.parametrize(
        "raw",
        [
            {},
            [],
            None,
            "",
            "backup",
            0,
            3.5,
            True,
            {"customers": None, "orders": "x"},
            {"version": None, "created_at": 5, "customers": [None], "orders": [[]]},
            {"version": "1.0", "created_at": "2024-01-01", "customers": [1, "a"], "orders": []},
        ],
    )
    def test_garbage_input(self, raw):
        result = validate_snapshot(raw)
        assert isinstance(result, ValidationResult)
        assert result.valid is False
        assert result.snapshot is None
        assert result.violations

    def test_deeply_nested_garbage(self):
        result = validate_snapshot({"customers": _deeply_nested(500), "orders": []})
        assert result.valid is False

    def test_deeply_nested_root(self):
        result = validate_snapshot(_deeply_nested(500))
        assert result.valid is False
        assert result.violations[0].location == "<root>"


# ------------------------------------------------------------------
# Accepted documents
# ------------------------------------------------------------------


class TestValidDocuments:
    """Well-formed snapshots are accepted and typed."""

    def test_camel_case_scenario(self):
        result = validate_snapshot(_scenario_a())
        assert result.valid is True
        assert result.violations == []
        assert result.snapshot.customers[0].name == "Ali"
        assert result.snapshot.orders[0].customer_id == "c1"

    def test_snake_case_document(self):
        raw = {
            "version": "1.0",
            "created_at": "2024-01-01T00:00:00Z",
            "customers": [{"id": "c1", "name": "Ali", "chest": 38.5}],
            "orders": [
                {
                    "id": "o1",
                    "customer_id": "c1",
                    "order_number": "20240101-001",
                    "status": "completed",
                    "price": 2500,
                }
            ],
        }
        result = validate_snapshot(raw)
        assert result.valid is True
        assert result.snapshot.orders[0].status == "completed"

    def test_missing_optional_fields_are_absent(self):
        result = validate_snapshot(_scenario_a())
        customer = result.snapshot.customers[0]
        assert customer.phone is None
        assert customer.created_at is None

    def test_explicit_nulls_accepted(self):
        raw = _scenario_a()
        raw["customers"][0].update({"phone": None, "chest": None, "notes": None})
        assert validate_snapshot(raw).valid is True

    def test_report_for_valid_document(self):
        assert validate_snapshot(_scenario_a()).format_report() == "Backup is valid"


# ------------------------------------------------------------------
# Violations
# ------------------------------------------------------------------


class TestViolations:
    """Each rejected document names where it went wrong."""

    def test_missing_orders_key(self):
        raw = _scenario_a()
        del raw["orders"]
        result = validate_snapshot(raw)
        assert result.valid is False
        assert any("orders" in v.location for v in result.violations)

    def test_missing_version(self):
        raw = _scenario_a()
        del raw["formatVersion"]
        result = validate_snapshot(raw)
        assert result.valid is False
        assert len(result.violations) == 1

    def test_wrong_type_in_customer(self):
        raw = _scenario_a()
        raw["customers"][0]["chest"] = "38"
        result = validate_snapshot(raw)
        assert result.valid is False
        assert result.violations[0].location.startswith("customers.0.")

    def test_name_too_long(self):
        raw = _scenario_a()
        raw["customers"][0]["name"] = "a" * 256
        result = validate_snapshot(raw)
        assert result.valid is False
        assert "255" in result.violations[0].message

    def test_every_violation_reported(self):
        raw = _scenario_a()
        raw["customers"].append({"id": "c2"})
        raw["orders"].append({"id": "o2", "customerId": "c1", "orderNumber": "N", "status": "lost"})
        result = validate_snapshot(raw)
        locations = [v.location for v in result.violations]
        assert any(loc.startswith("customers.1") for loc in locations)
        assert any(loc.startswith("orders.1") for loc in locations)

    def test_duplicate_customer_id(self):
        raw = _scenario_a()
        raw["customers"].append({"id": "c1", "name": "Bilal"})
        result = validate_snapshot(raw)
        assert result.valid is False
        assert result.violations == [
            Violation(location="customers.1.id", message="duplicate id 'c1'")
        ]

    def test_duplicate_order_id(self):
        raw = _scenario_a()
        raw["orders"].append({"id": "o1", "customerId": "c1", "orderNumber": "N-2"})
        result = validate_snapshot(raw)
        assert [v.location for v in result.violations] == ["orders.1.id"]

    def test_report_lists_violations(self):
        raw = _scenario_a()
        raw["customers"].append({"id": "c1", "name": "Bilal"})
        report = validate_snapshot(raw).format_report()
        assert "1 violations" in report
        assert "customers.1.id: duplicate id 'c1'" in report
