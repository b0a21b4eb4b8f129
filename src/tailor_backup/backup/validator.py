"""Snapshot validation.

``validate_snapshot`` is the only gate between an untrusted, freshly parsed
document and the rest of the restore pipeline.  It never raises for bad
input: every problem is reported as a ``Violation`` in the returned
``ValidationResult``.

Usage:
    from tailor_backup.backup.validator import validate_snapshot

    result = validate_snapshot(json.loads(text))
    if not result.valid:
        print(result.format_report())
"""

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from tailor_backup.backup.models import Customer, Order, Snapshot


class Violation(BaseModel):
    """A single schema violation.

    Attributes:
        location: Dotted path to the offending value (``customers.0.name``),
            or ``<root>`` for the document itself.
        message: Human-readable description.
    """

    location: str
    message: str


class ValidationResult(BaseModel):
    """Result of validating a parsed backup document."""

    valid: bool
    snapshot: Snapshot | None = None
    violations: list[Violation] = Field(default_factory=list)

    def format_report(self) -> str:
        """Format the result as a human-readable report."""
        if self.valid:
            return "Backup is valid"

        lines = [f"Backup validation failed ({len(self.violations)} violations):"]
        for violation in self.violations:
            lines.append(f"  - {violation.location}: {violation.message}")
        return "\n".join(lines)


def validate_snapshot(raw: Any) -> ValidationResult:
    """Validate an arbitrary deserialized value against the snapshot schema.

    Checks the root keys, every customer and order record, and that record
    identifiers are unique within their collection.  Missing optional
    fields are accepted as absent.

    Args:
        raw: Any value produced by a JSON parser (may be attacker-controlled).

    Returns:
        ``ValidationResult`` with the typed ``Snapshot`` on success, or the
        list of violations on failure.

    Example:
        result = validate_snapshot({"version": "1.0", "created_at": "..."})
        result.valid
        # False -- customers and orders are missing
    """
    try:
        snapshot = Snapshot.model_validate(raw)
    except ValidationError as e:
        violations = [
            Violation(location=_format_location(err["loc"]), message=err["msg"])
            for err in e.errors(include_url=False, include_context=False, include_input=False)
        ]
        return ValidationResult(valid=False, violations=violations)

    violations = _duplicate_ids("customers", snapshot.customers)
    violations += _duplicate_ids("orders", snapshot.orders)
    if violations:
        return ValidationResult(valid=False, violations=violations)

    return ValidationResult(valid=True, snapshot=snapshot)


def _format_location(loc: Sequence[int | str]) -> str:
    """Render a pydantic error location as a dotted path."""
    if not loc:
        return "<root>"
    return ".".join(str(part) for part in loc)


def _duplicate_ids(collection: str, records: Sequence[Customer | Order]) -> list[Violation]:
    """Report every record whose id already appeared earlier in the collection."""
    seen: set[str] = set()
    violations: list[Violation] = []
    for index, record in enumerate(records):
        if record.id in seen:
            violations.append(
                Violation(
                    location=f"{collection}.{index}.id",
                    message=f"duplicate id '{record.id}'",
                )
            )
        seen.add(record.id)
    return violations
