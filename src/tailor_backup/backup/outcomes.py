"""Restore outcomes and the input errors that produce them.

Every restore ends in exactly one ``RestoreResult``.  The stage functions in
``tailor_backup.backup.restorer`` raise ``RestoreError`` subclasses for bad
input; the orchestrators turn them into results so callers never have to
catch anything to learn why a restore was refused.
"""

from typing import Literal

from pydantic import BaseModel, Field

from tailor_backup.backup.validator import Violation

RestoreStatus = Literal[
    "success",
    "size_exceeded",
    "wrong_file_type",
    "malformed_input",
    "schema_violation",
    "orphan_reference",
    "store_error",
]

RestoreStage = Literal[
    "wipe_orders",
    "wipe_customers",
    "reinsert_customers",
    "reinsert_orders",
]


class RestoreResult(BaseModel):
    """Outcome of a restore.

    Attributes:
        status: Discriminator for the outcome.
        customers_restored: Customers written (or that would be written on
            a dry run).  Only set on success.
        orders_restored: Orders written (or that would be written).
        violations: Schema violations (``schema_violation`` only).
        order_ids: Orphaned order ids (``orphan_reference`` only).
        error: Description of the failure.
        stage: Destructive stage that failed (``store_error`` only).
        orders_deleted, customers_deleted, customers_created, orders_created:
            Progress through Wipe/Reinsert.  On ``store_error`` these show
            how far the store got before the failure; nothing is rolled back.
        dry_run: True when no store call was made.
    """

    status: RestoreStatus
    customers_restored: int = 0
    orders_restored: int = 0
    violations: list[Violation] = Field(default_factory=list)
    order_ids: list[str] = Field(default_factory=list)
    error: str | None = None
    stage: RestoreStage | None = None
    orders_deleted: int = 0
    customers_deleted: int = 0
    customers_created: int = 0
    orders_created: int = 0
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return self.status == "success"

    def format_report(self) -> str:
        """Format the outcome as a human-readable report."""
        if self.success:
            verb = "Would restore" if self.dry_run else "Restored"
            return (
                f"{verb} {self.customers_restored} customers "
                f"and {self.orders_restored} orders"
            )

        lines = [f"Restore failed ({self.status}): {self.error}"]
        for violation in self.violations:
            lines.append(f"  - {violation.location}: {violation.message}")
        for order_id in self.order_ids:
            lines.append(f"  - order {order_id}")
        if self.status == "store_error":
            lines.append(f"  Failed during: {self.stage}")
            lines.append(
                f"  Progress: {self.orders_deleted} orders deleted, "
                f"{self.customers_deleted} customers deleted, "
                f"{self.customers_created} customers created, "
                f"{self.orders_created} orders created"
            )
            lines.append("  The store may be partially restored; re-run the restore.")
        return "\n".join(lines)


# ============================================================================
# Input errors (raised before any destructive call)
# ============================================================================


class RestoreError(Exception):
    """Base class for backup input that must not be restored."""

    status: RestoreStatus = "malformed_input"

    def to_result(self) -> RestoreResult:
        return RestoreResult(status=self.status, error=str(self))


class WrongFileTypeError(RestoreError):
    """Raised when the backup filename does not end in ``.json``."""

    status = "wrong_file_type"

    def __init__(self, filename: str) -> None:
        super().__init__(f"Backup must be a .json file: {filename}")
        self.filename = filename


class SizeExceededError(RestoreError):
    """Raised when the backup is larger than the configured cap."""

    status = "size_exceeded"

    def __init__(self, size: int, max_bytes: int) -> None:
        super().__init__(
            f"Backup is too large: {size} bytes (maximum {max_bytes} bytes)"
        )
        self.size = size
        self.max_bytes = max_bytes


class MalformedInputError(RestoreError):
    """Raised when the backup bytes cannot be read or parsed as JSON."""

    status = "malformed_input"


class SchemaViolationError(RestoreError):
    """Raised when the parsed document does not match the snapshot schema."""

    status = "schema_violation"

    def __init__(self, violations: list[Violation]) -> None:
        super().__init__(f"Backup data is invalid: {len(violations)} violations")
        self.violations = violations

    def to_result(self) -> RestoreResult:
        return RestoreResult(
            status=self.status, error=str(self), violations=self.violations
        )


class OrphanReferenceError(RestoreError):
    """Raised when orders reference customers missing from the backup."""

    status = "orphan_reference"

    def __init__(self, order_ids: list[str]) -> None:
        super().__init__(
            f"{len(order_ids)} orders reference customers missing from the backup"
        )
        self.order_ids = order_ids

    def to_result(self) -> RestoreResult:
        return RestoreResult(
            status=self.status, error=str(self), order_ids=self.order_ids
        )
