"""Snapshot schema for tailor-shop backups.

A snapshot is one JSON document holding every customer and order at export
time.  Keys are written in snake_case; the camelCase spellings
(``formatVersion``, ``createdAt``, ``customerId``, ...) are accepted on input.

Usage:
    from tailor_backup.backup.models import Snapshot, Customer, Order

    snapshot = Snapshot(
        version="1.0",
        created_at="2024-01-01T00:00:00Z",
        customers=[Customer(id="c1", name="Ali")],
        orders=[Order(id="o1", customer_id="c1", order_number="20240101-001")],
    )
"""

from datetime import datetime
from typing import Annotated, Literal, get_args

from pydantic import (
    AliasChoices,
    AliasGenerator,
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)
from pydantic.alias_generators import to_camel

FORMAT_VERSION = "1.0"
SUPPORTED_MAJOR_VERSION = "1"

# Hard cap on backup input, checked before parsing
MAX_BACKUP_BYTES = 10 * 1024 * 1024

OrderStatus = Literal["pending", "in_progress", "completed", "delivered", "cancelled"]
ORDER_STATUSES: tuple[str, ...] = get_args(OrderStatus)
DEFAULT_ORDER_STATUS: OrderStatus = "pending"

# Identifier alphabet accepted by the record store routes (UUIDs qualify)
RECORD_ID_PATTERN = r"^[A-Za-z0-9-]{1,64}$"

TIMESTAMP_FIELDS = ("created_at", "updated_at")

CUSTOMER_MEASUREMENT_FIELDS = (
    "qameez_length",
    "sleeve_length",
    "chest",
    "neck",
    "waist",
    "gher",
    "collar_size",
    "cuff_width",
    "placket_width",
    "armhole",
    "elbow",
    "daman",
    "bain",
    "shalwar_length",
    "paicha",
    "shalwar_width",
)
ORDER_AMOUNT_FIELDS = ("price", "advance_payment")

# Length caps per text field.  The Validator rejects an over-length name;
# every other cap is enforced by truncation in the Sanitizer.
FIELD_CAPS: dict[str, int] = {
    "name": 255,
    "phone": 20,
    "front_pocket": 500,
    "side_pocket": 500,
    "shalwar_pocket": 500,
    "notes": 2000,
    "order_number": 50,
    "description": 2000,
    "fabric_details": 1000,
    "delivery_date": 64,
    "created_at": 64,
    "updated_at": 64,
}

RecordId = Annotated[StrictStr, Field(pattern=RECORD_ID_PATTERN)]
Number = StrictInt | StrictFloat


class SchemaModel(BaseModel):
    """Base for snapshot models: snake_case fields, camelCase accepted on input."""

    model_config = ConfigDict(
        alias_generator=AliasGenerator(
            validation_alias=lambda name: AliasChoices(name, to_camel(name)),
        ),
        extra="ignore",
    )


class Customer(SchemaModel):
    """A customer and their measurement profile."""

    id: RecordId
    name: StrictStr
    phone: StrictStr | None = None

    # Qameez measurements
    qameez_length: Number | None = None
    sleeve_length: Number | None = None
    chest: Number | None = None
    neck: Number | None = None
    waist: Number | None = None
    gher: Number | None = None
    collar_size: Number | None = None
    cuff_width: Number | None = None
    placket_width: Number | None = None
    armhole: Number | None = None
    elbow: Number | None = None
    daman: Number | None = None
    bain: Number | None = None

    # Shalwar measurements
    shalwar_length: Number | None = None
    paicha: Number | None = None
    shalwar_width: Number | None = None

    front_pocket: StrictStr | None = None
    side_pocket: StrictStr | None = None
    shalwar_pocket: StrictStr | None = None

    notes: StrictStr | None = None
    created_at: StrictStr | None = None
    updated_at: StrictStr | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("name must not be empty")
        if len(trimmed) > FIELD_CAPS["name"]:
            raise ValueError(f"name must be at most {FIELD_CAPS['name']} characters")
        return value


class Order(SchemaModel):
    """A work order tied to exactly one customer."""

    id: RecordId
    customer_id: RecordId
    order_number: StrictStr
    status: OrderStatus | None = None  # None = absent, defaulted on sanitize
    price: Number | None = None
    advance_payment: Number | None = None
    delivery_date: StrictStr | None = None
    description: StrictStr | None = None
    fabric_details: StrictStr | None = None
    created_at: StrictStr | None = None
    updated_at: StrictStr | None = None

    @field_validator("order_number")
    @classmethod
    def _order_number_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("order_number must not be empty")
        return value


class Snapshot(SchemaModel):
    """Root backup document."""

    version: StrictStr = Field(
        validation_alias=AliasChoices("version", "formatVersion"),
    )
    created_at: StrictStr
    customers: list[Customer]
    orders: list[Order]

    @field_validator("version")
    @classmethod
    def _supported_version(cls, value: str) -> str:
        if value.split(".")[0] != SUPPORTED_MAJOR_VERSION:
            raise ValueError(
                f"Unsupported backup version '{value}' "
                f"(expected {SUPPORTED_MAJOR_VERSION}.x)"
            )
        return value

    @field_validator("created_at")
    @classmethod
    def _iso_timestamp(cls, value: str) -> str:
        try:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError(f"created_at is not an ISO-8601 timestamp: {value[:64]!r}")
        return value
