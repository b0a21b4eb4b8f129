"""Async REST record store client.

Provides ``AsyncRestRecordStore``, an implementation of the ``RecordStore``
protocol over the shop's JSON API using ``httpx``.

Endpoints (relative to the base URL):

- ``GET customers`` / ``POST customers`` / ``DELETE customers/{id}``
- ``GET orders`` / ``POST orders`` / ``DELETE orders/{id}``

The API returns some decimal columns as strings and expects an order's
status under the ``order_status`` key on create; both quirks are handled
here so callers only see snapshot-shaped dicts.

Usage:
    from tailor_backup.adapters.rest import AsyncRestRecordStore

    store = AsyncRestRecordStore("https://shop.example/wp-json/tailor-sahab/v1")
    customers = await store.list_customers()
    await store.close()
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from tailor_backup.adapters.base import RecordStoreError
from tailor_backup.backup.models import (
    CUSTOMER_MEASUREMENT_FIELDS,
    DEFAULT_ORDER_STATUS,
    ORDER_AMOUNT_FIELDS,
)

logger = logging.getLogger(__name__)


class AsyncRestRecordStore:
    """REST implementation of the ``RecordStore`` protocol.

    Args:
        base_url: API root, e.g. ``https://shop.example/wp-json/tailor-sahab/v1``.
        api_key: Optional bearer token sent as ``Authorization``.
        timeout: Per-request timeout in seconds.
        client: Pre-built ``httpx.AsyncClient`` (its base URL is used as-is).
            The store does not close a client it did not create.

    Example:
        store = AsyncRestRecordStore("https://shop.example/api", api_key="s3cret")
        order_id = await store.create_order({"id": "o1", "customer_id": "c1", ...})
        await store.close()
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            headers = {"Accept": "application/json"}
            if api_key:
                headers["Authorization"] = f"Bearer {api_key}"
            client = httpx.AsyncClient(base_url=base_url, headers=headers, timeout=timeout)
        self._client: httpx.AsyncClient = client

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    async def list_customers(self) -> list[dict]:
        rows = await self._list("customers")
        return [_coerce_numbers(row, CUSTOMER_MEASUREMENT_FIELDS) for row in rows]

    async def create_customer(self, customer: dict) -> str:
        return await self._create("customers", customer)

    async def delete_customer(self, customer_id: str) -> None:
        await self._request("DELETE", f"customers/{quote(str(customer_id), safe='')}")

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    async def list_orders(self) -> list[dict]:
        rows = await self._list("orders")
        orders = []
        for row in rows:
            row = _coerce_numbers(row, ORDER_AMOUNT_FIELDS)
            if row.get("status") is None and "order_status" in row:
                row["status"] = row.pop("order_status")
            orders.append(row)
        return orders

    async def create_order(self, order: dict) -> str:
        payload = dict(order)
        # The API reads the status from order_status on write
        payload["order_status"] = payload.pop("status", None) or DEFAULT_ORDER_STATUS
        return await self._create("orders", payload)

    async def delete_order(self, order_id: str) -> None:
        await self._request("DELETE", f"orders/{quote(str(order_id), safe='')}")

    async def close(self) -> None:
        """Close the HTTP client if this store created it."""
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    async def _list(self, resource: str) -> list[dict]:
        body = await self._request("GET", resource)
        if not isinstance(body, list):
            raise RecordStoreError(f"Expected a list from GET {resource}, got {type(body).__name__}")
        return body

    async def _create(self, resource: str, record: dict) -> str:
        body = await self._request("POST", resource, json=record)
        if isinstance(body, dict) and body.get("id") is not None:
            return str(body["id"])
        return str(record["id"])

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        """Send one request and decode the JSON response.

        Raises:
            RecordStoreError: On a non-2xx response.
            httpx.HTTPError: On transport failures (connection, timeout).
        """
        logger.debug(f"{method} {path}")
        response = await self._client.request(method, path, json=json)
        if response.is_error:
            raise RecordStoreError(
                f"{method} {path} failed ({response.status_code}): {_error_message(response)}",
                status_code=response.status_code,
            )
        if not response.content:
            return None
        return response.json()


def _error_message(response: httpx.Response) -> str:
    """Extract the API's error message, falling back to the raw body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text[:200]


def _coerce_numbers(row: dict, fields: tuple[str, ...]) -> dict:
    """Convert decimal strings (``"38.50"``) in ``fields`` to numbers."""
    row = dict(row)
    for field in fields:
        value = row.get(field)
        if not isinstance(value, str):
            continue
        if not value.strip():
            row[field] = None
            continue
        try:
            number = float(value)
        except ValueError:
            continue
        row[field] = int(number) if number.is_integer() and "." not in value else number
    return row
