"""Record store protocol definition.

Defines the ``RecordStore`` Protocol that every store client implements.
The backup subsystem only needs whole-collection reads and single-record
creates and deletes -- there are no bulk or transactional variants.

All methods are ``async def``.

Usage:
    from tailor_backup.adapters.base import RecordStore

    async def count_orders(store: RecordStore) -> int:
        return len(await store.list_orders())
"""

from typing import Protocol


class RecordStoreError(Exception):
    """Raised by store clients when the store rejects a request.

    Attributes:
        status_code: HTTP status code when the store is a remote API.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RecordStore(Protocol):
    """Customer/order store interface that all clients must implement.

    Records are plain dicts keyed by snake_case field names.  The store owns
    record identity; callers pass the identifier they want kept on create.
    """

    async def list_customers(self) -> list[dict]:
        """Return every stored customer.

        Returns:
            List of customer dicts.  Empty list if the store is empty.
        """
        ...

    async def create_customer(self, customer: dict) -> str:
        """Create a customer and return its identifier.

        Args:
            customer: Customer fields, including ``id``.

        Returns:
            Identifier of the created customer.

        Raises:
            Exception: If the store rejects the record.
        """
        ...

    async def delete_customer(self, customer_id: str) -> None:
        """Delete one customer by identifier.

        Args:
            customer_id: Identifier of the customer to delete.
        """
        ...

    async def list_orders(self) -> list[dict]:
        """Return every stored order.

        Returns:
            List of order dicts.  Empty list if the store is empty.
        """
        ...

    async def create_order(self, order: dict) -> str:
        """Create an order and return its identifier.

        Args:
            order: Order fields, including ``id`` and ``customer_id``.

        Returns:
            Identifier of the created order.

        Raises:
            Exception: If the store rejects the record.
        """
        ...

    async def delete_order(self, order_id: str) -> None:
        """Delete one order by identifier.

        Args:
            order_id: Identifier of the order to delete.
        """
        ...

    async def close(self) -> None:
        """Release connections held by the client."""
        ...
