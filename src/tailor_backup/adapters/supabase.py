"""Async Supabase record store.

Provides ``AsyncSupabaseRecordStore``, an implementation of the
``RecordStore`` protocol using the supabase-py async client.

The client is initialized lazily on first use with an ``asyncio.Lock``
to ensure it is created exactly once.

Usage:
    from tailor_backup.adapters.supabase import AsyncSupabaseRecordStore

    store = AsyncSupabaseRecordStore(
        url="https://xyzproject.supabase.co",
        key="eyJ...",
    )

    orders = await store.list_orders()
    await store.close()
"""

import asyncio

from supabase import AsyncClient, acreate_client


class AsyncSupabaseRecordStore:
    """Supabase implementation of the ``RecordStore`` protocol.

    Args:
        url: Supabase project URL.
        key: Supabase API key (service key for restores).
        customers_table: Table holding customer rows.
        orders_table: Table holding order rows.
    """

    def __init__(
        self,
        url: str,
        key: str,
        customers_table: str = "tailor_customers",
        orders_table: str = "tailor_orders",
    ) -> None:
        self._url: str = url
        self._key: str = key
        self._customers_table = customers_table
        self._orders_table = orders_table
        self._client: AsyncClient | None = None
        self._lock: asyncio.Lock = asyncio.Lock()

    async def _get_client(self) -> AsyncClient:
        """Get or create the async Supabase client."""
        if self._client is None:
            async with self._lock:
                # Double-check after acquiring lock
                if self._client is None:
                    self._client = await acreate_client(self._url, self._key)
        return self._client

    # ------------------------------------------------------------------
    # RecordStore methods
    # ------------------------------------------------------------------

    async def list_customers(self) -> list[dict]:
        return await self._select_all(self._customers_table)

    async def create_customer(self, customer: dict) -> str:
        return await self._insert(self._customers_table, customer)

    async def delete_customer(self, customer_id: str) -> None:
        await self._delete(self._customers_table, customer_id)

    async def list_orders(self) -> list[dict]:
        return await self._select_all(self._orders_table)

    async def create_order(self, order: dict) -> str:
        return await self._insert(self._orders_table, order)

    async def delete_order(self, order_id: str) -> None:
        await self._delete(self._orders_table, order_id)

    async def close(self) -> None:
        """Close the Supabase async client.

        If the client was never initialized, this is a no-op.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    async def _select_all(self, table: str) -> list[dict]:
        client = await self._get_client()
        result = await client.table(table).select("*").order("created_at").execute()
        return result.data

    async def _insert(self, table: str, data: dict) -> str:
        client = await self._get_client()
        result = await client.table(table).insert(data).execute()
        return str(result.data[0]["id"])

    async def _delete(self, table: str, record_id: str) -> None:
        client = await self._get_client()
        await client.table(table).delete().eq("id", record_id).execute()
