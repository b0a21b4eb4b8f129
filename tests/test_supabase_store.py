"""Tests for AsyncSupabaseRecordStore against a mocked async client.

Skipped when the ``supabase`` extra is not installed.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

pytest.importorskip("supabase")

from tailor_backup.adapters.supabase import AsyncSupabaseRecordStore  # noqa: E402

URL = "https://xyzproject.supabase.co"
KEY = "service-key"


def _make_mock_client(data=None) -> MagicMock:
    """Create a mock AsyncClient whose query builders all end in one ``execute``.

    Args:
        data: Value of ``response.data`` for every executed query.
    """
    response = MagicMock()
    response.data = data if data is not None else []
    execute = AsyncMock(return_value=response)

    query = MagicMock()
    query.select.return_value.order.return_value.execute = execute
    query.insert.return_value.execute = execute
    query.delete.return_value.eq.return_value.execute = execute

    client = MagicMock()
    client.table.return_value = query
    client.aclose = AsyncMock()
    client.execute = execute
    return client


class TestClientLifecycle:
    """The client is created once, lazily, and closed on ``close()``."""

    async def test_no_client_until_first_call(self):
        with patch(
            "tailor_backup.adapters.supabase.acreate_client", new_callable=AsyncMock
        ) as mock_create:
            store = AsyncSupabaseRecordStore(URL, KEY)
            mock_create.assert_not_called()
            await store.close()
            mock_create.assert_not_called()

    async def test_concurrent_calls_share_one_client(self):
        client = _make_mock_client()
        with patch(
            "tailor_backup.adapters.supabase.acreate_client",
            new_callable=AsyncMock,
            return_value=client,
        ) as mock_create:
            store = AsyncSupabaseRecordStore(URL, KEY)
            await asyncio.gather(store.list_customers(), store.list_orders())

        mock_create.assert_awaited_once_with(URL, KEY)

    async def test_close_releases_client(self):
        client = _make_mock_client()
        with patch(
            "tailor_backup.adapters.supabase.acreate_client",
            new_callable=AsyncMock,
            return_value=client,
        ):
            store = AsyncSupabaseRecordStore(URL, KEY)
            await store.list_customers()
            await store.close()

        client.aclose.assert_awaited_once()
        assert store._client is None


class TestQueries:
    """Each store call builds the expected PostgREST query."""

    def _store(self, client: MagicMock) -> AsyncSupabaseRecordStore:
        store = AsyncSupabaseRecordStore(
            URL, KEY, customers_table="shop_customers", orders_table="shop_orders"
        )
        store._client = client
        return store

    async def test_list_orders_sorted_by_created_at(self):
        client = _make_mock_client(data=[{"id": "o1"}, {"id": "o2"}])
        store = self._store(client)

        orders = await store.list_orders()

        assert orders == [{"id": "o1"}, {"id": "o2"}]
        client.table.assert_called_once_with("shop_orders")
        client.table.return_value.select.assert_called_once_with("*")
        client.table.return_value.select.return_value.order.assert_called_once_with(
            "created_at"
        )

    async def test_create_customer_returns_new_id(self):
        client = _make_mock_client(data=[{"id": 42, "name": "Ali"}])
        store = self._store(client)

        new_id = await store.create_customer({"id": "c1", "name": "Ali"})

        assert new_id == "42"
        client.table.assert_called_once_with("shop_customers")
        client.table.return_value.insert.assert_called_once_with({"id": "c1", "name": "Ali"})

    async def test_delete_filters_by_id(self):
        client = _make_mock_client()
        store = self._store(client)

        await store.delete_order("o1")

        client.table.assert_called_once_with("shop_orders")
        client.table.return_value.delete.return_value.eq.assert_called_once_with("id", "o1")
        client.execute.assert_awaited_once()

    async def test_execute_error_propagates(self):
        client = _make_mock_client()
        client.execute.side_effect = RuntimeError("permission denied")
        store = self._store(client)

        with pytest.raises(RuntimeError, match="permission denied"):
            await store.delete_customer("c1")
