"""Record store clients.

Provides the ``RecordStore`` Protocol and concrete async clients for the
shop's REST API, PostgreSQL and (optionally) Supabase.

``AsyncSupabaseRecordStore`` is only available when the ``supabase`` extra
is installed.  A missing ``supabase`` dependency does not prevent
importing the rest of the package.

Usage:
    from tailor_backup.adapters import RecordStore, AsyncRestRecordStore

    # With supabase extra installed:
    from tailor_backup.adapters import AsyncSupabaseRecordStore
"""

from tailor_backup.adapters.base import RecordStore, RecordStoreError
from tailor_backup.adapters.postgres import AsyncPostgresRecordStore
from tailor_backup.adapters.rest import AsyncRestRecordStore

__all__ = [
    "RecordStore",
    "RecordStoreError",
    "AsyncRestRecordStore",
    "AsyncPostgresRecordStore",
]

try:
    from tailor_backup.adapters.supabase import AsyncSupabaseRecordStore

    __all__.append("AsyncSupabaseRecordStore")
except ImportError:
    # supabase extra not installed -- AsyncSupabaseRecordStore unavailable
    pass
