"""
Record store abstraction for Supabase tables and an in-memory fallback.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Protocol

import httpx
from supabase import Client, PostgrestAPIError

from products_backend.errors import BackendError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class StoreClient(Protocol):
    """Operations the routes need from a table-oriented backend."""

    def select_all(self, table: str) -> List[Record]:
        ...

    def insert_many(self, table: str, rows: List[Record]) -> List[Record]:
        ...

    def update_where(
        self, table: str, field: str, value: Any, patch: Record
    ) -> List[Record]:
        ...

    def delete_where(self, table: str, field: str, value: Any) -> List[Record]:
        ...


def _matches(record: Record, field: str, value: Any) -> bool:
    # Path parameters arrive as text, so both sides are compared as strings.
    return field in record and str(record[field]) == str(value)


class RecordStore:
    """
    Process-local tables of records, keyed by table name.

    Tables are created empty on first reference and keep insertion order.
    Ids are sequential per table and never handed out twice, so deletes
    leave gaps.
    """

    def __init__(self):
        self._tables: Dict[str, List[Record]] = {}
        self._last_ids: Dict[str, int] = {}
        self.lock = threading.RLock()

    def table(self, name: str) -> List[Record]:
        return self._tables.setdefault(name, [])

    def tables(self) -> List[str]:
        return list(self._tables)

    def allocate_ids(self, name: str, count: int) -> List[int]:
        last = self._last_ids.get(name, 0)
        self._last_ids[name] = last + count
        return list(range(last + 1, last + count + 1))

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self.lock:
            self._tables.clear()
            self._last_ids.clear()


class InMemoryStoreClient:
    """StoreClient over a RecordStore, used when Supabase is not configured."""

    def __init__(self, store: RecordStore | None = None):
        self.store = store if store is not None else RecordStore()

    def select_all(self, table: str) -> List[Record]:
        with self.store.lock:
            return [dict(record) for record in self.store.table(table)]

    def insert_many(self, table: str, rows: List[Record]) -> List[Record]:
        with self.store.lock:
            records = self.store.table(table)
            ids = self.store.allocate_ids(table, len(rows))
            inserted = [
                {"id": new_id, **{key: val for key, val in row.items() if key != "id"}}
                for new_id, row in zip(ids, rows)
            ]
            records.extend(inserted)
            return [dict(record) for record in inserted]

    def update_where(
        self, table: str, field: str, value: Any, patch: Record
    ) -> List[Record]:
        changes = {key: val for key, val in patch.items() if key != "id"}
        with self.store.lock:
            records = self.store.table(table)
            updated: List[Record] = []
            for index, record in enumerate(records):
                if _matches(record, field, value):
                    merged = {**record, **changes}
                    records[index] = merged
                    updated.append(dict(merged))
            return updated

    def delete_where(self, table: str, field: str, value: Any) -> List[Record]:
        with self.store.lock:
            records = self.store.table(table)
            removed = [record for record in records if _matches(record, field, value)]
            if removed:
                records[:] = [
                    record for record in records if not _matches(record, field, value)
                ]
            return removed


class SupabaseStoreClient:
    """
    StoreClient backed by Supabase's PostgREST tables.
    """

    def __init__(self, client: Client):
        self._client = client

    def _execute(self, query, action: str, table: str) -> List[Record]:
        try:
            response = query.execute()
        except PostgrestAPIError as exc:
            message = exc.message or str(exc)
            logger.warning("Supabase %s on %s failed: %s", action, table, message)
            raise BackendError(message) from exc
        except httpx.HTTPError as exc:
            logger.warning("Supabase %s on %s unreachable: %s", action, table, exc)
            raise BackendError(str(exc)) from exc
        return list(response.data or [])

    def select_all(self, table: str) -> List[Record]:
        return self._execute(self._client.table(table).select("*"), "select", table)

    def insert_many(self, table: str, rows: List[Record]) -> List[Record]:
        return self._execute(self._client.table(table).insert(rows), "insert", table)

    def update_where(
        self, table: str, field: str, value: Any, patch: Record
    ) -> List[Record]:
        query = self._client.table(table).update(patch).eq(field, value)
        return self._execute(query, "update", table)

    def delete_where(self, table: str, field: str, value: Any) -> List[Record]:
        query = self._client.table(table).delete().eq(field, value)
        return self._execute(query, "delete", table)
