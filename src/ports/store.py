"""
Content store port.

Document collections keyed by name (`posts`, `users`, `analytics_events`)
plus named singleton documents addressed as "<collection>/<id>"
(`settings/siteSettings`, `settings/pageContents`).

Records are plain dicts; every returned record carries its id under "id".
Adapters raise StoreError (or a subclass) on any failure.
"""

from __future__ import annotations

from typing import Any, Literal, Protocol

QueryOp = Literal["==", "!=", "<", "<=", ">", ">=", "in", "array-contains"]

QUERY_OPS: frozenset[str] = frozenset({"==", "!=", "<", "<=", ">", ">=", "in", "array-contains"})

Record = dict[str, Any]


class StoreError(Exception):
    """Content store operation failed."""


class RecordNotFoundError(StoreError):
    """Target record does not exist."""


class ContentStorePort(Protocol):
    def get_collection(
        self,
        name: str,
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Record]:
        """All records of a collection, optionally ordered and truncated."""
        ...

    def get_record_by_id(self, collection: str, record_id: str) -> Record | None:
        ...

    def query(
        self,
        collection: str,
        field: str,
        op: QueryOp,
        value: Any,
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Record]:
        """Records whose `field` (dotted path allowed) satisfies `op value`."""
        ...

    def insert(self, collection: str, record: Record) -> str:
        """Append a record; returns the generated id."""
        ...

    def set_record(self, collection: str, record_id: str, record: Record) -> None:
        """Create or replace a record under a caller-chosen id."""
        ...

    def update(self, collection: str, record_id: str, partial: Record) -> None:
        """Shallow-merge `partial`. Raises RecordNotFoundError if missing."""
        ...

    def delete(self, collection: str, record_id: str) -> None:
        ...

    def get_singleton(self, path: str) -> Record | None:
        ...

    def upsert_singleton(self, path: str, record: Record, merge: bool = False) -> None:
        """Write a singleton; merge=True shallow-merges into the stored record."""
        ...
