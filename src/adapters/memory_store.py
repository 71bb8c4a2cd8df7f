"""In-memory document store for tests and local development."""

import copy
import threading
from typing import Any
from uuid import uuid4

from src.adapters.document_query import check_op, matches, order, split_path
from src.ports.store import Record, RecordNotFoundError


class InMemoryDocumentStore:
    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Record]] = {}
        self._lock = threading.Lock()

    def _with_id(self, record_id: str, data: Record) -> Record:
        out = copy.deepcopy(data)
        out["id"] = record_id
        return out

    def _strip(self, record: Record) -> Record:
        data = copy.deepcopy(record)
        data.pop("id", None)
        return data

    def get_collection(
        self,
        name: str,
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Record]:
        with self._lock:
            docs = [self._with_id(k, v) for k, v in self._collections.get(name, {}).items()]
        return order(docs, order_by, descending, limit)

    def get_record_by_id(self, collection: str, record_id: str) -> Record | None:
        with self._lock:
            data = self._collections.get(collection, {}).get(record_id)
            return self._with_id(record_id, data) if data is not None else None

    def query(
        self,
        collection: str,
        field: str,
        op: Any,
        value: Any,
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Record]:
        check_op(op)
        docs = [d for d in self.get_collection(collection) if matches(d, field, op, value)]
        return order(docs, order_by, descending, limit)

    def insert(self, collection: str, record: Record) -> str:
        record_id = uuid4().hex
        with self._lock:
            self._collections.setdefault(collection, {})[record_id] = self._strip(record)
        return record_id

    def set_record(self, collection: str, record_id: str, record: Record) -> None:
        with self._lock:
            self._collections.setdefault(collection, {})[record_id] = self._strip(record)

    def update(self, collection: str, record_id: str, partial: Record) -> None:
        with self._lock:
            docs = self._collections.get(collection, {})
            if record_id not in docs:
                raise RecordNotFoundError(f"{collection}/{record_id} not found")
            docs[record_id].update(self._strip(partial))

    def delete(self, collection: str, record_id: str) -> None:
        with self._lock:
            self._collections.get(collection, {}).pop(record_id, None)

    def get_singleton(self, path: str) -> Record | None:
        collection, record_id = split_path(path)
        return self.get_record_by_id(collection, record_id)

    def upsert_singleton(self, path: str, record: Record, merge: bool = False) -> None:
        collection, record_id = split_path(path)
        with self._lock:
            docs = self._collections.setdefault(collection, {})
            if merge and record_id in docs:
                docs[record_id].update(self._strip(record))
            else:
                docs[record_id] = self._strip(record)

    def clear(self) -> None:
        with self._lock:
            self._collections.clear()
