import json
import logging
import sqlite3
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from src.adapters.document_query import check_op, matches, order, split_path
from src.ports.store import Record, RecordNotFoundError, StoreError

logger = logging.getLogger(__name__)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def _now() -> str:
    return datetime.now(UTC).isoformat()


class SQLiteDocumentStore:
    """
    Document collections on a single `documents` table (see migrations/).

    Each call opens its own connection. There is no cross-document
    transaction: a read followed by a write in separate calls can interleave
    with other writers.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self.db_path, timeout=10)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open database {self.db_path}: {e}") from e
        conn.row_factory = dict_factory
        return conn

    def _decode(self, row: dict[str, Any]) -> Record:
        try:
            data = json.loads(row["data"])
        except json.JSONDecodeError as e:
            raise StoreError(f"Corrupt document {row['collection']}/{row['id']}") from e
        data["id"] = row["id"]
        return dict(data)

    def _encode(self, record: Record) -> str:
        data = {k: v for k, v in record.items() if k != "id"}
        try:
            return json.dumps(data)
        except (TypeError, ValueError) as e:
            raise StoreError(f"Record is not JSON-serialisable: {e}") from e

    def _fetch_all(self, collection: str) -> list[Record]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT collection, id, data FROM documents "
                "WHERE collection = ? ORDER BY created_seq",
                (collection,),
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read collection {collection}: {e}") from e
        finally:
            conn.close()
        return [self._decode(r) for r in rows]

    def get_collection(
        self,
        name: str,
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Record]:
        return order(self._fetch_all(name), order_by, descending, limit)

    def get_record_by_id(self, collection: str, record_id: str) -> Record | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT collection, id, data FROM documents WHERE collection = ? AND id = ?",
                (collection, record_id),
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read {collection}/{record_id}: {e}") from e
        finally:
            conn.close()
        return self._decode(row) if row else None

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
        docs = [d for d in self._fetch_all(collection) if matches(d, field, op, value)]
        return order(docs, order_by, descending, limit)

    def _write(self, collection: str, record_id: str, payload: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO documents (collection, id, data, created_seq, updated_at)
                VALUES (
                    ?, ?, ?,
                    (SELECT COALESCE(MAX(created_seq), 0) + 1 FROM documents WHERE collection = ?),
                    ?
                )
                ON CONFLICT(collection, id) DO UPDATE SET
                    data=excluded.data,
                    updated_at=excluded.updated_at
                """,
                (collection, record_id, payload, collection, _now()),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(f"Failed to write {collection}/{record_id}: {e}") from e
        finally:
            conn.close()

    def insert(self, collection: str, record: Record) -> str:
        record_id = uuid4().hex
        self._write(collection, record_id, self._encode(record))
        logger.debug("Inserted %s/%s", collection, record_id)
        return record_id

    def set_record(self, collection: str, record_id: str, record: Record) -> None:
        self._write(collection, record_id, self._encode(record))

    def _merge(self, collection: str, record_id: str, partial: Record, must_exist: bool) -> None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT collection, id, data FROM documents WHERE collection = ? AND id = ?",
                (collection, record_id),
            ).fetchone()
            if row is None:
                if must_exist:
                    raise RecordNotFoundError(f"{collection}/{record_id} not found")
                merged: Record = {}
            else:
                merged = self._decode(row)
            merged.update(partial)
            payload = self._encode(merged)
            if row is None:
                conn.execute(
                    """
                    INSERT INTO documents (collection, id, data, created_seq, updated_at)
                    VALUES (?, ?, ?, (SELECT COALESCE(MAX(created_seq), 0) + 1
                                      FROM documents WHERE collection = ?), ?)
                    """,
                    (collection, record_id, payload, collection, _now()),
                )
            else:
                conn.execute(
                    "UPDATE documents SET data = ?, updated_at = ? WHERE collection = ? AND id = ?",
                    (payload, _now(), collection, record_id),
                )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(f"Failed to update {collection}/{record_id}: {e}") from e
        finally:
            conn.close()

    def update(self, collection: str, record_id: str, partial: Record) -> None:
        self._merge(collection, record_id, partial, must_exist=True)

    def delete(self, collection: str, record_id: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                "DELETE FROM documents WHERE collection = ? AND id = ?", (collection, record_id)
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(f"Failed to delete {collection}/{record_id}: {e}") from e
        finally:
            conn.close()

    def get_singleton(self, path: str) -> Record | None:
        collection, record_id = split_path(path)
        return self.get_record_by_id(collection, record_id)

    def upsert_singleton(self, path: str, record: Record, merge: bool = False) -> None:
        collection, record_id = split_path(path)
        if merge:
            self._merge(collection, record_id, record, must_exist=False)
        else:
            self.set_record(collection, record_id, record)
