"""Filtering and ordering shared by the document store adapters."""

from typing import Any

from src.ports.store import QUERY_OPS, Record, StoreError

_MISSING = object()


def resolve(record: Record, path: str) -> Any:
    """Value at a dotted path, or _MISSING."""
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


def check_op(op: str) -> None:
    if op not in QUERY_OPS:
        raise StoreError(f"Unsupported query operator: {op}")


def matches(record: Record, field: str, op: str, value: Any) -> bool:
    check_op(op)

    actual = resolve(record, field)
    if actual is _MISSING:
        # Absent fields never match, including "!=".
        return False

    try:
        if op == "==":
            return bool(actual == value)
        if op == "!=":
            return bool(actual != value)
        if op == "<":
            return bool(actual < value)
        if op == "<=":
            return bool(actual <= value)
        if op == ">":
            return bool(actual > value)
        if op == ">=":
            return bool(actual >= value)
        if op == "in":
            return actual in value
        # array-contains
        return isinstance(actual, list) and value in actual
    except TypeError:
        return False


def order(
    records: list[Record],
    order_by: str | None,
    descending: bool,
    limit: int | None,
) -> list[Record]:
    """
    Stable sort on a dotted field. Records without the field sort last in
    either direction; ties keep insertion order.
    """
    result = records
    if order_by:
        present = [r for r in records if resolve(r, order_by) not in (_MISSING, None)]
        missing = [r for r in records if resolve(r, order_by) in (_MISSING, None)]
        try:
            present = sorted(present, key=lambda r: resolve(r, order_by), reverse=descending)
        except TypeError as e:
            raise StoreError(f"Cannot order by {order_by}: mixed value types") from e
        result = present + missing
    if limit is not None:
        if limit < 0:
            raise StoreError("limit must be non-negative")
        result = result[:limit]
    return result


def split_path(path: str) -> tuple[str, str]:
    """'settings/siteSettings' -> ('settings', 'siteSettings')."""
    parts = path.split("/")
    if len(parts) != 2 or not all(parts):
        raise StoreError(f"Invalid document path: {path!r}")
    return parts[0], parts[1]
