"""In-memory query pipeline over a full table scan.

Stages run in a fixed order: where, order_by, offset, limit. Nothing
here writes to storage.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Mapping, Sequence

from core.constants import ORDER_DESC_TOKEN
from core.errors import FsdbQueryError
from core.types import OrderBy, Record, RecordPredicate, SelectOptions
from store.record_store import RecordStore


def select(
    record_store: RecordStore,
    table_name: str,
    options: SelectOptions | None = None,
) -> list[Record] | None:
    """Select records from a table.

    Args:
        record_store: Store used for the full scan.
        table_name: Table to scan.
        options: Pipeline options; all records are returned when omitted.

    Returns:
        Matching records, or None when the table does not exist.

    Raises:
        FsdbQueryError: If options are invalid or sort values are incomparable.
    """
    records = record_store.get_all(table_name)
    if records is None:
        return None
    return run_pipeline(records, options or SelectOptions())


def get_by(
    record_store: RecordStore,
    table_name: str,
    match_spec: Mapping[str, Any],
    options: SelectOptions | None = None,
) -> Record | None:
    """Return the first record whose fields equal every entry in match_spec.

    Args:
        record_store: Store used for the full scan.
        table_name: Table to scan.
        match_spec: Field to expected value mapping.
        options: Extra pipeline options; any where predicate must also match.

    Returns:
        First matching record, or None.
    """
    base_options = options or SelectOptions()
    predicate = build_match_predicate(match_spec)
    if base_options.where is not None:
        predicate = _both(base_options.where, predicate)
    records = select(record_store, table_name, replace(base_options, where=predicate))
    if not records:
        return None
    return records[0]


def run_pipeline(records: Sequence[Record], options: SelectOptions) -> list[Record]:
    """Apply where, order_by, offset, and limit to loaded records."""
    _validate_window(options)
    results = list(records)
    if options.where is not None:
        results = [record for record in results if options.where(record)]
    if options.order_by is not None or options.descending:
        results = order_records(results, options.order_by, options.descending)
    if options.offset is not None:
        results = results[options.offset :]
    if options.limit is not None:
        results = results[: options.limit]
    return results


def order_records(
    records: list[Record],
    order_by: OrderBy | None,
    descending: bool = False,
) -> list[Record]:
    """Sort records by a field, composite fields, or a key callable.

    The ``"desc"`` token, or descending without a key, reverses the
    current order instead of sorting. Records missing a sort field come
    before records that have it.

    Raises:
        FsdbQueryError: If sort values cannot be compared.
    """
    if order_by is None or order_by == ORDER_DESC_TOKEN:
        return list(reversed(records))
    sort_key = _build_sort_key(order_by)
    try:
        return sorted(records, key=sort_key, reverse=descending)
    except TypeError as error:
        raise FsdbQueryError(
            f"Cannot order records by {order_by!r}: {error}. "
            "Ensure the sort field holds comparable values."
        ) from error


def build_match_predicate(match_spec: Mapping[str, Any]) -> RecordPredicate:
    """Build a predicate requiring exact equality on all given fields."""
    expected = dict(match_spec)

    def matches(record: Mapping[str, Any]) -> bool:
        return all(
            field_name in record and record[field_name] == value
            for field_name, value in expected.items()
        )

    return matches


def _build_sort_key(order_by: OrderBy) -> Callable[[Mapping[str, Any]], Any]:
    if callable(order_by):
        return order_by
    if isinstance(order_by, str):
        field_name = order_by
        return lambda record: _field_sort_value(record, field_name)
    field_names = tuple(order_by)
    if not field_names:
        raise FsdbQueryError("order_by sequence is empty. Provide at least one field name.")
    return lambda record: tuple(_field_sort_value(record, name) for name in field_names)


def _field_sort_value(record: Mapping[str, Any], field_name: str) -> tuple[bool, Any]:
    value = record.get(field_name)
    return (value is not None, value)


def _both(first: RecordPredicate, second: RecordPredicate) -> RecordPredicate:
    return lambda record: first(record) and second(record)


def _validate_window(options: SelectOptions) -> None:
    for option_name in ("offset", "limit"):
        value = getattr(options, option_name)
        if value is not None and (not isinstance(value, int) or value < 0):
            raise FsdbQueryError(
                f"Invalid {option_name} {value!r}: expected a non-negative integer."
            )
