"""Shared typed models.

This module defines the immutable settings models and query options
used by the settings store, table registry, and query engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping, Sequence, Union

from core.constants import (
    QUALIFIED_KEYWORDS_KEY,
    TABLE_COUNTER_KEY,
    TABLE_PATH_KEY,
    TABLES_KEY,
)

Record = dict[str, Any]
RecordPredicate = Callable[[Mapping[str, Any]], bool]
OrderBy = Union[str, Sequence[str], Callable[[Mapping[str, Any]], Any]]


@dataclass(frozen=True)
class TableConfig:
    """Settings entry for one table.

    Attributes:
        path: Absolute directory path holding the table's record files.
        counter: Last allocated record id, zero for a fresh table.
    """

    path: str
    counter: int = 0


@dataclass(frozen=True)
class Settings:
    """Process-wide settings value.

    Instances are never mutated; every change builds a new value that
    replaces the previous one in the settings store.

    Attributes:
        tables: Table name to table config mapping.
        use_qualified_keywords: Whether id fields are named ``<table>/id``.
    """

    tables: Mapping[str, TableConfig] = field(default_factory=dict)
    use_qualified_keywords: bool = False

    def with_table(self, name: str, config: TableConfig) -> "Settings":
        """Return a copy with one table entry inserted or replaced."""
        tables = dict(self.tables)
        tables[name] = config
        return replace(self, tables=tables)

    def without_table(self, name: str) -> "Settings":
        """Return a copy with one table entry removed."""
        tables = {key: value for key, value in self.tables.items() if key != name}
        return replace(self, tables=tables)

    def to_payload(self) -> dict[str, Any]:
        """Render settings as a plain mapping for the codec."""
        return {
            TABLES_KEY: {
                name: {TABLE_PATH_KEY: config.path, TABLE_COUNTER_KEY: config.counter}
                for name, config in self.tables.items()
            },
            QUALIFIED_KEYWORDS_KEY: self.use_qualified_keywords,
        }


def settings_from_payload(payload: Mapping[str, Any]) -> Settings:
    """Deserialize settings from a decoded mapping.

    Args:
        payload: Decoded settings file content.

    Returns:
        Typed settings value.

    Raises:
        ValueError: If table entries are malformed.
    """
    raw_tables = payload.get(TABLES_KEY) or {}
    if not isinstance(raw_tables, Mapping):
        raise ValueError(f"expected '{TABLES_KEY}' to be a mapping")
    tables: dict[str, TableConfig] = {}
    for name, entry in raw_tables.items():
        if not isinstance(entry, Mapping) or TABLE_PATH_KEY not in entry:
            raise ValueError(f"table '{name}' is missing '{TABLE_PATH_KEY}'")
        counter = int(entry.get(TABLE_COUNTER_KEY, 0))
        if counter < 0:
            raise ValueError(f"table '{name}' has negative counter {counter}")
        tables[str(name)] = TableConfig(path=str(entry[TABLE_PATH_KEY]), counter=counter)
    return Settings(
        tables=tables,
        use_qualified_keywords=bool(payload.get(QUALIFIED_KEYWORDS_KEY, False)),
    )


@dataclass(frozen=True)
class SelectOptions:
    """Options for the full-scan select pipeline.

    Stages run in a fixed order: where, order_by, offset, limit.
    Every stage is skipped when its option is None.

    Attributes:
        where: Predicate over one record; only matching records are kept.
        order_by: Field name, sequence of field names, key callable, or the
            ``"desc"`` token which reverses the order produced so far.
        descending: Sort direction when order_by names a key.
        offset: Number of leading results to skip.
        limit: Maximum number of results to return.
    """

    where: RecordPredicate | None = None
    order_by: OrderBy | None = None
    descending: bool = False
    offset: int | None = None
    limit: int | None = None
