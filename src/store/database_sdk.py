"""Python SDK for table and record operations.

This module exposes the high-level client that wires the settings
store, table registry, record store, and query engine together.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping

from core.config import FsdbConfig
from core.types import Record, SelectOptions, Settings, TableConfig
from store import query_engine
from store.record_store import RecordStore
from store.settings_store import SettingsStore
from store.table_registry import TableRegistry


class FsdbClient:
    """Primary SDK entry point.

    Construction runs setup, so the storage root and settings file exist
    and settings are loaded before any other call.
    """

    def __init__(
        self,
        config: FsdbConfig | None = None,
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            defaults: Optional seed values for a newly created settings file.
        """
        self._config = config or FsdbConfig.from_env()
        self._settings_store = SettingsStore(self._config)
        self._registry = TableRegistry(self._settings_store)
        self._records = RecordStore(self._settings_store, self._registry)
        self._settings_store.setup(defaults)

    def __enter__(self) -> "FsdbClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def config(self) -> FsdbConfig:
        return self._config

    @property
    def settings(self) -> Settings:
        """Current in-memory settings value."""
        return self._settings_store.settings

    @property
    def settings_store(self) -> SettingsStore:
        return self._settings_store

    def setup(self, defaults: Mapping[str, Any] | None = None) -> Settings | None:
        """Re-run idempotent setup; see SettingsStore.setup."""
        return self._settings_store.setup(defaults)

    def reset(self) -> Settings | None:
        """Wipe every table and the settings file, then set up again."""
        return self._settings_store.reset()

    def flush(self) -> None:
        """Wait for background settings saves to finish."""
        self._settings_store.flush()

    def close(self) -> None:
        """Finish background saves and release the worker thread."""
        self._settings_store.close()

    def set_qualified_keywords(self, enabled: bool) -> Settings:
        """Switch between ``<table>/id`` and plain ``id`` identifier fields."""
        return self._settings_store.set_qualified_keywords(enabled)

    def create_table(self, table_name: str) -> TableConfig | None:
        """Create a table directory and settings entry.

        Args:
            table_name: Table identifier.

        Returns:
            New table config, or None if the table already existed.
        """
        return self._registry.create_table(table_name)

    def delete_table(self, table_name: str) -> bool:
        """Delete a table with all its records.

        Args:
            table_name: Table identifier.

        Returns:
            True if the table existed and was removed.
        """
        return self._registry.delete_table(table_name)

    def list_tables(self) -> list[str]:
        """Return registered table names in sorted order."""
        return self._registry.list_tables()

    def table_path(self, table_name: str) -> Path | None:
        """Return a table's directory, or None if the table is unknown."""
        return self._registry.table_path(table_name)

    def table(self, table_name: str) -> "Table":
        """Get a table handle by name.

        The handle does not create the table.
        """
        return Table(table_name, self._records, self._registry, self._settings_store)

    def next_id(self, table_name: str) -> int:
        """Allocate the next record id for a table.

        Args:
            table_name: Table identifier.

        Returns:
            Newly allocated id.
        """
        return self._settings_store.next_id(table_name)

    def get_by_id(self, table_name: str, record_id: object) -> Record | None:
        """Read one record.

        Args:
            table_name: Table identifier.
            record_id: Record id.

        Returns:
            Decoded record, or None when the table or record is absent.
        """
        return self._records.get_by_id(table_name, record_id)

    def get_all(self, table_name: str) -> list[Record] | None:
        """Read every record of a table.

        Args:
            table_name: Table identifier.

        Returns:
            Records in directory-listing order, or None if the table is absent.
        """
        return self._records.get_all(table_name)

    def create(self, table_name: str, data: Mapping[str, Any]) -> Record | None:
        """Store a new record under a freshly allocated id.

        Args:
            table_name: Table identifier.
            data: Record fields.

        Returns:
            Stored record including its id, or None if the table is absent.
        """
        return self._records.create(table_name, data)

    def create_raw(self, table_name: str, data: Mapping[str, Any]) -> Record | None:
        """Store a record under the id given in data, overwriting any existing one.

        Args:
            table_name: Table identifier.
            data: Record fields including the identifier field.

        Returns:
            Stored record, or None if the table is absent.
        """
        return self._records.create_raw(table_name, data)

    def update(self, table_name: str, data: Mapping[str, Any]) -> Record | None:
        """Shallow-merge data over an existing record.

        Args:
            table_name: Table identifier.
            data: Fields to change, including the identifier field.

        Returns:
            Merged record, or None when the table or record is absent.
        """
        return self._records.update(table_name, data)

    def hard_update(self, table_name: str, data: Mapping[str, Any]) -> Record | None:
        """Replace an existing record entirely.

        Args:
            table_name: Table identifier.
            data: Full record, including the identifier field.

        Returns:
            Stored record, or None when the table or record is absent.
        """
        return self._records.hard_update(table_name, data)

    def delete(self, table_name: str, record_id: object) -> bool:
        """Delete one record.

        Args:
            table_name: Table identifier.
            record_id: Record id.

        Returns:
            True if a record file was removed.
        """
        return self._records.delete(table_name, record_id)

    def select(
        self,
        table_name: str,
        options: SelectOptions | None = None,
    ) -> list[Record] | None:
        """Run the where, order_by, offset, limit pipeline over a table.

        Args:
            table_name: Table identifier.
            options: Pipeline options; all records when omitted.

        Returns:
            Selected records, or None if the table is absent.
        """
        return query_engine.select(self._records, table_name, options)

    def get_by(
        self,
        table_name: str,
        match_spec: Mapping[str, Any],
        options: SelectOptions | None = None,
    ) -> Record | None:
        """Return the first record whose fields equal match_spec.

        Args:
            table_name: Table identifier.
            match_spec: Field to expected value mapping.
            options: Extra pipeline options.

        Returns:
            First matching record, or None.
        """
        return query_engine.get_by(self._records, table_name, match_spec, options)

    def with_data_root(self, data_root: str) -> "FsdbClient":
        """Clone the client with a different storage root.

        Args:
            data_root: New storage root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(data_root).expanduser().resolve()
        return FsdbClient(replace(self._config, data_root=resolved_root))


class Table:
    """Handle bound to one table name.

    Methods mirror the FsdbClient record operations with the table
    name filled in.
    """

    def __init__(
        self,
        name: str,
        records: RecordStore,
        registry: TableRegistry,
        settings_store: SettingsStore,
    ) -> None:
        self.name = name
        self._records = records
        self._registry = registry
        self._settings_store = settings_store

    @property
    def exists(self) -> bool:
        """Whether the table is registered."""
        return self._registry.table_path(self.name) is not None

    @property
    def path(self) -> Path | None:
        """Table directory, or None if the table is unknown."""
        return self._registry.table_path(self.name)

    @property
    def id_field(self) -> str:
        """Identifier field name under the current naming flag."""
        return self._records.id_field(self.name)

    def create_table(self) -> TableConfig | None:
        """Create this table; None if it already exists."""
        return self._registry.create_table(self.name)

    def drop(self) -> bool:
        """Delete this table and its records; False if it did not exist."""
        return self._registry.delete_table(self.name)

    def next_id(self) -> int:
        """Allocate the next record id."""
        return self._settings_store.next_id(self.name)

    def get(self, record_id: object) -> Record | None:
        """Read one record by id, or None."""
        return self._records.get_by_id(self.name, record_id)

    def all(self) -> list[Record] | None:
        """Read every record, or None if the table is absent."""
        return self._records.get_all(self.name)

    def count(self) -> int | None:
        """Number of stored records, or None if the table is absent."""
        return self._records.count(self.name)

    def create(self, data: Mapping[str, Any]) -> Record | None:
        """Store a new record under a freshly allocated id."""
        return self._records.create(self.name, data)

    def create_raw(self, data: Mapping[str, Any]) -> Record | None:
        """Store a record under the id given in data."""
        return self._records.create_raw(self.name, data)

    def update(self, data: Mapping[str, Any]) -> Record | None:
        """Shallow-merge data over an existing record."""
        return self._records.update(self.name, data)

    def hard_update(self, data: Mapping[str, Any]) -> Record | None:
        """Replace an existing record entirely."""
        return self._records.hard_update(self.name, data)

    def delete(self, record_id: object) -> bool:
        """Delete one record; True if a file was removed."""
        return self._records.delete(self.name, record_id)

    def select(
        self,
        options: SelectOptions | None = None,
        **option_fields: Any,
    ) -> list[Record] | None:
        """Run the select pipeline.

        Options may be passed as a SelectOptions value or as keyword
        fields, e.g. ``table.select(where=pred, order_by="age", limit=2)``.

        Args:
            options: Base pipeline options.
            **option_fields: SelectOptions fields overriding options.

        Returns:
            Selected records, or None if the table is absent.
        """
        resolved = replace(options or SelectOptions(), **option_fields)
        return query_engine.select(self._records, self.name, resolved)

    def get_by(self, match_spec: Mapping[str, Any], **option_fields: Any) -> Record | None:
        """Return the first record whose fields equal match_spec.

        Args:
            match_spec: Field to expected value mapping.
            **option_fields: SelectOptions fields such as where or order_by.

        Returns:
            First matching record, or None.
        """
        options = SelectOptions(**option_fields) if option_fields else None
        return query_engine.get_by(self._records, self.name, match_spec, options)
