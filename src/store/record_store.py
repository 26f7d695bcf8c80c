"""Record CRUD on per-table directories.

Each record is one YAML file named after its id. The directory tree is
the only source of truth for record existence; nothing is cached.
Operations on a missing table or record return None or False.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from core.errors import FsdbDecodeError, FsdbPreconditionError, FsdbStoreError
from core.logging_config import get_logger
from core.types import Record
from store.codec import read_yaml_file, write_yaml_file
from store.record_keys import id_key
from store.settings_store import SettingsStore
from store.table_registry import TableRegistry, record_file_name

_LOGGER = get_logger(__name__)


class RecordStore:
    """Filesystem-backed record store."""

    def __init__(self, settings_store: SettingsStore, registry: TableRegistry) -> None:
        self._settings_store = settings_store
        self._registry = registry

    def id_field(self, table_name: str) -> str:
        """Return the identifier field name used for a table."""
        return id_key(table_name, self._settings_store.use_qualified_keywords)

    def get_by_id(self, table_name: str, record_id: object) -> Record | None:
        """Read one record by id.

        Returns:
            Decoded record, or None when the table or record is absent.

        Raises:
            FsdbDecodeError: If the record file is corrupt.
        """
        record_path = self._registry.resolve_file(table_name, record_id)
        if record_path is None:
            return None
        return self.get_by_path(record_path)

    def get_by_path(self, record_path: Path) -> Record:
        """Read and decode one record file.

        Raises:
            FsdbStoreError: If the file cannot be read.
            FsdbDecodeError: If the file does not hold a mapping.
        """
        payload = read_yaml_file(record_path)
        if not isinstance(payload, Mapping):
            raise FsdbDecodeError(
                f"Record file {record_path} does not contain a mapping. "
                "Fix or delete the corrupt record."
            )
        return dict(payload)

    def get_all(self, table_name: str) -> list[Record] | None:
        """Read every record of a table in directory-listing order.

        Records deleted while the scan runs are skipped.

        Returns:
            Decoded records, or None when the table does not exist.
        """
        table_dir = self._registry.resolve_file(table_name)
        if table_dir is None:
            return None
        records: list[Record] = []
        for record_path in _list_record_files(table_dir):
            try:
                records.append(self.get_by_path(record_path))
            except FsdbStoreError:
                if record_path.exists():
                    raise
        return records

    def count(self, table_name: str) -> int | None:
        """Return the number of record files in a table, or None."""
        table_dir = self._registry.resolve_file(table_name)
        if table_dir is None:
            return None
        return len(_list_record_files(table_dir))

    def create(self, table_name: str, data: Mapping[str, Any]) -> Record | None:
        """Store a new record under a freshly allocated id.

        Args:
            table_name: Target table.
            data: Record fields; the caller's mapping is not modified.

        Returns:
            The stored record including its id, or None if the table is absent.

        Raises:
            FsdbStoreError: If the file for the new id already exists or cannot
                be written. A file can already exist when the on-disk counter
                went stale after a crash, or when create_raw stored a record
                under an id the counter has not reached yet.
        """
        table_dir = self._registry.table_path(table_name)
        if table_dir is None:
            return None
        record_id = self._settings_store.next_id(table_name)
        record = dict(data)
        record[self.id_field(table_name)] = record_id
        record_path = table_dir / record_file_name(record_id)
        try:
            write_yaml_file(record_path, record, exclusive=True)
        except FileExistsError as error:
            _LOGGER.warning(
                "record_id_collision",
                table=table_name,
                record_id=record_id,
                path=str(record_path),
            )
            raise FsdbStoreError(
                f"Record file {record_path} already exists for new id {record_id}. "
                "The id counter is behind the stored records; retry to allocate a fresh id."
            ) from error
        _LOGGER.debug("record_created", table=table_name, record_id=record_id)
        return record

    def create_raw(self, table_name: str, data: Mapping[str, Any]) -> Record | None:
        """Store a record whose id is supplied by the caller.

        Any existing record with the same id is overwritten.

        Returns:
            The stored record, or None if the table is absent.

        Raises:
            FsdbPreconditionError: If the identifier field is absent or None.
        """
        record_id = self._require_id(table_name, data, "create_raw")
        table_dir = self._registry.table_path(table_name)
        if table_dir is None:
            return None
        record = dict(data)
        write_yaml_file(table_dir / record_file_name(record_id), record)
        return record

    def hard_update(self, table_name: str, data: Mapping[str, Any]) -> Record | None:
        """Replace an existing record entirely with data.

        Fields missing from data are dropped. No record is created when
        the id does not exist.

        Returns:
            The stored record, or None if the table or record is absent.

        Raises:
            FsdbPreconditionError: If the identifier field is absent or None.
        """
        record_id = self._require_id(table_name, data, "hard_update")
        record_path = self._registry.resolve_file(table_name, record_id)
        if record_path is None:
            return None
        record = dict(data)
        write_yaml_file(record_path, record)
        return record

    def update(self, table_name: str, data: Mapping[str, Any]) -> Record | None:
        """Shallow-merge data over an existing record.

        Returns:
            The merged record, or None if the table or record is absent.

        Raises:
            FsdbPreconditionError: If the identifier field is absent or None.
        """
        record_id = self._require_id(table_name, data, "update")
        record_path = self._registry.resolve_file(table_name, record_id)
        if record_path is None:
            return None
        merged = self.get_by_path(record_path)
        merged.update(data)
        write_yaml_file(record_path, merged)
        return merged

    def delete(self, table_name: str, record_id: object) -> bool:
        """Delete one record file.

        Returns:
            True if a file was removed, False if there was nothing to remove.

        Raises:
            FsdbStoreError: If the file exists but cannot be removed.
        """
        record_path = self._registry.resolve_file(table_name, record_id)
        if record_path is None:
            return False
        try:
            record_path.unlink()
        except FileNotFoundError:
            return False
        except OSError as error:
            raise FsdbStoreError(f"Failed to delete record {record_path}: {error}.") from error
        return True

    def _require_id(self, table_name: str, data: Mapping[str, Any], operation: str) -> object:
        field_name = self.id_field(table_name)
        if field_name not in data:
            raise FsdbPreconditionError(
                f"{operation} on table '{table_name}' requires the '{field_name}' field."
            )
        if data[field_name] is None:
            raise FsdbPreconditionError(
                f"{operation} on table '{table_name}' requires a non-None '{field_name}'."
            )
        return data[field_name]


def _list_record_files(table_dir: Path) -> list[Path]:
    """List record files in directory order, ignoring subdirectories and dotfiles."""
    try:
        return [
            entry
            for entry in table_dir.iterdir()
            if not entry.name.startswith(".") and not entry.is_dir()
        ]
    except OSError as error:
        raise FsdbStoreError(f"Failed to list table directory {table_dir}: {error}.") from error
