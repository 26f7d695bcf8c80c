"""Table lifecycle and path resolution.

A table is a directory under the storage root plus one settings entry.
The registry keeps both in step: a config exists iff its directory does.
"""

from __future__ import annotations

from pathlib import Path
import shutil

from core.constants import SETTINGS_FILE_NAME, SETTINGS_TEMP_PREFIX
from core.errors import FsdbConfigError, FsdbStoreError
from core.logging_config import get_logger
from core.types import TableConfig
from store.settings_store import SettingsStore

_LOGGER = get_logger(__name__)

_TABLE_DIR = object()


class TableRegistry:
    """Create, delete, and locate table directories."""

    def __init__(self, settings_store: SettingsStore) -> None:
        self._settings_store = settings_store

    def create_table(self, table_name: str) -> TableConfig | None:
        """Create a table directory and its settings entry.

        Idempotent: an existing table keeps its counter and records.

        Args:
            table_name: Table identifier.

        Returns:
            The new table config, or None if the table already existed.

        Raises:
            FsdbConfigError: If the name cannot be used as a directory name.
            FsdbStoreError: If the directory or settings cannot be written.
        """
        _validate_table_name(table_name)
        if self.table_path(table_name) is not None:
            return None
        table_dir = self._settings_store.root / table_name
        try:
            table_dir.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise FsdbStoreError(
                f"Failed to create table directory {table_dir}: {error}."
            ) from error
        config = TableConfig(path=str(table_dir.resolve()), counter=0)
        updated = self._settings_store.update(
            lambda current: current
            if table_name in current.tables
            else current.with_table(table_name, config)
        )
        if updated.tables[table_name] is not config:
            return None
        self._settings_store.save()
        _LOGGER.info("table_created", table=table_name, path=config.path)
        return config

    def delete_table(self, table_name: str) -> bool:
        """Delete a table directory, all its records, and its settings entry.

        Args:
            table_name: Table identifier.

        Returns:
            True if the table existed and was removed, else False.

        Raises:
            FsdbStoreError: If the directory or settings cannot be written.
        """
        table_dir = self.table_path(table_name)
        if table_dir is None:
            return False
        try:
            if table_dir.exists():
                shutil.rmtree(table_dir)
        except OSError as error:
            raise FsdbStoreError(
                f"Failed to delete table directory {table_dir}: {error}."
            ) from error
        self._settings_store.update(lambda current: current.without_table(table_name))
        self._settings_store.save()
        _LOGGER.info("table_deleted", table=table_name, path=str(table_dir))
        return True

    def table_path(self, table_name: str) -> Path | None:
        """Return the table's directory from settings, or None."""
        config = self._settings_store.settings.tables.get(table_name)
        if config is None:
            return None
        return Path(config.path)

    def resolve_file(self, table_name: str, record_id: object = _TABLE_DIR) -> Path | None:
        """Return the record file (or table dir) only if it exists on disk.

        Args:
            table_name: Table identifier.
            record_id: Record id; the table directory is resolved when omitted.
                None and ids that cannot name a record file resolve to None.

        Returns:
            Existing path, or None when the table or record is absent.
        """
        table_dir = self.table_path(table_name)
        if table_dir is None:
            return None
        if record_id is _TABLE_DIR:
            target = table_dir
        elif is_storable_record_id(record_id):
            target = table_dir / str(record_id)
        else:
            return None
        if target.exists():
            return target
        return None

    def list_tables(self) -> list[str]:
        """Return registered table names in sorted order."""
        return sorted(self._settings_store.settings.tables)


def is_storable_record_id(record_id: object) -> bool:
    """Return whether an id maps to exactly one visible file in a table dir."""
    if record_id is None:
        return False
    file_name = str(record_id)
    return bool(file_name) and not file_name.startswith(".") and not (
        "/" in file_name or "\\" in file_name
    )


def record_file_name(record_id: object) -> str:
    """Return the file name for a record id.

    Raises:
        FsdbConfigError: If the id is None or its string form is not a safe,
            visible file name.
    """
    if not is_storable_record_id(record_id):
        raise FsdbConfigError(
            f"Record id {record_id!r} cannot be used as a file name. "
            "Use non-None ids without path separators or a leading dot."
        )
    return str(record_id)


def _validate_table_name(table_name: str) -> None:
    reserved = table_name == SETTINGS_FILE_NAME or table_name.startswith(SETTINGS_TEMP_PREFIX)
    if (
        not table_name
        or table_name in {".", ".."}
        or "/" in table_name
        or "\\" in table_name
        or reserved
    ):
        raise FsdbConfigError(
            f"Invalid table name '{table_name}'. "
            "Use a non-empty name without path separators."
        )
