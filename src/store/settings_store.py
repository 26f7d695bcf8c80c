"""Settings persistence and id allocation.

This module owns the process-wide settings value: the table registry
and the naming flag. Mutations replace an immutable Settings value under
a lock, then persist it synchronously (structural changes) or on a
background worker (counter increments).
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
import shutil
import threading
from typing import Any, Callable, Mapping

from core.config import FsdbConfig
from core.constants import QUALIFIED_KEYWORDS_KEY, SETTINGS_FILE_NAME, SETTINGS_TEMP_PREFIX
from core.errors import FsdbDecodeError, FsdbSettingsNotLoadedError, FsdbStoreError
from core.logging_config import get_logger
from core.types import Settings, settings_from_payload
from store.codec import read_yaml_file, write_yaml_file_atomic

_LOGGER = get_logger(__name__)

SettingsMutator = Callable[[Settings], Settings]


class SettingsStore:
    """Thread-safe holder of the process-wide settings value.

    The in-memory value is always current. The settings file may lag
    behind it after next_id until the background save completes; a crash
    in that window leaves a stale counter on disk.
    """

    def __init__(self, config: FsdbConfig) -> None:
        """Initialize the store without touching the filesystem.

        Args:
            config: Runtime configuration.
        """
        self._config = config
        self._root = config.data_root
        self._settings_path = config.data_root / SETTINGS_FILE_NAME
        self._settings: Settings | None = None
        self._lock = threading.Lock()
        self._save_lock = threading.Lock()
        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = threading.Lock()

    @property
    def root(self) -> Path:
        """Storage root directory."""
        return self._root

    @property
    def settings_path(self) -> Path:
        """Settings file path."""
        return self._settings_path

    @property
    def is_loaded(self) -> bool:
        return self._settings is not None

    @property
    def settings(self) -> Settings:
        """Return the current settings value.

        Raises:
            FsdbSettingsNotLoadedError: If setup has not loaded settings.
        """
        current = self._settings
        if current is None:
            raise FsdbSettingsNotLoadedError(
                f"Settings are not loaded from {self._settings_path}. "
                "Call setup() before using tables or records."
            )
        return current

    @property
    def use_qualified_keywords(self) -> bool:
        return self.settings.use_qualified_keywords

    def setup(self, defaults: Mapping[str, Any] | None = None) -> Settings | None:
        """Create the storage root and settings file if absent, then load.

        Safe to call repeatedly; an existing settings file is never
        overwritten.

        Args:
            defaults: Optional settings payload overriding the seed values
                for a newly created settings file.

        Returns:
            Loaded settings, or None when the existing file is unreadable.

        Raises:
            FsdbStoreError: If the root or settings file cannot be created.
        """
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise FsdbStoreError(
                f"Failed to create storage root {self._root}: {error}. "
                "Check FSDB_DATA_ROOT and directory permissions."
            ) from error
        if not self._settings_path.exists():
            seed: dict[str, Any] = {QUALIFIED_KEYWORDS_KEY: self._config.qualified_keywords}
            seed.update(defaults or {})
            initial = settings_from_payload(seed)
            write_yaml_file_atomic(
                self._settings_path,
                initial.to_payload(),
                pretty=self._config.pretty_settings,
                temp_prefix=SETTINGS_TEMP_PREFIX,
            )
            _LOGGER.info(
                "settings_initialized",
                settings_path=str(self._settings_path),
                use_qualified_keywords=initial.use_qualified_keywords,
            )
        return self.load()

    def load(self) -> Settings | None:
        """Load settings from disk into memory.

        A missing or corrupt settings file is logged and leaves the
        in-memory state unset.

        Returns:
            Loaded settings, or None on failure.
        """
        try:
            payload = read_yaml_file(self._settings_path)
            if not isinstance(payload, Mapping):
                raise FsdbDecodeError(
                    f"Expected a mapping at top level of {self._settings_path}."
                )
            loaded = settings_from_payload(payload)
        except (FsdbStoreError, ValueError, TypeError) as error:
            _LOGGER.error(
                "settings_load_failed",
                settings_path=str(self._settings_path),
                error=str(error),
            )
            with self._lock:
                self._settings = None
            return None
        with self._lock:
            self._settings = loaded
        return loaded

    def save(self, pretty: bool | None = None) -> Settings:
        """Persist the current in-memory settings.

        The snapshot is taken while holding the save lock so a slower,
        older save can never overwrite a newer one.

        Args:
            pretty: Override the configured output style.

        Returns:
            The settings value that was written.

        Raises:
            FsdbSettingsNotLoadedError: If settings are not loaded.
            FsdbStoreError: If the write fails; the old file is kept.
        """
        use_pretty = self._config.pretty_settings if pretty is None else pretty
        with self._save_lock:
            snapshot = self.settings
            write_yaml_file_atomic(
                self._settings_path,
                snapshot.to_payload(),
                pretty=use_pretty,
                temp_prefix=SETTINGS_TEMP_PREFIX,
            )
        return snapshot

    def save_async(self) -> Future[Settings]:
        """Schedule a best-effort background save and return immediately."""
        future = self._background_executor().submit(self.save)
        future.add_done_callback(self._log_async_failure)
        return future

    def flush(self) -> None:
        """Block until all scheduled background saves have finished."""
        with self._executor_lock:
            executor = self._executor
        if executor is not None:
            executor.submit(lambda: None).result()

    def close(self) -> None:
        """Finish pending background saves and stop the worker."""
        with self._executor_lock:
            executor = self._executor
            self._executor = None
        if executor is not None:
            executor.shutdown(wait=True)

    def update(self, mutator: SettingsMutator) -> Settings:
        """Atomically replace the settings value.

        Args:
            mutator: Pure function from the current value to the new one.

        Returns:
            The new settings value.

        Raises:
            FsdbSettingsNotLoadedError: If settings are not loaded.
        """
        with self._lock:
            updated = mutator(self.settings)
            self._settings = updated
        return updated

    def next_id(self, table_name: str) -> int:
        """Allocate the next id for a table.

        The counter is incremented under the settings lock, so concurrent
        callers never receive duplicate ids. Persistence happens in the
        background; the returned id does not wait for it.

        Args:
            table_name: Table to allocate from.

        Returns:
            The newly allocated id.

        Raises:
            FsdbStoreError: If the table does not exist.
        """
        with self._lock:
            current = self.settings
            table_config = current.tables.get(table_name)
            if table_config is None:
                raise FsdbStoreError(
                    f"Cannot allocate id: table '{table_name}' does not exist. "
                    "Create the table first."
                )
            next_config = replace(table_config, counter=table_config.counter + 1)
            self._settings = current.with_table(table_name, next_config)
        self.save_async()
        return next_config.counter

    def set_qualified_keywords(self, enabled: bool) -> Settings:
        """Switch the id naming convention and persist synchronously."""
        updated = self.update(lambda current: replace(current, use_qualified_keywords=enabled))
        self.save()
        return updated

    def reset(self) -> Settings | None:
        """Delete the whole storage tree and run setup again.

        Returns:
            Freshly initialized settings.

        Raises:
            FsdbStoreError: If the storage tree cannot be removed.
        """
        self.flush()
        try:
            if self._root.exists():
                shutil.rmtree(self._root)
        except OSError as error:
            raise FsdbStoreError(
                f"Failed to delete storage root {self._root}: {error}."
            ) from error
        with self._lock:
            self._settings = None
        _LOGGER.warning("storage_reset", data_root=str(self._root))
        return self.setup()

    def _background_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="fsdb-settings"
                )
            return self._executor

    def _log_async_failure(self, future: Future[Settings]) -> None:
        error = future.exception()
        if error is not None:
            _LOGGER.error(
                "settings_async_save_failed",
                settings_path=str(self._settings_path),
                error=str(error),
            )
