"""Public SDK surface for fsdb.

This module provides a stable import path for library users.
It re-exports the primary client and typed option models.
"""

from __future__ import annotations

from core.config import FsdbConfig
from core.errors import (
    FsdbConfigError,
    FsdbDecodeError,
    FsdbError,
    FsdbPreconditionError,
    FsdbQueryError,
    FsdbSettingsNotLoadedError,
    FsdbStoreError,
)
from core.types import SelectOptions, Settings, TableConfig
from store.database_sdk import FsdbClient, Table
from store.record_keys import record_key

__all__ = [
    "FsdbClient",
    "FsdbConfig",
    "FsdbConfigError",
    "FsdbDecodeError",
    "FsdbError",
    "FsdbPreconditionError",
    "FsdbQueryError",
    "FsdbSettingsNotLoadedError",
    "FsdbStoreError",
    "SelectOptions",
    "Settings",
    "Table",
    "TableConfig",
    "record_key",
]
