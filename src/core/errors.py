"""Fsdb exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Not-found conditions are never errors; they surface as None or False.
"""

from __future__ import annotations


class FsdbError(Exception):
    """Base exception for all fsdb failures."""


class FsdbConfigError(FsdbError):
    """Raised for invalid runtime configuration or table names."""


class FsdbSettingsNotLoadedError(FsdbError):
    """Raised when settings are used before setup has loaded them."""


class FsdbStoreError(FsdbError):
    """Raised for filesystem read, write, and delete failures."""


class FsdbDecodeError(FsdbStoreError):
    """Raised when stored content exists but cannot be decoded."""


class FsdbPreconditionError(FsdbError, AssertionError):
    """Raised for caller programming errors such as a missing id field."""


class FsdbQueryError(FsdbError):
    """Raised for invalid select options."""
