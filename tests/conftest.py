"""Pytest configuration for repository test runs."""

from __future__ import annotations

from dataclasses import replace
import sys
from pathlib import Path
from typing import Iterator

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def fsdb_config(tmp_path: Path):
    """Config rooted in a per-test temporary directory."""
    from core.config import FsdbConfig

    return replace(
        FsdbConfig.from_env(),
        data_root=(tmp_path / "db").resolve(),
        qualified_keywords=False,
    )


@pytest.fixture
def client(fsdb_config) -> Iterator[object]:
    """Set-up SDK client that is closed after the test."""
    from store.database_sdk import FsdbClient

    sdk_client = FsdbClient(fsdb_config)
    yield sdk_client
    sdk_client.close()
