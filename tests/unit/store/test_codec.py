"""Unit tests for YAML codec helpers."""

from __future__ import annotations

from datetime import datetime

import pytest

from core.errors import FsdbDecodeError, FsdbStoreError
from store.codec import decode, encode, read_yaml_file, write_yaml_file, write_yaml_file_atomic


def test_encode_decode_preserves_nested_values_and_timestamps() -> None:
    """Codec should round-trip nested mappings, sequences, and datetimes."""
    payload = {
        "name": "Guest",
        "tags": ["a", "b"],
        "profile": {"age": 18, "active": True, "score": 1.5},
        "joined_at": datetime(2024, 5, 1, 12, 30),
    }

    assert decode(encode(payload)) == payload


def test_compact_encoding_is_single_flow_document() -> None:
    """Non-pretty output should use flow style."""
    text = encode({"tables": {}, "useQualifiedKeywords": False}, pretty=False)

    assert text.startswith("{") and decode(text) == {"tables": {}, "useQualifiedKeywords": False}


def test_decode_raises_decode_error_for_malformed_yaml() -> None:
    """Corrupt content should be reported distinctly from missing files."""
    with pytest.raises(FsdbDecodeError):
        decode("key: [unclosed")


def test_read_yaml_file_raises_store_error_for_missing_file(tmp_path) -> None:
    """Unreadable files should raise the I/O error type, not the decode type."""
    with pytest.raises(FsdbStoreError) as error_info:
        read_yaml_file(tmp_path / "missing.yaml")

    assert not isinstance(error_info.value, FsdbDecodeError)


def test_exclusive_write_refuses_existing_file(tmp_path) -> None:
    """Exclusive writes should never overwrite an existing record."""
    target = tmp_path / "1"
    write_yaml_file(target, {"id": 1})

    with pytest.raises(FileExistsError):
        write_yaml_file(target, {"id": 1, "name": "other"}, exclusive=True)

    assert read_yaml_file(target) == {"id": 1}


def test_atomic_write_replaces_content_and_leaves_no_temp_files(tmp_path) -> None:
    """Atomic writes should swap content in place without leftovers."""
    target = tmp_path / "settings.yaml"
    write_yaml_file_atomic(target, {"version": 1})

    write_yaml_file_atomic(target, {"version": 2})

    assert read_yaml_file(target) == {"version": 2} and [p.name for p in tmp_path.iterdir()] == [
        "settings.yaml"
    ]


def test_atomic_write_raises_store_error_for_missing_directory(tmp_path) -> None:
    """Failed atomic writes should surface as store errors."""
    with pytest.raises(FsdbStoreError):
        write_yaml_file_atomic(tmp_path / "absent" / "settings.yaml", {"version": 1})
