"""Unit tests for record field naming."""

from __future__ import annotations

from store.record_keys import id_key, record_key


def test_record_key_qualifies_with_table_name() -> None:
    """Qualified keys should be prefixed with the table name."""
    assert record_key("user", "name", qualified=True) == "user/name"


def test_record_key_returns_bare_field_when_unqualified() -> None:
    """Plain keys should be the field name unchanged."""
    assert record_key("user", "name", qualified=False) == "name"


def test_id_key_follows_naming_flag() -> None:
    """Identifier field should switch between plain and qualified."""
    assert (id_key("user", False), id_key("user", True)) == ("id", "user/id")
