"""Record field naming.

Field names are either plain or qualified by the owning table name,
depending on the global naming flag in settings.
"""

from __future__ import annotations

from core.constants import ID_FIELD_NAME, QUALIFIED_KEY_SEPARATOR


def record_key(table_name: str, field_name: str, qualified: bool) -> str:
    """Return the stored key for a record field.

    Args:
        table_name: Owning table name.
        field_name: Unqualified field name.
        qualified: Whether keys are prefixed with the table name.

    Returns:
        ``"<table>/<field>"`` when qualified, else the bare field name.
    """
    if qualified:
        return f"{table_name}{QUALIFIED_KEY_SEPARATOR}{field_name}"
    return field_name


def id_key(table_name: str, qualified: bool) -> str:
    """Return the identifier field name for a table."""
    return record_key(table_name, ID_FIELD_NAME, qualified)
