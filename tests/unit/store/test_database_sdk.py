"""Unit tests for the high-level SDK client."""

from __future__ import annotations

from core.types import SelectOptions
from store.codec import read_yaml_file
from store.database_sdk import FsdbClient, Table


def test_client_runs_setup_on_construction(client, fsdb_config) -> None:
    """Constructing a client should create the root and settings file."""
    assert (fsdb_config.data_root / "settings.yaml").exists() and client.list_tables() == []


def test_client_seeds_defaults_for_new_root(fsdb_config) -> None:
    """Defaults passed to the client should seed a new settings file."""
    with FsdbClient(fsdb_config, defaults={"useQualifiedKeywords": True}) as sdk_client:
        sdk_client.create_table("user")
        created = sdk_client.create("user", {"user/name": "Guest"})

    assert created == {"user/name": "Guest", "user/id": 1}


def test_client_crud_flow(client) -> None:
    """Client-level operations should cover the record lifecycle."""
    client.create_table("user")
    created = client.create("user", {"name": "Guest"})
    client.update("user", {"id": created["id"], "age": 18})
    merged = client.get_by_id("user", created["id"])
    deleted = client.delete("user", created["id"])

    assert merged == {"name": "Guest", "id": 1, "age": 18} and deleted is True


def test_table_handle_select_accepts_keyword_options(client) -> None:
    """Table.select should build options from keyword fields."""
    users = client.table("user")
    users.create_table()
    for age in (2, 4, 6, 8):
        users.create({"age": age})

    results = users.select(
        where=lambda record: record["age"] % 2 == 0, order_by="age", offset=1, limit=2
    )

    assert [record["age"] for record in results] == [4, 6]


def test_table_handle_get_by_and_count(client) -> None:
    """Table handle should expose lookup helpers."""
    users = client.table("user")
    users.create_table()
    users.create({"email": "a@example.com"})
    users.create({"email": "b@example.com"})

    found = users.get_by({"email": "b@example.com"})

    assert found is not None and found[users.id_field] == 2 and users.count() == 2


def test_table_handle_drop_removes_table(client) -> None:
    """Dropping through the handle should delete the table."""
    users = client.table("user")
    users.create_table()

    users.drop()

    assert users.exists is False and users.all() is None


def test_select_merges_explicit_options_with_keywords(client) -> None:
    """Keyword fields should override fields of an options value."""
    users = client.table("user")
    users.create_table()
    for age in (3, 1, 2):
        users.create({"age": age})

    results = users.select(SelectOptions(order_by="age"), descending=True)

    assert [record["age"] for record in results] == [3, 2, 1]


def test_reset_removes_all_tables(client, fsdb_config) -> None:
    """Reset should wipe all data and keep the client usable."""
    client.create_table("user")
    client.create("user", {"name": "Guest"})

    client.reset()
    client.create_table("user")
    created = client.create("user", {"name": "Again"})

    assert created["id"] == 1 and client.list_tables() == ["user"]


def test_with_data_root_clones_client(client, tmp_path) -> None:
    """Cloning on another root should not share tables."""
    client.create_table("user")

    with client.with_data_root(str(tmp_path / "other")) as other:
        tables = other.list_tables()

    assert tables == [] and read_yaml_file(tmp_path / "other" / "settings.yaml")["tables"] == {}


def test_public_sdk_methods_are_documented() -> None:
    """Every public client and table method should carry a docstring."""
    undocumented = [
        f"{owner.__name__}.{name}"
        for owner in (FsdbClient, Table)
        for name, member in vars(owner).items()
        if not name.startswith("_") and callable(member) and not member.__doc__
    ]

    assert undocumented == []
