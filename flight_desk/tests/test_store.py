import sqlite3

from flight_desk.store import SCHEMA_VERSION, SqliteKeyValueStore


def test_set_get_remove(tmp_path):
    store = SqliteKeyValueStore(str(tmp_path / "kv.db"))

    assert store.get("missing") is None
    store.set("recentSearches", "[]")
    assert store.get("recentSearches") == "[]"

    store.set("recentSearches", '[{"id": "1"}]')
    assert store.get("recentSearches") == '[{"id": "1"}]'

    store.remove("recentSearches")
    assert store.get("recentSearches") is None
    # removing twice is harmless
    store.remove("recentSearches")


def test_migrate_is_idempotent(tmp_path):
    db_file = tmp_path / "kv.db"
    SqliteKeyValueStore(str(db_file)).set("k", "v")
    store = SqliteKeyValueStore(str(db_file))

    assert store.get("k") == "v"
    conn = sqlite3.connect(db_file)
    rows = conn.execute("SELECT version FROM schema_version").fetchall()
    conn.close()
    assert rows == [(SCHEMA_VERSION,)]
