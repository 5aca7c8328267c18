from collections.abc import Iterator
from pathlib import Path

import pytest

from fantasy_auction.store.sqlite_store import SqliteStore


@pytest.fixture
def store(tmp_path: Path) -> Iterator[SqliteStore]:
    s = SqliteStore(tmp_path / "nested" / "auction.db")
    yield s
    s.close()


class TestSqliteStore:
    def test_creates_parent_directory(self, tmp_path: Path, store: SqliteStore) -> None:
        assert store.get("ns", "k") is None
        assert (tmp_path / "nested" / "auction.db").exists()

    def test_set_and_get(self, store: SqliteStore) -> None:
        store.set("ns", "k", '{"a": 1}')
        assert store.get("ns", "k") == '{"a": 1}'
        assert store.get("other", "k") is None

    def test_overwrite(self, store: SqliteStore) -> None:
        store.set("ns", "k", "v1")
        store.set("ns", "k", "v2")
        assert store.get("ns", "k") == "v2"

    def test_clear_key_and_namespace(self, store: SqliteStore) -> None:
        store.set("ns", "a", "1")
        store.set("ns", "b", "2")
        store.set("keep", "a", "3")

        store.clear("ns", "a")
        assert store.get("ns", "a") is None
        assert store.get("ns", "b") == "2"

        store.clear("ns")
        assert store.get("ns", "b") is None
        assert store.get("keep", "a") == "3"

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "auction.db"
        first = SqliteStore(path)
        first.set("ns", "k", "v")
        first.close()

        second = SqliteStore(path)
        assert second.get("ns", "k") == "v"
        second.close()

    def test_nothing_created_until_first_use(self, tmp_path: Path) -> None:
        s = SqliteStore(tmp_path / "unused" / "auction.db")
        s.close()
        assert not (tmp_path / "unused").exists()

    def test_reopens_after_close(self, store: SqliteStore) -> None:
        store.set("ns", "k", "v")
        store.close()
        assert store.get("ns", "k") == "v"
