import asyncio
import sqlite3

import pytest

from book_cli.db.purchases import PurchaseStore, like_pattern
from book_cli.exceptions import InvalidDate, InvalidPurchase, StoreNotOpen
from book_cli.models import UpsertResult


def test_upsert_inserts_then_updates(run_store):
    first = run_store(
        lambda s: s.upsert("One Piece", 105, "Kinokuniya", "", "2024-03-02"))
    second = run_store(
        lambda s: s.upsert("One Piece", 105, "Eslite", "signed", "2024-04-01"))

    assert first is UpsertResult.INSERTED
    assert second is UpsertResult.UPDATED

    record = run_store(lambda s: s.get("One Piece", 105))
    assert record.series == "One Piece"
    assert record.volume == 105
    assert record.store == "Eslite"
    assert record.notes == "signed"
    assert record.bought_at == "2024-04-01"


def test_update_keeps_row_identity(run_store):
    run_store(lambda s: s.upsert("Berserk", 41, "A", "", "2024-01-01"))
    before = run_store(lambda s: s.get("Berserk", 41))
    run_store(lambda s: s.upsert("Berserk", 41, "B", "", "2024-01-02"))
    after = run_store(lambda s: s.get("Berserk", 41))

    assert before.id == after.id


def test_one_record_per_pair(run_store):
    pairs = [("A", 1), ("A", 2), ("A", 1), ("B", 1), ("A", 2), ("B", 1)]

    async def go(store):
        for series, volume in pairs:
            await store.upsert(series, volume, "", "", "2024-01-01")
        return await store.count()

    assert run_store(go) == len(set(pairs))


def test_bought_at_defaults_to_today(run_store, monkeypatch):
    monkeypatch.setattr("book_cli.db.purchases.today", lambda: "2026-10-18")
    run_store(lambda s: s.upsert("Dandadan", 1))

    assert run_store(lambda s: s.get("Dandadan", 1)).bought_at == "2026-10-18"


@pytest.mark.parametrize("series, volume", [
    ("", 1),
    ("   ", 1),
    ("Bleach", -1),
    ("Bleach", "3"),
    ("Bleach", True),
    ("Bleach", 2 ** 63),
])
def test_upsert_rejects_invalid_purchases(run_store, series, volume):
    with pytest.raises(InvalidPurchase):
        run_store(lambda s: s.upsert(series, volume, "", "", "2024-01-01"))
    assert run_store(lambda s: s.count()) == 0


@pytest.mark.parametrize("bought_at", ["2024-1-1", "20240101", "yesterday", ""])
def test_upsert_rejects_invalid_dates(run_store, bought_at):
    with pytest.raises(InvalidDate):
        run_store(lambda s: s.upsert("Bleach", 1, "", "", bought_at))
    assert run_store(lambda s: s.count()) == 0


def test_volume_zero_is_allowed(run_store):
    assert run_store(
        lambda s: s.upsert("Chainsaw Man", 0, "", "", "2024-01-01")
    ) is UpsertResult.INSERTED


def test_largest_volume_is_allowed(run_store):
    run_store(lambda s: s.upsert("Bleach", 2 ** 63 - 1, "", "", "2024-01-01"))
    assert run_store(lambda s: s.get("Bleach", 2 ** 63 - 1)) is not None


def test_invalid_input_is_a_value_error(run_store):
    with pytest.raises(ValueError):
        run_store(lambda s: s.upsert("", 1, "", "", "2024-01-01"))
    with pytest.raises(ValueError):
        run_store(lambda s: s.upsert("Bleach", 1, "", "", "2024/01/01"))


@pytest.fixture
def shelf(run_store):
    async def fill(store):
        for series, volume, date in [
            ("Naruto", 70, "2023-01-01"),
            ("Naruto", 72, "2023-02-01"),
            ("Naruto", 71, "2023-03-01"),
            ("One Piece", 104, "2024-01-01"),
            ("One Piece", 105, "2024-02-01"),
            ("Blue Period", 3, "2024-03-01"),
        ]:
            await store.upsert(series, volume, "Kinokuniya", "", date)
    run_store(fill)


def test_latest_per_series_lists_max_volume_ordered(shelf, run_store):
    records = run_store(lambda s: s.latest_per_series(""))

    assert [(r.series, r.volume) for r in records] == [
        ("Blue Period", 3),
        ("Naruto", 72),
        ("One Piece", 105),
    ]
    assert records[1].bought_at == "2023-02-01"


def test_latest_per_series_filters_by_substring(shelf, run_store):
    records = run_store(lambda s: s.latest_per_series("Piece"))
    assert [(r.series, r.volume) for r in records] == [("One Piece", 105)]


def test_latest_per_series_ignores_ascii_case(shelf, run_store):
    records = run_store(lambda s: s.latest_per_series("piece"))
    assert [r.series for r in records] == ["One Piece"]


def test_latest_per_series_without_match_is_empty(shelf, run_store):
    assert run_store(lambda s: s.latest_per_series("Bleach")) == []


def test_latest_by_series_returns_best_record(shelf, run_store):
    record = run_store(lambda s: s.latest_by_series("Naruto"))
    assert (record.series, record.volume) == ("Naruto", 72)
    assert record.store == "Kinokuniya"


def test_latest_by_series_takes_max_over_all_matches(shelf, run_store):
    # "o" matches all three series, One Piece has the highest volume
    record = run_store(lambda s: s.latest_by_series("o"))
    assert (record.series, record.volume) == ("One Piece", 105)


def test_latest_by_series_without_match_is_none(shelf, run_store):
    assert run_store(lambda s: s.latest_by_series("Bleach")) is None


def test_keyword_wildcards_match_literally(run_store):
    async def fill(store):
        await store.upsert("100% Perfect Girl", 3, "", "", "2024-01-01")
        await store.upsert("Bleach", 74, "", "", "2024-01-01")
    run_store(fill)

    records = run_store(lambda s: s.latest_per_series("%"))
    assert [r.series for r in records] == ["100% Perfect Girl"]
    assert run_store(lambda s: s.latest_by_series("_")) is None


def test_like_pattern_escapes():
    assert like_pattern("") == "%%"
    assert like_pattern("a_b%c\\") == "%a\\_b\\%c\\\\%"


def test_transaction_rolls_back_on_error(run_store):
    async def go(store):
        async with store.transaction():
            await store.upsert("Monster", 1, "", "", "2024-01-01")
            await store.upsert("Monster", 2, "", "", "2024-01-01")
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        run_store(go)
    assert run_store(lambda s: s.count()) == 0


def test_store_must_be_open(db_path):
    store = PurchaseStore(db_path)
    assert not store.is_open
    with pytest.raises(StoreNotOpen):
        asyncio.run(store.count())


def test_open_and_close_are_idempotent(db_path):
    async def go():
        store = PurchaseStore(db_path)
        await store.open()
        await store.open()
        assert store.is_open
        await store.close()
        await store.close()
        return store.is_open

    assert asyncio.run(go()) is False
    assert db_path.is_file()


def test_open_creates_missing_parent_dir(tmp_path):
    db_path = tmp_path / "nested" / "dir" / "books.db"

    async def go():
        async with PurchaseStore(db_path) as store:
            return await store.count()

    assert asyncio.run(go()) == 0
    assert db_path.is_file()


def test_open_adds_bought_at_to_legacy_table(db_path, run_store):
    conn = sqlite3.connect(db_path)
    conn.execute(
        "CREATE TABLE purchases ("
        " id INTEGER PRIMARY KEY AUTOINCREMENT,"
        " series TEXT NOT NULL,"
        " volume INTEGER NOT NULL,"
        " store TEXT,"
        " notes TEXT,"
        " UNIQUE(series, volume))"
    )
    conn.execute(
        "INSERT INTO purchases (series, volume, store, notes) "
        "VALUES ('Berserk', 41, 'Eslite', 'old')"
    )
    conn.commit()
    conn.close()

    record = run_store(lambda s: s.get("Berserk", 41))
    assert record.store == "Eslite"
    assert record.notes == "old"
    assert record.bought_at is None

    result = run_store(lambda s: s.upsert("Berserk", 41, "Eslite", "", "2024-05-05"))
    assert result is UpsertResult.UPDATED
    assert run_store(lambda s: s.get("Berserk", 41)).bought_at == "2024-05-05"

    conn = sqlite3.connect(db_path)
    columns = [row[1] for row in conn.execute("PRAGMA table_info(purchases)")]
    conn.close()
    assert columns == ["id", "series", "volume", "store", "notes", "bought_at"]
