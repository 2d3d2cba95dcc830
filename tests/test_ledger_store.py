"""Mini README: Tests for the SQLite ledger store.

These tests cover identity and timestamp assignment, strict partial updates,
idempotent deletes, storage failure reporting, and date-ranged bucketing.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from memoledger.errors import InvalidArgumentError, NotFoundError, StorageError
from memoledger.ledger import BucketGranularity, LedgerStore, SortMode


def test_insert_assigns_unique_ids_and_non_decreasing_timestamps(store, memo_fields) -> None:
    """Sequential inserts should never reuse ids or move creation time backwards."""

    memos = [store.insert(memo_fields(client_name=f"Client {index}")) for index in range(5)]

    assert len({memo.memo_id for memo in memos}) == 5
    stamps = [memo.created_at for memo in memos]
    assert stamps == sorted(stamps)
    assert memos[0].date == date(2024, 1, 5)
    assert memos[0].memo_image_url is None


def test_created_at_does_not_go_backwards_when_clock_steps_back(tmp_path, memo_fields) -> None:
    """A wall clock moving backwards must not produce an earlier creation time."""

    ticks = iter(
        [
            datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc),
            datetime(2024, 3, 1, 11, 0, tzinfo=timezone.utc),
        ]
    )
    store = LedgerStore(tmp_path / "ledger.sqlite3", clock=lambda: next(ticks))

    first = store.insert(memo_fields())
    second = store.insert(memo_fields())

    assert second.created_at >= first.created_at


def test_deleted_ids_are_not_reused(store, memo_fields) -> None:
    first = store.insert(memo_fields())
    store.delete(first.memo_id)
    second = store.insert(memo_fields())
    assert second.memo_id != first.memo_id


def test_update_fields_changes_only_supplied_fields(store, memo_fields) -> None:
    memo = store.insert(memo_fields(memo_image_url="https://img.example/1.png"))

    updated = store.update_fields(memo.memo_id, {"paid": 1000.0, "due": 0.0})

    assert updated.paid == pytest.approx(1000.0)
    assert updated.due == pytest.approx(0.0)
    assert updated.client_name == memo.client_name
    assert updated.total_price == pytest.approx(memo.total_price)
    assert updated.memo_image_url == "https://img.example/1.png"
    assert updated.created_at == memo.created_at


def test_update_fields_rejects_empty_and_unknown_ids(store, memo_fields) -> None:
    memo = store.insert(memo_fields())

    with pytest.raises(InvalidArgumentError):
        store.update_fields(memo.memo_id, {})
    with pytest.raises(NotFoundError):
        store.update_fields(memo.memo_id + 100, {"paid": 1.0})
    with pytest.raises(InvalidArgumentError):
        store.update_fields(memo.memo_id, {"created_at": "2020-01-01"})


def test_delete_is_idempotent(store, memo_fields) -> None:
    memo = store.insert(memo_fields())

    store.delete(memo.memo_id)
    store.delete(memo.memo_id)
    store.delete(999)

    with pytest.raises(NotFoundError):
        store.get(memo.memo_id)


def test_failed_insert_leaves_no_partial_row(store, memo_fields) -> None:
    """A constraint failure is reported as a storage error and rolled back."""

    fields = memo_fields()
    del fields["client_name"]

    with pytest.raises(StorageError):
        store.insert(fields)
    assert store.count() == 0


def test_failed_update_leaves_row_untouched(store, memo_fields) -> None:
    """A constraint failure part way through an update rolls back every field."""

    memo = store.insert(memo_fields(paid=400.0))

    with pytest.raises(StorageError):
        store.update_fields(memo.memo_id, {"paid": 1.0, "client_name": None})

    unchanged = store.get(memo.memo_id)
    assert unchanged.paid == pytest.approx(400.0)
    assert unchanged.client_name == memo.client_name


def test_ids_beyond_sqlite_range_behave_as_missing(store, memo_fields) -> None:
    """Ids no SQLite row can carry are simply not found, and deleting them is a no-op."""

    store.insert(memo_fields())
    huge_id = 10**20

    store.delete(huge_id)
    with pytest.raises(NotFoundError):
        store.get(huge_id)
    with pytest.raises(NotFoundError):
        store.update_fields(huge_id, {"paid": 1.0})
    assert store.count() == 1


def test_oversized_pagination_is_clamped(store, memo_fields) -> None:
    store.insert(memo_fields())

    rows, total = store.query(limit=10**20)
    past_end, _ = store.query(limit=10, offset=10**20)

    assert (len(rows), total) == (1, 1)
    assert past_end == []


def test_unavailable_database_raises_storage_error(tmp_path) -> None:
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("occupied")

    with pytest.raises(StorageError):
        LedgerStore(blocker / "ledger.sqlite3")


def test_query_orders_by_date_with_total_count(store, memo_fields) -> None:
    store.insert(memo_fields(date=date(2024, 1, 1), client_name="Older"))
    store.insert(memo_fields(date=date(2024, 2, 1), client_name="Newer"))
    store.insert(memo_fields(date=date(2023, 12, 1), client_name="Oldest"))

    rows, total = store.query(sort_mode=SortMode.DATE, limit=2, offset=0)

    assert total == 3
    assert [row.client_name for row in rows] == ["Newer", "Older"]


def test_sum_and_bucket_groups_exact_dates_descending(store, memo_fields) -> None:
    """Two memos on one day share a bucket; days outside the range are skipped."""

    store.insert(memo_fields(date=date(2024, 1, 5), total_price=1000.0, paid=400.0, due=600.0))
    store.insert(memo_fields(date=date(2024, 1, 5), total_price=500.0, paid=500.0, due=0.0))
    store.insert(memo_fields(date=date(2024, 1, 7), total_price=200.0, paid=50.0, due=150.0))
    store.insert(memo_fields(date=date(2024, 2, 1), total_price=999.0, paid=0.0, due=999.0))

    buckets = store.sum_and_bucket(date(2024, 1, 1), date(2024, 1, 31))

    assert [bucket.period for bucket in buckets] == ["2024-01-07", "2024-01-05"]
    assert buckets[1].as_dict() == {"period": "2024-01-05", "sales": 1500.0, "paid": 900.0, "due": 600.0}


def test_sum_and_bucket_range_is_inclusive(store, memo_fields) -> None:
    store.insert(memo_fields(date=date(2024, 1, 5)))

    day = date(2024, 1, 5)
    assert len(store.sum_and_bucket(day, day)) == 1
    assert store.sum_and_bucket(day + timedelta(days=1), day + timedelta(days=2)) == []


def test_sum_and_bucket_supports_month_granularity(store, memo_fields) -> None:
    store.insert(memo_fields(date=date(2024, 1, 5), total_price=100.0))
    store.insert(memo_fields(date=date(2024, 1, 20), total_price=50.0))
    store.insert(memo_fields(date=date(2024, 3, 2), total_price=10.0))

    buckets = store.sum_and_bucket(date(2024, 1, 1), date(2024, 12, 31), BucketGranularity.MONTH)

    assert [(bucket.period, bucket.sales) for bucket in buckets] == [("2024-03", 10.0), ("2024-01", 150.0)]


def test_ledger_totals_cover_every_row(store, memo_fields) -> None:
    assert store.ledger_totals().total_sales == 0.0

    store.insert(memo_fields(date=date(2020, 1, 1), total_price=100.0, paid=50.0, due=50.0))
    store.insert(memo_fields(date=date(2024, 1, 1), total_price=200.0, paid=200.0, due=0.0))

    totals = store.ledger_totals()
    assert totals.total_sales == pytest.approx(300.0)
    assert totals.total_paid == pytest.approx(250.0)
    assert totals.total_due == pytest.approx(50.0)
