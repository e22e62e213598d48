from datetime import date, datetime
from decimal import Decimal

import pytest

from finance_tracker.errors import ValidationError
from finance_tracker.services.refresh_bus import RefreshBus, RefreshType
from finance_tracker.services.transaction_store import Transaction, TransactionStore


def make_store(bus: RefreshBus, count: int = 0) -> TransactionStore:
    store = TransactionStore(bus)
    store.replace(
        Transaction.create(f"2025-01-{i + 1:02d}", f"Item {i}", "Misc", -(i + 1))
        for i in range(count)
    )
    return store


def test_add_appends_at_tail_and_publishes(bus, recorder) -> None:
    store = make_store(bus, count=2)
    tx = Transaction.create("2025-02-01", "Rent", "Housing", "-900")

    assert store.add(tx) is True

    assert store.all()[-1] == tx
    assert store.all().count(tx) == 1
    assert recorder.received == [RefreshType.TRANSACTIONS]


def test_add_accepts_mapping_and_normalizes_fields(bus) -> None:
    store = make_store(bus)
    store.add({"date": date(2025, 3, 4), "description": "  Lunch ", "category": " Food ", "amount": 12.5})

    tx = store[0]
    assert tx.timestamp == datetime(2025, 3, 4)
    assert tx.description == "Lunch"
    assert tx.category == "Food"
    assert tx.amount == Decimal("12.50")
    assert tx.is_income


@pytest.mark.parametrize(
    "record",
    [
        {"timestamp": "yesterday", "description": "x", "category": "Food", "amount": "1"},
        {"timestamp": "2025-01-01", "description": "x", "category": "", "amount": "1"},
        {"timestamp": "2025-01-01", "description": "x", "category": "Food", "amount": "ten"},
        {"timestamp": "2025-01-01", "description": "x", "category": "Food", "amount": True},
        {"timestamp": "2025-01-01", "description": "x", "category": "Food", "amount": "NaN"},
        {"timestamp": "2025-01-01", "description": "x", "category": "Food", "amount": "1e30"},
        {"timestamp": "2025-01-01", "description": "x", "category": "Food", "amount": "-1000000000000"},
    ],
)
def test_add_rejects_malformed_record(bus, recorder, record) -> None:
    store = make_store(bus)

    with pytest.raises(ValidationError):
        store.add(record)

    assert len(store) == 0
    assert recorder.received == []


def test_add_many_is_all_or_nothing(bus, recorder) -> None:
    store = make_store(bus)
    good = {"timestamp": "2025-01-01", "description": "a", "category": "Food", "amount": "-1"}
    bad = {"timestamp": "2025-01-02", "description": "b", "category": "", "amount": "-1"}

    with pytest.raises(ValidationError):
        store.add_many([good, bad])
    assert len(store) == 0

    assert store.add_many([good, good]) == 2
    assert recorder.received == [RefreshType.TRANSACTIONS]


def test_add_many_with_nothing_does_not_publish(bus, recorder) -> None:
    store = make_store(bus)
    assert store.add_many([]) == 0
    assert recorder.received == []


def test_delete_removes_exactly_the_given_indices(bus, recorder) -> None:
    store = make_store(bus, count=5)
    remaining = [store[1], store[3]]

    assert store.delete([4, 0, 2, 2]) is True

    assert store.all() == remaining
    assert recorder.received == [RefreshType.TRANSACTIONS]


def test_delete_out_of_range_is_noop(bus, recorder) -> None:
    store = make_store(bus, count=2)

    assert store.delete([2, 10, -1]) is False
    assert len(store) == 2
    assert recorder.received == []


def test_delete_mixed_range_removes_valid_indices(bus) -> None:
    store = make_store(bus, count=3)
    assert store.delete([1, 7]) is True
    assert [tx.description for tx in store] == ["Item 0", "Item 2"]


def test_filter_matches_description_and_category(bus) -> None:
    store = TransactionStore(bus)
    store.replace([
        Transaction.create("2025-01-01", "Coffee Shop", "Food", "-3"),
        Transaction.create("2025-01-02", "coffee beans", "Groceries", "-12"),
        Transaction.create("2025-01-03", "Salary", "Income", "2000"),
    ])

    assert [tx.description for tx in store.filter("COFFEE", None)] == ["Coffee Shop", "coffee beans"]
    assert [tx.description for tx in store.filter("coffee", "Groceries")] == ["coffee beans"]
    assert len(store.filter(None, "*")) == 3
    assert len(store.filter("", "")) == 3
    assert store.filter("coffee", "food") == []


def test_filter_does_not_mutate(bus) -> None:
    store = make_store(bus, count=3)
    result = store.filter("Item 1", None)
    result.clear()
    assert len(store) == 3


def test_categories_are_distinct(bus) -> None:
    store = TransactionStore(bus)
    store.replace([
        Transaction.create("2025-01-01", "a", "Food", "-1"),
        Transaction.create("2025-01-02", "b", "Food", "-2"),
        Transaction.create("2025-01-03", "c", "Rent", "-3"),
    ])
    assert store.categories() == {"Food", "Rent"}


def test_all_returns_a_copy(bus) -> None:
    store = make_store(bus, count=1)
    store.all().clear()
    assert len(store) == 1


def test_timestamp_formats() -> None:
    assert Transaction.create("2025-01-02 03:04:05", "", "X", 1).timestamp == datetime(2025, 1, 2, 3, 4, 5)
    assert Transaction.create("2025-01-02T03:04", "", "X", 1).timestamp == datetime(2025, 1, 2, 3, 4)
    assert Transaction.create(date(2025, 1, 2), "", "X", 1).date == date(2025, 1, 2)


def test_zero_amount_counts_as_income() -> None:
    tx = Transaction.create("2025-01-01", "refund", "Misc", 0)
    assert tx.is_income
    assert not tx.is_expense


def test_largest_amount_is_accepted() -> None:
    tx = Transaction.create("2025-01-01", "windfall", "Income", "999999999999.99")
    assert tx.amount == Decimal("999999999999.99")
