"""Tests for category lists and relabelling."""
import pytest
from budgy.models.transaction import TransactionType
from budgy.services.categories import EXPENSE_CATEGORIES, CategoryBook, relabel
from tests.conftest import make_transaction

EXPENSE = TransactionType.EXPENSE
INCOME = TransactionType.INCOME


def test_defaults():
    book = CategoryBook()

    assert book.categories(EXPENSE) == EXPENSE_CATEGORIES
    assert "Salary" in book.categories(INCOME)


def test_add_ignores_blank_and_duplicate():
    book = CategoryBook(expense=["Food"], income=[])

    assert book.add(EXPENSE, "  Pets ") is True
    assert book.add(EXPENSE, "Food") is False
    assert book.add(EXPENSE, "   ") is False
    assert book.categories(EXPENSE) == ["Food", "Pets"]


def test_rename():
    book = CategoryBook(expense=["Food", "Rent"], income=[])

    assert book.rename(EXPENSE, 0, "Groceries") == "Food"
    assert book.rename(EXPENSE, 0, "Rent") is None
    assert book.rename(EXPENSE, 0, "") is None
    assert book.categories(EXPENSE) == ["Groceries", "Rent"]

    with pytest.raises(IndexError):
        book.rename(EXPENSE, 5, "Nope")


def test_delete():
    book = CategoryBook(expense=["Food", "Rent"], income=["Salary"])

    assert book.delete(EXPENSE, 1) == "Rent"
    assert book.categories(EXPENSE) == ["Food"]
    with pytest.raises(IndexError):
        book.delete(INCOME, -1)


def test_snapshot_is_a_copy():
    book = CategoryBook(expense=["Food"], income=["Salary"])
    snapshot = book.snapshot()
    snapshot.expense.append("Mutated")

    assert book.categories(EXPENSE) == ["Food"]


def test_relabel_only_touches_matching_type():
    transactions = [
        make_transaction(1.0, type=EXPENSE, category="Other", id="a"),
        make_transaction(2.0, type=INCOME, category="Other", id="b"),
        make_transaction(3.0, type=EXPENSE, category="Food", id="c"),
    ]

    result = relabel(transactions, EXPENSE, "Other", "Misc")

    assert [tx.category for tx in result] == ["Misc", "Other", "Food"]
    assert transactions[0].category == "Other"
