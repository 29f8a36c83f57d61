"""Derived aggregates over the in-memory transaction set.

Everything here is a pure function of its arguments and is recomputed
whenever the transaction set or the detail filter changes.
"""
from datetime import date
from typing import Dict, List
from budgy.models.summary import CategoryTotal, DetailCategory, DetailView, Financials
from budgy.models.transaction import Transaction, TransactionStatus, TransactionType
from budgy.utils.timestamp import month_bounds, month_start, to_local


def compute_financials(transactions: List[Transaction]) -> Financials:
    """
    Dashboard totals over the entire set (not date-filtered).

    Pending income is not counted anywhere: ``pending`` only tracks upcoming
    expenses.
    """
    income = 0.0
    expense = 0.0
    pending = 0.0

    for tx in transactions:
        if tx.status == TransactionStatus.PENDING:
            if tx.type == TransactionType.EXPENSE:
                pending += tx.amount
        elif tx.type == TransactionType.INCOME:
            income += tx.amount
        elif tx.type == TransactionType.EXPENSE:
            expense += tx.amount

    return Financials(
        income=income,
        expense=expense,
        pending=pending,
        balance=income - expense,
    )


def percent_spent(expense: float, monthly_budget: float) -> float:
    """Share of the monthly budget already spent, in percent. A budget of zero or less reports 0.0."""
    if monthly_budget <= 0:
        return 0.0
    return expense / monthly_budget * 100


def in_month(tx: Transaction, month: date) -> bool:
    """True when the transaction's local date falls inside the calendar month."""
    start, end = month_bounds(month)
    return start <= to_local(tx.date) <= end


def matches_detail_category(tx: Transaction, category: DetailCategory) -> bool:
    if category == DetailCategory.PENDING:
        return tx.status == TransactionStatus.PENDING
    if tx.status != TransactionStatus.COMPLETED:
        return False
    if category == DetailCategory.INCOME:
        return tx.type == TransactionType.INCOME
    return tx.type == TransactionType.EXPENSE


def filter_details(
    transactions: List[Transaction],
    category: DetailCategory,
    month: date,
) -> List[Transaction]:
    """Transactions of the selected month that belong to the selected bucket."""
    return [
        tx for tx in transactions
        if in_month(tx, month) and matches_detail_category(tx, category)
    ]


def detail_total(transactions: List[Transaction]) -> float:
    """Plain sum of amounts, not split by type."""
    return sum(tx.amount for tx in transactions)


def build_detail_view(
    transactions: List[Transaction],
    category: DetailCategory,
    month: date,
) -> DetailView:
    filtered = filter_details(transactions, category, month)
    return DetailView(
        category=category,
        month=month_start(month),
        transactions=filtered,
        total=detail_total(filtered),
    )


def expense_breakdown(transactions: List[Transaction]) -> List[CategoryTotal]:
    """Completed expense totals per category, in first-seen order."""
    totals: Dict[str, float] = {}
    for tx in transactions:
        if tx.type == TransactionType.EXPENSE and tx.status == TransactionStatus.COMPLETED:
            totals[tx.category] = totals.get(tx.category, 0.0) + tx.amount
    return [CategoryTotal(name=name, value=value) for name, value in totals.items()]
