"""
Report aggregations over a transaction snapshot.

Every function here is pure: it takes the transactions (and budgets) as they
are right now and derives a fresh result. Nothing is cached, so a report can
never disagree with the store it was computed from.
"""

import calendar
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal

from .transaction_store import CENTS, Transaction

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def category_expenses(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Expense magnitudes summed per category (expenses reported as positive values)."""
    totals: dict[str, Decimal] = {}
    for tx in transactions:
        if tx.is_expense:
            totals[tx.category] = totals.get(tx.category, ZERO) - tx.amount
    return totals


def category_incomes(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = {}
    for tx in transactions:
        if tx.amount > 0:
            totals[tx.category] = totals.get(tx.category, ZERO) + tx.amount
    return totals


def daily_incomes(transactions: Iterable[Transaction]) -> dict[date, Decimal]:
    """Positive amounts summed per calendar day. Days without income are absent."""
    totals: dict[date, Decimal] = {}
    for tx in transactions:
        if tx.amount > 0:
            totals[tx.date] = totals.get(tx.date, ZERO) + tx.amount
    return totals


def daily_expenses(transactions: Iterable[Transaction]) -> dict[date, Decimal]:
    """Expense magnitudes summed per calendar day. Days without expenses are absent."""
    totals: dict[date, Decimal] = {}
    for tx in transactions:
        if tx.is_expense:
            totals[tx.date] = totals.get(tx.date, ZERO) - tx.amount
    return totals


def distinct_dates(transactions: Iterable[Transaction]) -> list[date]:
    """Every calendar day with at least one transaction, ascending."""
    return sorted({tx.date for tx in transactions})


def start_date(transactions: Iterable[Transaction]) -> date | None:
    dates = distinct_dates(transactions)
    return dates[0] if dates else None


def end_date(transactions: Iterable[Transaction]) -> date | None:
    dates = distinct_dates(transactions)
    return dates[-1] if dates else None


def total_income(transactions: Iterable[Transaction]) -> Decimal:
    return sum((tx.amount for tx in transactions if tx.amount > 0), ZERO)


def total_expenses(transactions: Iterable[Transaction]) -> Decimal:
    return sum((-tx.amount for tx in transactions if tx.is_expense), ZERO)


def total_savings(transactions: Iterable[Transaction]) -> Decimal:
    transactions = list(transactions)
    return total_income(transactions) - total_expenses(transactions)


def monthly_totals(transactions: Iterable[Transaction]) -> dict[tuple[int, int], tuple[Decimal, Decimal]]:
    """
    Income and expense per (year, month), in chronological order.

    Returns a dict mapping ``(year, month)`` to ``(income, expense)``, with
    expense as a positive magnitude.
    """
    income: dict[tuple[int, int], Decimal] = {}
    expense: dict[tuple[int, int], Decimal] = {}
    for tx in transactions:
        key = (tx.timestamp.year, tx.timestamp.month)
        income.setdefault(key, ZERO)
        expense.setdefault(key, ZERO)
        if tx.amount > 0:
            income[key] += tx.amount
        elif tx.is_expense:
            expense[key] -= tx.amount

    return {key: (income[key], expense[key]) for key in sorted(income)}


def budget_percentage(expense: Decimal, budget: Decimal) -> Decimal:
    """Share of ``budget`` used by ``expense``, in percent. Zero budget reads as 0%."""
    if budget <= 0:
        return ZERO
    return (expense / budget * HUNDRED).quantize(CENTS)


def overall_budget_percentage(
    transactions: Iterable[Transaction],
    budgets: Mapping[str, Decimal],
) -> Decimal:
    """Total expenses as a percentage of the sum of all category budgets."""
    return budget_percentage(total_expenses(transactions), sum(budgets.values(), ZERO))


def days_in_month(day: date) -> int:
    return calendar.monthrange(day.year, day.month)[1]


def daily_budget(monthly_budget: Decimal, today: date | None = None) -> Decimal:
    """
    Monthly budget spread over the days of the current calendar month.

    Always uses today's month length, not the range of dates being displayed,
    so the daily allowance doesn't move when a report is scrolled.
    """
    today = today or date.today()
    return (monthly_budget / days_in_month(today)).quantize(CENTS)
