from datetime import date
from decimal import Decimal

from finance_tracker.services import aggregation
from finance_tracker.services.transaction_store import Transaction


def test_category_expenses_and_daily_incomes_worked_example() -> None:
    transactions = [
        Transaction.create("2025-05-23", "Salary", "Income", 1000),
        Transaction.create("2025-05-23", "Groceries", "Food", -100),
    ]

    assert aggregation.category_expenses(transactions) == {"Food": Decimal("100.0")}
    assert aggregation.daily_incomes(transactions) == {date(2025, 5, 23): Decimal("1000.0")}
    assert aggregation.daily_expenses(transactions) == {date(2025, 5, 23): Decimal("100")}


def test_empty_transactions_yield_empty_reports() -> None:
    assert aggregation.category_expenses([]) == {}
    assert aggregation.category_incomes([]) == {}
    assert aggregation.daily_incomes([]) == {}
    assert aggregation.daily_expenses([]) == {}
    assert aggregation.distinct_dates([]) == []
    assert aggregation.start_date([]) is None
    assert aggregation.end_date([]) is None
    assert aggregation.monthly_totals([]) == {}
    assert aggregation.total_savings([]) == Decimal("0")
    assert aggregation.overall_budget_percentage([], {}) == Decimal("0")


def test_finance_data_reports(sample_finance) -> None:
    assert sample_finance.category_expenses() == {
        "Food": Decimal("112.25"),
        "Fun": Decimal("25.50"),
    }
    assert sample_finance.category_incomes() == {"Income": Decimal("1000")}
    assert sample_finance.dates() == [date(2025, 5, 23), date(2025, 5, 24), date(2025, 6, 2)]
    assert sample_finance.start_date() == date(2025, 5, 23)
    assert sample_finance.end_date() == date(2025, 6, 2)
    assert sample_finance.total_income() == Decimal("1000")
    assert sample_finance.total_expenses() == Decimal("137.75")
    assert sample_finance.total_savings() == Decimal("862.25")


def test_days_without_a_kind_are_absent(sample_finance) -> None:
    incomes = sample_finance.daily_incomes()
    expenses = sample_finance.daily_expenses()

    assert date(2025, 5, 24) not in incomes
    assert expenses[date(2025, 5, 24)] == Decimal("25.50")
    assert expenses[date(2025, 6, 2)] == Decimal("12.25")


def test_monthly_totals_in_chronological_order(sample_finance) -> None:
    totals = sample_finance.monthly_totals()

    assert list(totals) == [(2025, 5), (2025, 6)]
    assert totals[(2025, 5)] == (Decimal("1000"), Decimal("125.50"))
    assert totals[(2025, 6)] == (Decimal("0"), Decimal("12.25"))


def test_budget_percentage() -> None:
    assert aggregation.budget_percentage(Decimal("50"), Decimal("200")) == Decimal("25.00")
    assert aggregation.budget_percentage(Decimal("300"), Decimal("200")) == Decimal("150.00")
    assert aggregation.budget_percentage(Decimal("50"), Decimal("0")) == Decimal("0")


def test_daily_budget_uses_the_current_month_length(finance) -> None:
    finance.budgets.set_monthly_budget("3100")

    assert finance.daily_budget(today=date(2025, 1, 15)) == Decimal("100.00")
    assert finance.daily_budget(today=date(2025, 4, 1)) == Decimal("103.33")
    assert aggregation.daily_budget(Decimal("2900"), today=date(2024, 2, 10)) == Decimal("100.00")


def test_reports_follow_store_changes(sample_finance) -> None:
    sample_finance.transactions.add(
        Transaction.create("2025-06-03", "Dinner", "Food", "-7.75")
    )
    assert sample_finance.category_expenses()["Food"] == Decimal("120.00")
