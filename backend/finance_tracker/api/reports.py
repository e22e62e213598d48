from fastapi import APIRouter, Depends

from ..schemas import (
    CategorySpendItem,
    DailyTotalItem,
    DailyReportResponse,
    MonthlySpendItem,
    SummaryResponse,
)
from ..services.aggregation import ZERO
from ..session import FinanceSession
from .deps import get_finance_session

router = APIRouter()


@router.get("/categories", response_model=list[CategorySpendItem])
def spending_by_category(session: FinanceSession = Depends(get_finance_session)):
    """Income, expense and budget per category, sorted by name."""
    with session.lock:
        finance = session.finance
        expenses = finance.category_expenses()
        incomes = finance.category_incomes()
        budgets = finance.category_budgets()

    categories = sorted(set(expenses) | set(incomes) | set(budgets))
    return [
        CategorySpendItem(
            category=category,
            income=incomes.get(category, ZERO),
            expense=expenses.get(category, ZERO),
            budget=budgets.get(category, ZERO),
        )
        for category in categories
    ]


@router.get("/daily", response_model=DailyReportResponse)
def daily_totals(session: FinanceSession = Depends(get_finance_session)):
    with session.lock:
        finance = session.finance
        incomes = finance.daily_incomes()
        expenses = finance.daily_expenses()
        return DailyReportResponse(
            days=[
                DailyTotalItem(
                    date=day,
                    income=incomes.get(day, ZERO),
                    expense=expenses.get(day, ZERO),
                )
                for day in finance.dates()
            ],
            monthly_budget=finance.monthly_budget,
            daily_budget=finance.daily_budget(),
        )


@router.get("/monthly", response_model=list[MonthlySpendItem])
def monthly_totals(session: FinanceSession = Depends(get_finance_session)):
    with session.lock:
        totals = session.finance.monthly_totals()
    return [
        MonthlySpendItem(year=year, month=month, income=income, expense=expense)
        for (year, month), (income, expense) in totals.items()
    ]


@router.get("/summary", response_model=SummaryResponse)
def summary(session: FinanceSession = Depends(get_finance_session)):
    with session.lock:
        finance = session.finance
        return SummaryResponse(
            transaction_count=len(finance.transactions),
            start_date=finance.start_date(),
            end_date=finance.end_date(),
            total_income=finance.total_income(),
            total_expenses=finance.total_expenses(),
            total_savings=finance.total_savings(),
            overall_budget_percentage=finance.overall_budget_percentage(),
        )
