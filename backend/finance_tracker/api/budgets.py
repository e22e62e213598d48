from fastapi import APIRouter, Depends, HTTPException

from ..schemas import (
    CategoryBudgetUpdate,
    MonthlyBudgetUpdate,
    CategoryBudgetItem,
    BudgetWarningItem,
    BudgetSummaryResponse,
)
from ..services.aggregation import ZERO
from ..session import FinanceSession
from .deps import get_finance_session

router = APIRouter()


def _build_response(session: FinanceSession) -> BudgetSummaryResponse:
    finance = session.finance
    overview = session.budget_overview
    spent = finance.category_expenses()
    warnings = overview.warnings() if session.settings.budget_alerts_enabled else []

    return BudgetSummaryResponse(
        monthly_budget=finance.monthly_budget,
        daily_budget=finance.daily_budget(),
        overall_percentage=overview.overall_percentage(),
        categories=[
            CategoryBudgetItem(
                category=category,
                budget=budget,
                spent=spent.get(category, ZERO),
                percentage=finance.category_percentage(category),
            )
            for category, budget in finance.category_budgets().items()
        ],
        warnings=[
            BudgetWarningItem(category=w.category, percentage=w.percentage)
            for w in warnings
        ],
    )


@router.get("", response_model=BudgetSummaryResponse)
def get_budgets(session: FinanceSession = Depends(get_finance_session)):
    with session.lock:
        return _build_response(session)


@router.put("/categories/{category}", response_model=BudgetSummaryResponse)
def set_category_budget(
    category: str,
    data: CategoryBudgetUpdate,
    session: FinanceSession = Depends(get_finance_session),
):
    with session.lock:
        session.finance.budgets.set_category_budget(category, data.amount)
        session.save()
        return _build_response(session)


@router.delete("/categories/{category}", status_code=204)
def delete_category_budget(category: str, session: FinanceSession = Depends(get_finance_session)):
    with session.lock:
        if not session.finance.budgets.delete_category_budget(category):
            raise HTTPException(status_code=404, detail="Budget not found")
        session.save()


@router.put("/monthly", response_model=BudgetSummaryResponse)
def set_monthly_budget(
    data: MonthlyBudgetUpdate,
    session: FinanceSession = Depends(get_finance_session),
):
    with session.lock:
        session.finance.budgets.set_monthly_budget(data.amount)
        session.save()
        return _build_response(session)
