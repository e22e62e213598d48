from datetime import date
from decimal import Decimal
from pydantic import BaseModel


class CategorySpendItem(BaseModel):
    category: str
    income: Decimal
    expense: Decimal
    budget: Decimal


class DailyTotalItem(BaseModel):
    date: date
    income: Decimal
    expense: Decimal


class DailyReportResponse(BaseModel):
    days: list[DailyTotalItem]
    monthly_budget: Decimal
    daily_budget: Decimal


class MonthlySpendItem(BaseModel):
    year: int
    month: int
    income: Decimal
    expense: Decimal


class SummaryResponse(BaseModel):
    transaction_count: int
    start_date: date | None
    end_date: date | None
    total_income: Decimal
    total_expenses: Decimal
    total_savings: Decimal
    overall_budget_percentage: Decimal
