from decimal import Decimal
from pydantic import BaseModel


# --- Input schemas ---

class CategoryBudgetUpdate(BaseModel):
    amount: Decimal | str


class MonthlyBudgetUpdate(BaseModel):
    amount: Decimal | str


# --- Response schemas ---

class CategoryBudgetItem(BaseModel):
    category: str
    budget: Decimal
    spent: Decimal
    percentage: Decimal


class BudgetWarningItem(BaseModel):
    category: str | None  # None for the overall budget
    percentage: Decimal


class BudgetSummaryResponse(BaseModel):
    monthly_budget: Decimal
    daily_budget: Decimal
    overall_percentage: Decimal
    categories: list[CategoryBudgetItem]
    warnings: list[BudgetWarningItem]
