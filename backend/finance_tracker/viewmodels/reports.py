from datetime import date
from decimal import Decimal

from ..services.refresh_bus import RefreshType
from .base import ViewModel


class CategoryBreakdownViewModel(ViewModel):
    """Spending per category next to each category's budget."""

    refresh_types = (RefreshType.TRANSACTIONS, RefreshType.BUDGETS)

    def category_expenses(self) -> dict[str, Decimal]:
        return self.finance.category_expenses()

    def category_budgets(self) -> dict[str, Decimal]:
        return self.finance.category_budgets()


class TrendReportViewModel(ViewModel):
    """Daily income and expense series with the budget lines drawn over them."""

    refresh_types = (RefreshType.TRANSACTIONS, RefreshType.BUDGETS)

    def dates(self) -> list[date]:
        return self.finance.dates()

    def daily_incomes(self) -> dict[date, Decimal]:
        return self.finance.daily_incomes()

    def daily_expenses(self) -> dict[date, Decimal]:
        return self.finance.daily_expenses()

    def monthly_budget(self) -> Decimal:
        return self.finance.monthly_budget

    def daily_budget(self, today: date | None = None) -> Decimal:
        return self.finance.daily_budget(today)
