from .base import ChangeListener, ViewModel
from .budgets import BudgetOverviewViewModel, BudgetWarning, BudgetWarningListener
from .reports import CategoryBreakdownViewModel, TrendReportViewModel
from .transactions import TransactionsViewModel

__all__ = [
    "ChangeListener",
    "ViewModel",
    "BudgetOverviewViewModel",
    "BudgetWarning",
    "BudgetWarningListener",
    "CategoryBreakdownViewModel",
    "TrendReportViewModel",
    "TransactionsViewModel",
]
