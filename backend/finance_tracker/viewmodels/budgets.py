import logging
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from ..config import UserSettings
from ..services.refresh_bus import RefreshType
from .base import ViewModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BudgetWarning:
    """A budget used at or above the user's warning threshold.

    ``category`` is None for the overall budget.
    """
    category: str | None
    percentage: Decimal


class BudgetWarningListener(Protocol):
    def on_data_changed(self) -> None:
        ...

    def on_budget_warnings(self, warnings: list[BudgetWarning]) -> None:
        ...


class BudgetOverviewViewModel(ViewModel):
    """
    Budget usage summary with threshold warnings.

    After every relevant refresh the warnings are recomputed; when there are
    any and budget alerts are enabled, each listener receives them through
    ``on_budget_warnings``.
    """

    refresh_types = (RefreshType.TRANSACTIONS, RefreshType.BUDGETS, RefreshType.SETTINGS)

    def __init__(self, finance, get_settings: Callable[[], UserSettings]):
        self._get_settings = get_settings
        super().__init__(finance)

    def category_percentages(self) -> dict[str, Decimal]:
        return {
            category: self.finance.category_percentage(category)
            for category in self.finance.category_budgets()
        }

    def overall_percentage(self) -> Decimal:
        return self.finance.overall_budget_percentage()

    def warnings(self) -> list[BudgetWarning]:
        threshold = self._get_settings().budget_warning_threshold
        budgets = self.finance.category_budgets()
        if not budgets:
            return []

        warnings = []
        overall = self.overall_percentage()
        if any(amount > 0 for amount in budgets.values()) and overall >= threshold:
            warnings.append(BudgetWarning(category=None, percentage=overall))
        for category, percentage in self.category_percentages().items():
            if budgets[category] > 0 and percentage >= threshold:
                warnings.append(BudgetWarning(category=category, percentage=percentage))
        return warnings

    def notify_changed(self) -> None:
        super().notify_changed()
        if not self._get_settings().budget_alerts_enabled:
            return

        warnings = self.warnings()
        if not warnings:
            return
        logger.info("%d budget warnings for %s", len(warnings), self.finance.username)
        for listener in list(self._change_listeners):
            listener.on_budget_warnings(warnings)
