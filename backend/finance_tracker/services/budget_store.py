from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from ..errors import ValidationError
from . import aggregation
from .refresh_bus import RefreshBus
from .transaction_store import TransactionStore, to_amount

DEFAULT_MONTHLY_BUDGET = Decimal("4000.00")


def _budget_amount(value: Any, field_name: str) -> Decimal:
    amount = to_amount(value, field_name)
    if amount < 0:
        raise ValidationError(f"{field_name} must not be negative, got {amount}")
    return amount


def _category_name(category: str | None) -> str:
    return (category or "").strip()


class BudgetStore:
    """Per-category monthly limits plus the overall monthly budget."""

    def __init__(
        self,
        bus: RefreshBus,
        transactions: TransactionStore,
        category_budgets: Mapping[str, Decimal] | None = None,
        monthly_budget: Decimal = DEFAULT_MONTHLY_BUDGET,
    ):
        self.bus = bus
        self.transactions = transactions
        self._budgets: dict[str, Decimal] = dict(category_budgets or {})
        self._monthly_budget = monthly_budget

    @property
    def monthly_budget(self) -> Decimal:
        return self._monthly_budget

    def set_monthly_budget(self, amount: Any) -> None:
        self._monthly_budget = _budget_amount(amount, "monthly budget")
        self.bus.refresh_budgets()

    def category_budgets(self) -> dict[str, Decimal]:
        return dict(self._budgets)

    def set_category_budget(self, category: str, amount: Any) -> None:
        """Create or update the limit for ``category``."""
        category = _category_name(category)
        if not category:
            raise ValidationError("category must not be empty")
        self._budgets[category] = _budget_amount(amount, "budget")
        self.bus.refresh_budgets()

    def get_category_budget(self, category: str) -> Decimal:
        return self._budgets.get(_category_name(category), aggregation.ZERO)

    def delete_category_budget(self, category: str) -> bool:
        category = _category_name(category)
        if category not in self._budgets:
            return False
        del self._budgets[category]
        self.bus.refresh_budgets()
        return True

    def category_percentage(self, category: str) -> Decimal:
        category = _category_name(category)
        expense = aggregation.category_expenses(self.transactions).get(category, aggregation.ZERO)
        return aggregation.budget_percentage(expense, self.get_category_budget(category))

    def overall_budget_percentage(self) -> Decimal:
        return aggregation.overall_budget_percentage(self.transactions, self._budgets)

    def replace(self, category_budgets: Mapping[str, Decimal], monthly_budget: Decimal) -> None:
        """Swap in loaded budgets without notifying listeners."""
        self._budgets = dict(category_budgets)
        self._monthly_budget = monthly_budget
