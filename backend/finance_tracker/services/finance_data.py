"""
FinanceData: the per-user aggregate root.

Owns the transaction store and the budget store, both wired to the session's
refresh bus, and exposes the report aggregations computed on demand.
"""

import threading
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal

from . import aggregation
from .budget_store import DEFAULT_MONTHLY_BUDGET, BudgetStore
from .refresh_bus import RefreshBus
from .transaction_store import Transaction, TransactionStore


class FinanceData:
    def __init__(
        self,
        username: str,
        bus: RefreshBus | None = None,
        transactions: Iterable[Transaction] = (),
        category_budgets: Mapping[str, Decimal] | None = None,
        monthly_budget: Decimal = DEFAULT_MONTHLY_BUDGET,
    ):
        self.username = username
        self.bus = bus if bus is not None else RefreshBus()
        self.transactions = TransactionStore(self.bus, transactions)
        self.budgets = BudgetStore(
            self.bus,
            self.transactions,
            category_budgets=category_budgets,
            monthly_budget=monthly_budget,
        )
        # Guards store mutation and publish when served from worker threads
        self.lock = threading.RLock()

    def __repr__(self) -> str:
        return f"<FinanceData(username='{self.username}', transactions={len(self.transactions)})>"

    # --- Report data ---

    def category_expenses(self) -> dict[str, Decimal]:
        return aggregation.category_expenses(self.transactions)

    def category_incomes(self) -> dict[str, Decimal]:
        return aggregation.category_incomes(self.transactions)

    def category_budgets(self) -> dict[str, Decimal]:
        return self.budgets.category_budgets()

    def daily_incomes(self) -> dict[date, Decimal]:
        return aggregation.daily_incomes(self.transactions)

    def daily_expenses(self) -> dict[date, Decimal]:
        return aggregation.daily_expenses(self.transactions)

    def dates(self) -> list[date]:
        return aggregation.distinct_dates(self.transactions)

    def start_date(self) -> date | None:
        return aggregation.start_date(self.transactions)

    def end_date(self) -> date | None:
        return aggregation.end_date(self.transactions)

    def monthly_totals(self) -> dict[tuple[int, int], tuple[Decimal, Decimal]]:
        return aggregation.monthly_totals(self.transactions)

    def total_income(self) -> Decimal:
        return aggregation.total_income(self.transactions)

    def total_expenses(self) -> Decimal:
        return aggregation.total_expenses(self.transactions)

    def total_savings(self) -> Decimal:
        return aggregation.total_savings(self.transactions)

    # --- Budget scalars ---

    @property
    def monthly_budget(self) -> Decimal:
        return self.budgets.monthly_budget

    def daily_budget(self, today: date | None = None) -> Decimal:
        return aggregation.daily_budget(self.budgets.monthly_budget, today)

    def category_percentage(self, category: str) -> Decimal:
        return self.budgets.category_percentage(category)

    def overall_budget_percentage(self) -> Decimal:
        return self.budgets.overall_budget_percentage()
