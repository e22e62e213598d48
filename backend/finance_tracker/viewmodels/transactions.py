from collections.abc import Iterable, Mapping
from typing import Any

from ..services.refresh_bus import RefreshType
from ..services.transaction_store import Transaction
from .base import ViewModel


class TransactionsViewModel(ViewModel):
    """Backs the transaction list: current rows, category choices and edits."""

    refresh_types = (RefreshType.TRANSACTIONS,)

    def __init__(self, finance):
        super().__init__(finance)
        self.search = ""
        self.category: str | None = None
        self.transactions: list[Transaction] = []
        self.reload()

    def reload(self) -> None:
        self.transactions = self.finance.transactions.filter(self.search, self.category)

    def set_filter(self, search: str | None = None, category: str | None = None) -> None:
        self.search = search or ""
        self.category = category
        self.reload()
        self.notify_changed()

    def categories(self) -> list[str]:
        return sorted(self.finance.transactions.categories())

    def add(self, record: Transaction | Mapping[str, Any]) -> bool:
        return self.finance.transactions.add(record)

    def delete(self, indices: Iterable[int]) -> bool:
        return self.finance.transactions.delete(indices)
