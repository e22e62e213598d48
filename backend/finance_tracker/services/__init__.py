from .refresh_bus import RefreshBus, RefreshListener, RefreshType
from .transaction_store import Transaction, TransactionStore
from .budget_store import BudgetStore
from .finance_data import FinanceData
from .csv_parser import CSVParser, detect_mapping, export_csv
from .import_service import ImportService, ImportPreview, ImportResult

__all__ = [
    "RefreshBus",
    "RefreshListener",
    "RefreshType",
    "Transaction",
    "TransactionStore",
    "BudgetStore",
    "FinanceData",
    "CSVParser",
    "detect_mapping",
    "export_csv",
    "ImportService",
    "ImportPreview",
    "ImportResult",
]
