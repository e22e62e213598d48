from .transaction import (
    TransactionCreate,
    TransactionResponse,
    DeleteTransactionsRequest,
    DeleteTransactionsResponse,
)
from .import_schemas import (
    ImportConfig,
    CSVImportRequest,
    CSVPreviewResponse,
    ImportedRowResponse,
    RowErrorResponse,
    ImportResultResponse,
)
from .report import (
    CategorySpendItem,
    DailyTotalItem,
    DailyReportResponse,
    MonthlySpendItem,
    SummaryResponse,
)
from .budget import (
    CategoryBudgetUpdate,
    MonthlyBudgetUpdate,
    CategoryBudgetItem,
    BudgetWarningItem,
    BudgetSummaryResponse,
)
from .user import (
    RegisterRequest,
    LoginRequest,
    AvailabilityResponse,
    RegisterResponse,
)

__all__ = [
    "TransactionCreate",
    "TransactionResponse",
    "DeleteTransactionsRequest",
    "DeleteTransactionsResponse",
    "ImportConfig",
    "CSVImportRequest",
    "CSVPreviewResponse",
    "ImportedRowResponse",
    "RowErrorResponse",
    "ImportResultResponse",
    "CategorySpendItem",
    "DailyTotalItem",
    "DailyReportResponse",
    "MonthlySpendItem",
    "SummaryResponse",
    "CategoryBudgetUpdate",
    "MonthlyBudgetUpdate",
    "CategoryBudgetItem",
    "BudgetWarningItem",
    "BudgetSummaryResponse",
    "RegisterRequest",
    "LoginRequest",
    "AvailabilityResponse",
    "RegisterResponse",
]
