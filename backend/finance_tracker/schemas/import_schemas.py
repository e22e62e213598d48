from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, model_validator


DEFAULT_INCOME_IDENTIFIERS = ["Income", "Revenue", "Deposit", "Credit"]
DEFAULT_EXPENSE_IDENTIFIERS = ["Expense", "Withdrawal", "Debit"]


class ImportConfig(BaseModel):
    """
    Column mapping and parsing options for a CSV import.

    Column indices are zero-based. The defaults match the layout the app
    exports: Date, Description, Category, Amount.
    """
    date_column: int = Field(0, ge=0)
    description_column: int | None = Field(1, ge=0)
    category_column: int | None = Field(2, ge=0)
    amount_column: int = Field(3, ge=0)
    type_column: int | None = Field(None, ge=0)  # income/expense indicator column
    cleared_column: int | None = Field(None, ge=0)  # true/yes/1 marks a reconciled row

    has_header: bool = True
    all_amounts_positive: bool = False  # amounts are magnitudes, sign comes from type_column
    negate_amounts: bool = False  # bank exports that show expenses as positive
    delimiter: str = Field(",", min_length=1, max_length=1)
    date_format: str | None = "%Y-%m-%d"  # strptime pattern, None = auto-detect
    skip_rows: int = Field(0, ge=0)

    income_identifiers: list[str] = Field(default_factory=lambda: list(DEFAULT_INCOME_IDENTIFIERS))
    expense_identifiers: list[str] = Field(default_factory=lambda: list(DEFAULT_EXPENSE_IDENTIFIERS))

    @model_validator(mode="after")
    def _type_column_required(self) -> "ImportConfig":
        if self.all_amounts_positive and self.type_column is None:
            raise ValueError("all_amounts_positive requires a type_column")
        return self

    def mapped_columns(self) -> list[int]:
        columns = [
            self.date_column,
            self.description_column,
            self.category_column,
            self.amount_column,
            self.type_column,
            self.cleared_column,
        ]
        return [c for c in columns if c is not None]

    def max_column(self) -> int:
        return max(self.mapped_columns())

    @classmethod
    def for_export(cls) -> "ImportConfig":
        """Mapping that reads back what export_csv writes, timed rows and cleared flag included."""
        return cls(cleared_column=4, date_format=None)


class CSVImportRequest(BaseModel):
    """Request to preview or import CSV content."""
    content: str
    config: ImportConfig = Field(default_factory=ImportConfig)


class ImportedRowResponse(BaseModel):
    """A parsed row ready to become a transaction."""
    line_number: int
    timestamp: datetime
    description: str
    category: str
    amount: Decimal


class RowErrorResponse(BaseModel):
    line_number: int
    reason: str


class CSVPreviewResponse(BaseModel):
    """Response from CSV preview."""
    headers: list[str]
    source_hash: str
    batch_id: str
    detected_date_format: str | None
    suggested_config: ImportConfig | None = None
    new_rows: list[ImportedRowResponse]
    duplicates: list[ImportedRowResponse]
    errors: list[RowErrorResponse]
    total_count: int
    new_count: int
    duplicate_count: int
    error_count: int


class ImportResultResponse(BaseModel):
    """Response from committing an import."""
    batch_id: str
    source_hash: str
    committed_count: int
    skipped_count: int
    error_rows: list[RowErrorResponse]
