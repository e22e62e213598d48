"""
CSV parsing service with configurable column mappings.

Supports:
- Explicit or auto-detected date formats
- Amount cells with currency symbols, thousands separators and parentheses negatives
- Sign inference from an income/expense type column
- Header-based mapping suggestions
"""

import csv
import hashlib
import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from io import StringIO
from typing import Iterable

from ..errors import ConfigurationError, ParseError, ValidationError
from ..schemas.import_schemas import ImportConfig
from .transaction_store import CENTS, Transaction

UNCATEGORIZED = "Uncategorized"

# Common date formats to try for auto-detection
DATE_FORMATS = [
    "%Y-%m-%d",           # 2024-01-15
    "%Y-%m-%d %H:%M:%S",  # 2024-01-15 09:30:00
    "%Y-%m-%d %H:%M",     # 2024-01-15 09:30
    "%Y/%m/%d",           # 2024/01/15
    "%m/%d/%Y",           # 01/15/2024
    "%m/%d/%Y %H:%M:%S",  # 01/15/2024 09:30:00
    "%m-%d-%Y",           # 01-15-2024
    "%d/%m/%Y",           # 15/01/2024
    "%d-%m-%Y",           # 15-01-2024
    "%m/%d/%y",           # 01/15/24
    "%b %d, %Y",          # Jan 15, 2024
    "%d %b %Y",           # 15 Jan 2024
]

EXPORT_HEADER = ["Date", "Description", "Category", "Amount", "Cleared"]

# Cell values read as "cleared" by cleared_column
CLEARED_VALUES = {"true", "yes", "y", "1", "x", "cleared", "reconciled"}

# Optional sign and currency symbol around a plain or comma-grouped number
AMOUNT_PATTERN = re.compile(
    r"^(?P<sign>[+-]?)\s*(?:[^\w\s.,()+-]+\s*)?(?P<inner_sign>[+-]?)\s*"
    r"(?P<number>\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?|\.\d+)"
    r"\s*(?:[^\w\s.,()+-]+)?$"
)


@dataclass
class ParsedRow:
    """A CSV row that became a transaction."""
    line_number: int
    transaction: Transaction
    raw: list[str] = field(default_factory=list)


@dataclass
class RowError:
    line_number: int
    reason: str


@dataclass
class CSVParseResult:
    """Result of parsing a CSV file."""
    headers: list[str]
    source_hash: str
    rows: list[ParsedRow]
    errors: list[RowError] = field(default_factory=list)
    short_row_count: int = 0
    row_count: int = 0
    detected_date_format: str | None = None


class CSVParser:
    """
    Parser for CSV transaction files.

    Each data row is either turned into a Transaction or reported as a
    RowError; a bad row never stops the rest of the file.
    """

    def __init__(self, config: ImportConfig | None = None):
        self.config = config or ImportConfig()
        self._detected_date_format: str | None = None
        self._income_ids = _normalize_identifiers(self.config.income_identifiers)
        self._expense_ids = _normalize_identifiers(self.config.expense_identifiers)

    def parse(self, content: str) -> CSVParseResult:
        """Parse CSV content and return structured rows and per-line errors."""
        content = content.lstrip("\ufeff")
        reader = csv.reader(StringIO(content), delimiter=self.config.delimiter)

        headers: list[str] = []
        rows: list[ParsedRow] = []
        errors: list[RowError] = []
        short_rows = 0
        row_count = 0
        skipped_leading = 0

        for row in reader:
            line_number = reader.line_num

            if skipped_leading < self.config.skip_rows:
                skipped_leading += 1
                continue

            if _is_blank(row):
                continue

            if self.config.has_header and not headers:
                headers = [h.strip() for h in row]
                continue

            row_count += 1
            try:
                tx = self.parse_row(row)
            except ConfigurationError as e:
                short_rows += 1
                errors.append(RowError(line_number, str(e)))
                continue
            except (ParseError, ValidationError) as e:
                errors.append(RowError(line_number, str(e)))
                continue

            rows.append(ParsedRow(line_number=line_number, transaction=tx, raw=row))

        if not headers and rows:
            headers = [f"Column {i + 1}" for i in range(len(rows[0].raw))]

        return CSVParseResult(
            headers=headers,
            source_hash=compute_source_hash(content),
            rows=rows,
            errors=errors,
            short_row_count=short_rows,
            row_count=row_count,
            detected_date_format=self._detected_date_format,
        )

    def parse_row(self, row: list[str]) -> Transaction:
        """Turn one split row into a Transaction, or raise ParseError/ConfigurationError."""
        config = self.config

        if len(row) <= config.max_column():
            raise ConfigurationError(
                f"Row has {len(row)} fields, mapping needs column {config.max_column() + 1}"
            )

        timestamp = self._parse_date(row[config.date_column].strip())
        amount = self._apply_sign(parse_amount_string(row[config.amount_column]), row)

        description = ""
        if config.description_column is not None:
            description = row[config.description_column].strip()

        category = ""
        if config.category_column is not None:
            category = row[config.category_column].strip()

        cleared = False
        if config.cleared_column is not None:
            cleared = row[config.cleared_column].strip().lower() in CLEARED_VALUES

        return Transaction.create(
            timestamp=timestamp,
            description=description,
            category=category or UNCATEGORIZED,
            amount=amount,
            cleared=cleared,
        )

    def _parse_date(self, date_str: str) -> datetime:
        """Parse a date string with the configured format, or auto-detect when none is set."""
        if not date_str:
            raise ParseError("Missing date")

        if self.config.date_format:
            try:
                return datetime.strptime(date_str, self.config.date_format)
            except ValueError:
                raise ParseError(
                    f"Could not parse date: {date_str!r} (expected {self.config.date_format})"
                )

        # Try previously detected format
        if self._detected_date_format:
            try:
                return datetime.strptime(date_str, self._detected_date_format)
            except ValueError:
                pass

        for fmt in DATE_FORMATS:
            try:
                result = datetime.strptime(date_str, fmt)
                self._detected_date_format = fmt
                return result
            except ValueError:
                continue

        raise ParseError(f"Could not parse date: {date_str!r}")

    def _apply_sign(self, amount: Decimal, row: list[str]) -> Decimal:
        """Apply the sign policy from the configuration."""
        config = self.config

        if config.type_column is not None:
            type_value = row[config.type_column].strip()
            if _matches_identifier(type_value, self._expense_ids):
                return -abs(amount)
            if _matches_identifier(type_value, self._income_ids):
                return abs(amount)
            if config.all_amounts_positive:
                raise ParseError(f"Unrecognized transaction type: {type_value!r}")
            return amount

        return -amount if config.negate_amounts else amount


def parse_amount_string(amount_str: str) -> Decimal:
    """
    Parse an amount string to a Decimal.

    Handles:
    - Currency symbols ($, €, etc.) before or after the number
    - Parentheses for negatives: (100.00)
    - Commas as thousand separators
    - Negative signs

    Anything else in the cell (letters, exponents, stray digits) is a ParseError.
    """
    original = amount_str
    amount_str = amount_str.strip()
    if not amount_str:
        raise ParseError("Missing amount")

    # Check for parentheses (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    match = AMOUNT_PATTERN.match(amount_str)
    if not match or (match["sign"] and match["inner_sign"]):
        raise ParseError(f"Could not parse amount: {original!r}")

    if "-" in (match["sign"], match["inner_sign"]):
        is_negative = not is_negative

    # Remove thousand separators (commas)
    number = match["number"].replace(",", "")

    try:
        amount = Decimal(number).quantize(CENTS)
    except InvalidOperation:
        raise ParseError(f"Could not parse amount: {original!r}")
    return -amount if is_negative else amount


def compute_source_hash(content: str) -> str:
    """Stable fingerprint of a file's content, used to label an import batch."""
    return hashlib.md5(content.encode()).hexdigest()[:16]


def detect_mapping(headers: list[str]) -> ImportConfig:
    """
    Suggest an ImportConfig from header names.

    Unrecognized optional columns stay unmapped; date and amount fall back
    to the first and second column.
    """
    headers_lower = [h.lower().strip() for h in headers]

    def find(patterns: list[str], exclude: tuple[str, ...] = ()) -> int | None:
        for i, h in enumerate(headers_lower):
            if any(p in h for p in patterns) and not any(x in h for x in exclude):
                return i
        return None

    date_col = find(["date", "time", "posted"])
    amount_col = find(["amount", "sum", "value", "total"], exclude=("balance",))
    description_col = find(["desc", "memo", "narration", "payee", "merchant", "details"])
    category_col = find(["categ"])
    type_col = find(["type", "direction", "flow", "inout", "debit/credit"])
    cleared_col = find(["cleared", "reconciled", "status"])

    return ImportConfig(
        date_column=date_col if date_col is not None else 0,
        amount_column=amount_col if amount_col is not None else 1,
        description_column=description_col,
        category_column=category_col,
        type_column=type_col,
        cleared_column=cleared_col,
        date_format=None,
    )


def sanitize_csv_value(value: str) -> str:
    """Prefix values that spreadsheets would evaluate as formulas."""
    if value.startswith(("=", "+", "-", "@", "\t", "\r")):
        return "\t" + value
    return value


def export_csv(transactions: Iterable[Transaction]) -> str:
    """
    Write transactions as CSV: Date, Description, Category, Amount, Cleared.

    Dates carry a time only when it isn't midnight. Read the file back with
    ``ImportConfig.for_export()``.
    """
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for tx in transactions:
        writer.writerow([
            tx.timestamp.strftime("%Y-%m-%d %H:%M:%S") if tx.timestamp.time() != datetime.min.time()
            else tx.date.isoformat(),
            sanitize_csv_value(tx.description),
            sanitize_csv_value(tx.category),
            f"{tx.amount:.2f}",
            "true" if tx.cleared else "false",
        ])
    return output.getvalue()


def _is_blank(row: list[str]) -> bool:
    if not row or all(not cell.strip() for cell in row):
        return True
    return row[0].strip().startswith("//")


def _normalize_identifiers(identifiers: list[str]) -> set[str]:
    return {i.strip().lower() for i in identifiers if i.strip()}


def _matches_identifier(value: str, identifiers: set[str]) -> bool:
    """Exact or substring match, case-insensitive."""
    value = value.lower()
    if not value:
        return False
    return value in identifiers or any(i in value for i in identifiers)
