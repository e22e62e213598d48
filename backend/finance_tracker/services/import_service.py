"""
Import service for bringing CSV transactions into a user's store.

Handles:
- Duplicate detection against existing transactions and earlier rows of the same file
- Preview without committing
- Batch commit with a single refresh notification
"""

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from ..schemas.import_schemas import ImportConfig
from .csv_parser import CSVParser, CSVParseResult, ParsedRow
from .finance_data import FinanceData
from .transaction_store import Transaction

logger = logging.getLogger(__name__)


@dataclass
class DuplicateInfo:
    """A parsed row that matches a transaction already recorded."""
    row: ParsedRow
    existing: Transaction


@dataclass
class ImportPreview:
    """Preview of an import batch before committing."""
    batch_id: str
    source_hash: str
    headers: list[str]
    detected_date_format: str | None
    new_rows: list[ParsedRow]
    duplicates: list[DuplicateInfo]
    errors: list[tuple[int, str]]
    short_row_count: int = 0

    @property
    def total_count(self) -> int:
        return len(self.new_rows) + len(self.duplicates) + len(self.errors)

    @property
    def new_count(self) -> int:
        return len(self.new_rows)

    @property
    def duplicate_count(self) -> int:
        return len(self.duplicates)

    @property
    def error_count(self) -> int:
        return len(self.errors)


@dataclass
class ImportResult:
    """Result of committing an import."""
    batch_id: str
    source_hash: str
    committed_count: int
    skipped_count: int
    error_rows: list[tuple[int, str]] = field(default_factory=list)


class ImportService:
    """Service for importing transactions into one user's FinanceData."""

    def __init__(self, finance: FinanceData):
        self.finance = finance

    def preview(self, content: str, config: ImportConfig | None = None) -> ImportPreview:
        """
        Parse ``content`` and sort rows into new, duplicate and error buckets.

        Nothing is written to the store.
        """
        parse_result = CSVParser(config).parse(content)
        return self._classify(parse_result)

    def import_csv(self, content: str, config: ImportConfig | None = None) -> ImportResult:
        """
        Parse, deduplicate and commit ``content``.

        Accepted rows are appended in one batch, which publishes a single
        TRANSACTIONS refresh.
        """
        preview = self.preview(content, config)
        committed = self.finance.transactions.add_many(
            row.transaction for row in preview.new_rows
        )
        skipped = preview.duplicate_count + preview.short_row_count

        logger.info(
            "Import %s for %s: %d committed, %d skipped, %d errors",
            preview.batch_id,
            self.finance.username,
            committed,
            skipped,
            preview.error_count,
        )

        return ImportResult(
            batch_id=preview.batch_id,
            source_hash=preview.source_hash,
            committed_count=committed,
            skipped_count=skipped,
            error_rows=preview.errors,
        )

    def import_file(self, path: Path | str, config: ImportConfig | None = None) -> ImportResult:
        """Import a CSV file from disk. Unreadable files raise OSError."""
        content = Path(path).read_text(encoding="utf-8-sig")
        return self.import_csv(content, config)

    def _classify(self, parse_result: CSVParseResult) -> ImportPreview:
        batch_id = str(uuid.uuid4())[:8]

        existing = self._get_existing_keys()
        new_rows: list[ParsedRow] = []
        duplicates: list[DuplicateInfo] = []

        for row in parse_result.rows:
            key = row.transaction.dedup_key
            if key in existing:
                duplicates.append(DuplicateInfo(row=row, existing=existing[key]))
            else:
                # Later rows of the same file are checked against this one too
                existing[key] = row.transaction
                new_rows.append(row)

        return ImportPreview(
            batch_id=batch_id,
            source_hash=parse_result.source_hash,
            headers=parse_result.headers,
            detected_date_format=parse_result.detected_date_format,
            new_rows=new_rows,
            duplicates=duplicates,
            errors=[(e.line_number, e.reason) for e in parse_result.errors],
            short_row_count=parse_result.short_row_count,
        )

    def _get_existing_keys(self) -> dict[tuple, Transaction]:
        """Dedup keys of every transaction already in the store."""
        return {tx.dedup_key: tx for tx in self.finance.transactions}
