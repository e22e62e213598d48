from fastapi import APIRouter, Depends

from ..schemas.import_schemas import (
    CSVImportRequest,
    CSVPreviewResponse,
    ImportedRowResponse,
    RowErrorResponse,
    ImportResultResponse,
)
from ..services.csv_parser import ParsedRow, detect_mapping
from ..services.import_service import ImportService
from ..session import FinanceSession
from .deps import get_finance_session

router = APIRouter()


def _row_response(row: ParsedRow) -> ImportedRowResponse:
    tx = row.transaction
    return ImportedRowResponse(
        line_number=row.line_number,
        timestamp=tx.timestamp,
        description=tx.description,
        category=tx.category,
        amount=tx.amount,
    )


@router.post("/csv/preview", response_model=CSVPreviewResponse)
def preview_csv_import(
    request: CSVImportRequest,
    session: FinanceSession = Depends(get_finance_session),
):
    """
    Parse a CSV file and preview the import.

    Returns the rows that would be added, rows already recorded, per-line
    errors and a column mapping guessed from the header row.
    """
    with session.lock:
        preview = ImportService(session.finance).preview(request.content, request.config)

    suggested = detect_mapping(preview.headers) if request.config.has_header and preview.headers else None

    return CSVPreviewResponse(
        headers=preview.headers,
        source_hash=preview.source_hash,
        batch_id=preview.batch_id,
        detected_date_format=preview.detected_date_format,
        suggested_config=suggested,
        new_rows=[_row_response(row) for row in preview.new_rows],
        duplicates=[_row_response(dup.row) for dup in preview.duplicates],
        errors=[RowErrorResponse(line_number=n, reason=r) for n, r in preview.errors],
        total_count=preview.total_count,
        new_count=preview.new_count,
        duplicate_count=preview.duplicate_count,
        error_count=preview.error_count,
    )


@router.post("/csv", response_model=ImportResultResponse)
def import_csv(
    request: CSVImportRequest,
    session: FinanceSession = Depends(get_finance_session),
):
    """Import a CSV file. Duplicates are skipped and bad lines reported."""
    with session.lock:
        result = ImportService(session.finance).import_csv(request.content, request.config)
        if result.committed_count:
            session.save()

    return ImportResultResponse(
        batch_id=result.batch_id,
        source_hash=result.source_hash,
        committed_count=result.committed_count,
        skipped_count=result.skipped_count,
        error_rows=[RowErrorResponse(line_number=n, reason=r) for n, r in result.error_rows],
    )
