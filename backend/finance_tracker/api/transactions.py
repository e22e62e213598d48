from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from ..schemas import (
    TransactionCreate,
    TransactionResponse,
    DeleteTransactionsRequest,
    DeleteTransactionsResponse,
)
from ..services.csv_parser import export_csv
from ..session import FinanceSession
from .deps import get_finance_session

router = APIRouter()


@router.get("", response_model=list[TransactionResponse])
def list_transactions(
    search: str | None = Query(None),
    category: str | None = Query(None),
    session: FinanceSession = Depends(get_finance_session),
):
    """
    Get transactions in store order.

    ``search`` matches a substring of the description (case-insensitive);
    ``category`` must match exactly, with "*" meaning any category.
    """
    with session.lock:
        store = session.finance.transactions
        matched = {id(tx) for tx in store.filter(search, category)}
        return [
            TransactionResponse.from_transaction(i, tx)
            for i, tx in enumerate(store.all())
            if id(tx) in matched
        ]


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    data: TransactionCreate,
    session: FinanceSession = Depends(get_finance_session),
):
    with session.lock:
        store = session.finance.transactions
        store.add(data.model_dump())
        session.save()
        index = len(store) - 1
        return TransactionResponse.from_transaction(index, store[index])


@router.post("/delete", response_model=DeleteTransactionsResponse)
def delete_transactions(
    data: DeleteTransactionsRequest,
    session: FinanceSession = Depends(get_finance_session),
):
    """Delete transactions by index. Unknown indices are ignored."""
    with session.lock:
        store = session.finance.transactions
        removed = store.delete(data.indices)
        if removed:
            session.save()
        return DeleteTransactionsResponse(removed=removed, remaining_count=len(store))


@router.get("/categories", response_model=list[str])
def list_categories(session: FinanceSession = Depends(get_finance_session)):
    with session.lock:
        return sorted(session.finance.transactions.categories())


@router.get("/export")
def export_transactions(session: FinanceSession = Depends(get_finance_session)):
    """Download every transaction as CSV."""
    with session.lock:
        content = export_csv(session.finance.transactions)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{session.username}-transactions.csv"'},
    )
