from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field

from ..services.transaction_store import Transaction


class TransactionCreate(BaseModel):
    """Fields for creating a transaction. Validation happens in the store."""
    timestamp: datetime | str
    description: str = ""
    category: str
    amount: Decimal | str
    cleared: bool = False


class TransactionResponse(BaseModel):
    index: int
    timestamp: datetime
    description: str
    category: str
    amount: Decimal
    cleared: bool

    @classmethod
    def from_transaction(cls, index: int, tx: Transaction) -> "TransactionResponse":
        return cls(
            index=index,
            timestamp=tx.timestamp,
            description=tx.description,
            category=tx.category,
            amount=tx.amount,
            cleared=tx.cleared,
        )


class DeleteTransactionsRequest(BaseModel):
    indices: list[int] = Field(default_factory=list)


class DeleteTransactionsResponse(BaseModel):
    removed: bool
    remaining_count: int
