from datetime import datetime
from sqlalchemy import String, Integer, DateTime, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class TransactionRecord(Base):
    """
    A stored transaction in a user's book.

    Amounts are stored as integer cents to avoid floating point issues.
    Negative amounts = expense, positive amounts = income.
    ``position`` keeps the store's insertion order across save/load.
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    category: Mapped[str] = mapped_column(String(255), nullable=False)
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    # Cleared/reconciled status
    is_cleared: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return (
            f"<TransactionRecord(position={self.position}, timestamp={self.timestamp}, "
            f"amount_cents={self.amount_cents}, category='{self.category}')>"
        )
