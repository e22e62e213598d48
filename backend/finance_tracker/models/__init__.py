from .base import Base
from .transaction import TransactionRecord
from .budget import CategoryBudgetRecord
from .book_settings import BookSettings

__all__ = [
    "Base",
    "TransactionRecord",
    "CategoryBudgetRecord",
    "BookSettings",
]
