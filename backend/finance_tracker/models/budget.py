from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class CategoryBudgetRecord(Base):
    """Monthly limit for one category. Category names are unique and case-sensitive."""

    __tablename__ = "category_budgets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<CategoryBudgetRecord(category='{self.category}', amount_cents={self.amount_cents})>"
