"""
Transaction records and the ordered store that owns them.

Handles:
- Structural validation of raw transaction input
- Insertion-ordered storage with index-based deletion
- Description/category filtering
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from ..errors import ValidationError
from .refresh_bus import RefreshBus

CENTS = Decimal("0.01")
# Largest magnitude accepted; keeps stored cents within a 64-bit integer
MAX_AMOUNT = Decimal("1000000000000")

# Formats accepted for timestamps given as text
TIMESTAMP_FORMATS = [
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d",
]

# Category filter values meaning "any category"
CATEGORY_WILDCARDS = {"", "*"}


def to_amount(value: Any, field_name: str = "amount") -> Decimal:
    """Convert ``value`` to a Decimal rounded to cents, or raise ValidationError."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be numeric, got {value!r}")
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} must be numeric, got {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be finite, got {value!r}")
    if abs(amount) >= MAX_AMOUNT:
        raise ValidationError(f"{field_name} is out of range, got {value!r}")
    return amount.quantize(CENTS)


def to_timestamp(value: Any) -> datetime:
    """Convert ``value`` to a datetime, or raise ValidationError."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        for fmt in TIMESTAMP_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
    raise ValidationError(f"Unparsable timestamp: {value!r}")


@dataclass(frozen=True)
class Transaction:
    """
    A single income or expense.

    Negative amounts are expenses, positive amounts are income. ``cleared``
    marks a reconciled transaction.
    """
    timestamp: datetime
    description: str
    category: str
    amount: Decimal
    cleared: bool = False

    @classmethod
    def create(
        cls,
        timestamp: Any,
        description: str | None,
        category: str | None,
        amount: Any,
        cleared: bool = False,
    ) -> "Transaction":
        """Build a transaction from raw values, validating each field."""
        category = (category or "").strip()
        if not category:
            raise ValidationError("category must not be empty")
        return cls(
            timestamp=to_timestamp(timestamp),
            description=(description or "").strip(),
            category=category,
            amount=to_amount(amount),
            cleared=bool(cleared),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Transaction":
        return cls.create(
            timestamp=data.get("timestamp", data.get("date")),
            description=data.get("description"),
            category=data.get("category"),
            amount=data.get("amount"),
            cleared=data.get("cleared", False),
        )

    @property
    def date(self) -> date:
        return self.timestamp.date()

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    @property
    def is_income(self) -> bool:
        return self.amount >= 0

    @property
    def dedup_key(self) -> tuple[date, str, Decimal]:
        """Key used by the importer to recognise an already-recorded transaction."""
        return (self.date, self.description, self.amount)


def _coerce(record: Transaction | Mapping[str, Any]) -> Transaction:
    if isinstance(record, Transaction):
        # Re-run validation so hand-built instances obey the same rules
        return Transaction.create(
            record.timestamp,
            record.description,
            record.category,
            record.amount,
            record.cleared,
        )
    if isinstance(record, Mapping):
        return Transaction.from_mapping(record)
    raise ValidationError(f"Not a transaction record: {record!r}")


class TransactionStore:
    """Ordered collection of one user's transactions."""

    def __init__(self, bus: RefreshBus, transactions: Iterable[Transaction] = ()):
        self.bus = bus
        self._transactions: list[Transaction] = list(transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._transactions))

    def __getitem__(self, index: int) -> Transaction:
        return self._transactions[index]

    def all(self) -> list[Transaction]:
        return list(self._transactions)

    def add(self, record: Transaction | Mapping[str, Any]) -> bool:
        """Append one transaction. Raises ValidationError if the record is malformed."""
        self._transactions.append(_coerce(record))
        self.bus.refresh_transactions()
        return True

    def add_many(self, records: Iterable[Transaction | Mapping[str, Any]]) -> int:
        """
        Append a batch with a single notification.

        Every record is validated before anything is appended, so a bad record
        leaves the store untouched.
        """
        batch = [_coerce(record) for record in records]
        if not batch:
            return 0
        self._transactions.extend(batch)
        self.bus.refresh_transactions()
        return len(batch)

    def delete(self, indices: Iterable[int]) -> bool:
        """Remove transactions by position. Out-of-range indices are ignored."""
        removed = False
        # Highest first so earlier removals don't shift later positions
        for index in sorted(set(indices), reverse=True):
            if 0 <= index < len(self._transactions):
                del self._transactions[index]
                removed = True
        if removed:
            self.bus.refresh_transactions()
        return removed

    def filter(
        self,
        description_substring: str | None = None,
        category: str | None = None,
    ) -> list[Transaction]:
        """Transactions whose description contains the text and whose category matches."""
        needle = (description_substring or "").lower()
        any_category = category is None or category in CATEGORY_WILDCARDS

        return [
            tx for tx in self._transactions
            if needle in tx.description.lower()
            and (any_category or tx.category == category)
        ]

    def categories(self) -> set[str]:
        return {tx.category for tx in self._transactions}

    def replace(self, transactions: Iterable[Transaction]) -> None:
        """Swap in a loaded set of transactions without notifying listeners."""
        self._transactions = list(transactions)
