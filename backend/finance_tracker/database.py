"""
Per-user book storage.

Each user owns one SQLite file. ``FinanceStorage.load`` builds a FinanceData
from it and ``FinanceStorage.save`` writes the whole FinanceData back in a
single transaction. The book's settings row also holds the user's salted
password hash.
"""

import hashlib
import hmac
import logging
import secrets
from decimal import Decimal
from pathlib import Path
from sqlalchemy import create_engine, delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .config import BOOK_FILENAME, DATA_DIR, ensure_user_dir, user_dir
from .errors import StorageError, ValidationError
from .models import Base, BookSettings, CategoryBudgetRecord, TransactionRecord
from .services.budget_store import DEFAULT_MONTHLY_BUDGET
from .services.finance_data import FinanceData
from .services.refresh_bus import RefreshBus
from .services.transaction_store import CENTS, Transaction

logger = logging.getLogger(__name__)

PASSWORD_ITERATIONS = 200_000


def hash_password(password: str, salt: str | None = None) -> tuple[str, str]:
    """Hash a password with PBKDF2-SHA256. Returns (hash, salt) as hex strings."""
    if salt is None:
        salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), bytes.fromhex(salt), PASSWORD_ITERATIONS)
    return digest.hex(), salt


def verify_password(password: str, salt: str, password_hash: str) -> bool:
    """Check a password against a stored hash and salt."""
    return hmac.compare_digest(hash_password(password, salt)[0], password_hash)


def to_cents(amount: Decimal) -> int:
    return int(amount * 100)


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENTS)


class FinanceStorage:
    """Loads and saves FinanceData books under a data directory."""

    def __init__(self, data_dir: Path | None = None):
        self.data_dir = Path(data_dir) if data_dir else DATA_DIR
        self._engines: dict[str, Engine] = {}

    def book_path(self, username: str) -> Path:
        return ensure_user_dir(username, self.data_dir) / BOOK_FILENAME

    def _session_factory(self, username: str) -> sessionmaker:
        engine = self._engines.get(username)
        if engine is None:
            path = self.book_path(username)
            is_new = not path.exists()
            engine = create_engine(f"sqlite:///{path}", echo=False)
            # Create tables if they don't exist
            Base.metadata.create_all(engine)
            if is_new:
                logger.info("Created book for %s at %s", username, path)
            self._engines[username] = engine
        return sessionmaker(bind=engine)

    # --- Accounts ---

    def _read_credentials(self, username: str) -> tuple[str, str] | None:
        """(hash, salt) of a registered user, or None. Never creates a book."""
        if not (user_dir(username, self.data_dir) / BOOK_FILENAME).exists():
            return None
        try:
            with self._session_factory(username)() as session:
                settings = session.get(BookSettings, 1)
                if settings is None or not settings.password_hash:
                    return None
                return settings.password_hash, settings.password_salt
        except SQLAlchemyError as e:
            raise StorageError(f"Could not read book for {username}: {e}") from e

    def user_exists(self, username: str) -> bool:
        return self._read_credentials(username) is not None

    def register(self, username: str, password: str) -> None:
        """Create a password-protected book for a new user."""
        if not password or not password.strip():
            raise ValidationError("password must not be empty")
        if self.user_exists(username):
            raise ValidationError(f"Username {username!r} is already taken")

        password_hash, salt = hash_password(password)
        try:
            with self._session_factory(username)() as session, session.begin():
                settings = session.get(BookSettings, 1)
                if settings is None:
                    settings = BookSettings(id=1, monthly_budget_cents=to_cents(DEFAULT_MONTHLY_BUDGET))
                    session.add(settings)
                settings.password_hash = password_hash
                settings.password_salt = salt
        except SQLAlchemyError as e:
            raise StorageError(f"Could not write book for {username}: {e}") from e

        logger.info("Registered user %s", username)

    def authenticate(self, username: str, password: str) -> bool:
        credentials = self._read_credentials(username)
        if credentials is None:
            return False
        return verify_password(password, credentials[1], credentials[0])

    # --- Book contents ---

    def load(self, username: str, bus: RefreshBus | None = None) -> FinanceData:
        """Read a user's book. A user without a book gets an empty FinanceData."""
        try:
            with self._session_factory(username)() as session:
                records = session.scalars(
                    select(TransactionRecord).order_by(TransactionRecord.position)
                ).all()
                budgets = session.scalars(
                    select(CategoryBudgetRecord).order_by(CategoryBudgetRecord.position)
                ).all()
                settings = session.get(BookSettings, 1)

                transactions = [
                    Transaction(
                        timestamp=r.timestamp,
                        description=r.description,
                        category=r.category,
                        amount=from_cents(r.amount_cents),
                        cleared=r.is_cleared,
                    )
                    for r in records
                ]
                category_budgets = {b.category: from_cents(b.amount_cents) for b in budgets}
                monthly_budget = (
                    from_cents(settings.monthly_budget_cents) if settings else DEFAULT_MONTHLY_BUDGET
                )
        except SQLAlchemyError as e:
            raise StorageError(f"Could not read book for {username}: {e}") from e

        logger.info("Loaded %d transactions for %s", len(transactions), username)
        return FinanceData(
            username,
            bus=bus,
            transactions=transactions,
            category_budgets=category_budgets,
            monthly_budget=monthly_budget,
        )

    def save(self, username: str, finance: FinanceData) -> None:
        """Rewrite a user's book from ``finance``. Credentials are left as they are."""
        try:
            with self._session_factory(username)() as session, session.begin():
                self._write(session, finance)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not write book for {username}: {e}") from e

        logger.info("Saved %d transactions for %s", len(finance.transactions), username)

    def _write(self, session: Session, finance: FinanceData) -> None:
        session.execute(delete(TransactionRecord))
        session.execute(delete(CategoryBudgetRecord))

        session.add_all(
            TransactionRecord(
                position=i,
                timestamp=tx.timestamp,
                description=tx.description,
                category=tx.category,
                amount_cents=to_cents(tx.amount),
                is_cleared=tx.cleared,
            )
            for i, tx in enumerate(finance.transactions)
        )
        session.add_all(
            CategoryBudgetRecord(position=i, category=category, amount_cents=to_cents(amount))
            for i, (category, amount) in enumerate(finance.category_budgets().items())
        )

        settings = session.get(BookSettings, 1)
        if settings is None:
            settings = BookSettings(id=1, monthly_budget_cents=0)
            session.add(settings)
        settings.monthly_budget_cents = to_cents(finance.monthly_budget)

    def close(self) -> None:
        """Dispose every open engine."""
        for engine in self._engines.values():
            engine.dispose()
        self._engines.clear()
