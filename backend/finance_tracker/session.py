"""
User sessions.

A session bundles everything one logged-in user works with: their refresh
bus, their FinanceData, their settings and the view models subscribed to the
bus. Sessions are kept in a registry keyed by username. ``login`` checks the
user's password before a session is opened.
"""

import logging
import threading
from pathlib import Path

from .config import UserSettings, load_user_settings, save_user_settings, validate_username
from .database import FinanceStorage
from .errors import AuthenticationError, StorageError
from .services.refresh_bus import RefreshBus
from .viewmodels import BudgetOverviewViewModel, BudgetWarning, ViewModel

logger = logging.getLogger(__name__)


class FinanceSession:
    def __init__(self, username: str, storage: FinanceStorage):
        self.username = username
        self.storage = storage
        self.bus = RefreshBus()
        self.finance = storage.load(username, bus=self.bus)
        self.settings = load_user_settings(username, storage.data_dir)
        self._view_models: list[ViewModel] = []

        self.budget_overview = self.attach(
            BudgetOverviewViewModel(self.finance, lambda: self.settings)
        )
        self.budget_overview.add_change_listener(self)

    @property
    def lock(self) -> threading.RLock:
        return self.finance.lock

    @property
    def view_models(self) -> list[ViewModel]:
        return list(self._view_models)

    def attach(self, view_model):
        """Track a view model so that closing the session cleans it up."""
        self._view_models.append(view_model)
        return view_model

    # --- Budget overview listener ---

    def on_data_changed(self) -> None:
        pass

    def on_budget_warnings(self, warnings: list[BudgetWarning]) -> None:
        for warning in warnings:
            logger.warning(
                "%s: %s budget at %s%%",
                self.username,
                warning.category or "overall",
                warning.percentage,
            )

    def update_settings(self, settings: UserSettings) -> None:
        self.settings = settings
        save_user_settings(self.username, settings, self.storage.data_dir)
        self.bus.refresh_settings()

    def save(self) -> None:
        self.storage.save(self.username, self.finance)

    def release(self) -> None:
        for view_model in self._view_models:
            view_model.cleanup()
        self._view_models.clear()

    def close(self) -> None:
        """Save the book, then release every view model even if the save failed."""
        try:
            self.save()
        finally:
            self.release()
            logger.info("Closed session for %s", self.username)


class SessionRegistry:
    """Open sessions keyed by username."""

    def __init__(self, data_dir: Path | None = None):
        self.storage = FinanceStorage(data_dir)
        self._sessions: dict[str, FinanceSession] = {}
        self._lock = threading.Lock()

    def __contains__(self, username: str) -> bool:
        return username in self._sessions

    def is_available(self, username: str) -> bool:
        """True when no account exists under ``username``."""
        validate_username(username)
        return not self.storage.user_exists(username)

    def register(self, username: str, password: str, email: str = "") -> None:
        validate_username(username)
        self.storage.register(username, password)
        if email:
            settings = load_user_settings(username, self.storage.data_dir)
            save_user_settings(
                username, settings.model_copy(update={"email": email}), self.storage.data_dir
            )

    def login(self, username: str, password: str) -> FinanceSession:
        """Check the user's password and return their session."""
        validate_username(username)
        if not self.storage.authenticate(username, password):
            logger.warning("Refused login for %s", username)
            raise AuthenticationError("Invalid username or password")
        return self.open(username)

    def open(self, username: str) -> FinanceSession:
        """Return the user's session, loading their book on first use."""
        with self._lock:
            session = self._sessions.get(username)
            if session is None:
                session = FinanceSession(username, self.storage)
                self._sessions[username] = session
                logger.info("Opened session for %s", username)
            return session

    def get(self, username: str) -> FinanceSession | None:
        return self._sessions.get(username)

    def close(self, username: str) -> bool:
        """Save and drop a session. If the save fails the session stays open."""
        session = self._sessions.get(username)
        if session is None:
            return False
        with session.lock:
            session.save()
            with self._lock:
                self._sessions.pop(username, None)
            session.release()
        logger.info("Closed session for %s", username)
        return True

    def close_all(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            with session.lock:
                try:
                    session.close()
                except StorageError:
                    logger.exception("Could not save book for %s on shutdown", session.username)
        self.storage.close()
