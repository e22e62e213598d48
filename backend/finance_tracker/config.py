import json
import logging
import os
import re
from decimal import Decimal
from pathlib import Path
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from .errors import StorageError

logger = logging.getLogger(__name__)

# Data directory: FINANCE_TRACKER_DATA_DIR env var if set (e.g. /data in Docker),
# otherwise fall back to ~/.local/share/finance-tracker for local dev
_data_dir = os.environ.get("FINANCE_TRACKER_DATA_DIR")
DATA_DIR = Path(_data_dir) if _data_dir else Path.home() / ".local" / "share" / "finance-tracker"

BOOK_FILENAME = "finance.db"
SETTINGS_FILENAME = "settings.json"

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class UserSettings(BaseModel):
    """Preferences a user edits on the settings page."""
    email: str = ""
    currency_code: str = "USD"
    currency_symbol: str = "$"
    budget_alerts_enabled: bool = True
    transaction_alerts_enabled: bool = True
    budget_warning_threshold: Decimal = Field(Decimal("90"), ge=0)  # percent of budget used


def validate_username(username: str) -> str:
    """Reject usernames that could escape the data directory."""
    if not username or not USERNAME_PATTERN.match(username) or username in {".", ".."}:
        raise StorageError(f"Invalid username: {username!r}")
    return username


def user_dir(username: str, data_dir: Path | None = None) -> Path:
    """Directory holding one user's book and settings."""
    return (data_dir or DATA_DIR) / "users" / validate_username(username)


def ensure_user_dir(username: str, data_dir: Path | None = None) -> Path:
    """Ensure the user's directory exists."""
    path = user_dir(username, data_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def load_user_settings(username: str, data_dir: Path | None = None) -> UserSettings:
    """Load a user's settings, falling back to defaults when missing or unreadable."""
    settings_file = user_dir(username, data_dir) / SETTINGS_FILENAME
    if not settings_file.exists():
        return UserSettings()

    try:
        with open(settings_file, "r") as f:
            return UserSettings(**json.load(f))
    except (json.JSONDecodeError, TypeError, PydanticValidationError):
        logger.warning("Ignoring unreadable settings file %s", settings_file)
        return UserSettings()


def save_user_settings(username: str, settings: UserSettings, data_dir: Path | None = None) -> None:
    """Save a user's settings."""
    settings_file = ensure_user_dir(username, data_dir) / SETTINGS_FILENAME
    with open(settings_file, "w") as f:
        json.dump(settings.model_dump(mode="json"), f, indent=2)
