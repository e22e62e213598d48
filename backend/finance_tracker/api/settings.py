from fastapi import APIRouter, Depends

from ..config import UserSettings
from ..session import FinanceSession
from .deps import get_finance_session

router = APIRouter()


@router.get("", response_model=UserSettings)
def get_settings(session: FinanceSession = Depends(get_finance_session)):
    return session.settings


@router.put("", response_model=UserSettings)
def update_settings(data: UserSettings, session: FinanceSession = Depends(get_finance_session)):
    """Save the user's settings and notify listeners."""
    with session.lock:
        session.update_settings(data)
        return session.settings
