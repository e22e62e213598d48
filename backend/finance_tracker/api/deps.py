from fastapi import Depends, HTTPException, Request

from ..config import validate_username
from ..errors import StorageError
from ..session import FinanceSession, SessionRegistry


def get_registry(request: Request) -> SessionRegistry:
    """FastAPI dependency for the app's session registry."""
    return request.app.state.sessions


def require_valid_username(username: str) -> str:
    """Path username, or 400 when it could not name a book."""
    try:
        return validate_username(username)
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))


def get_finance_session(
    username: str,
    registry: SessionRegistry = Depends(get_registry),
) -> FinanceSession:
    """FastAPI dependency for the caller's open session."""
    session = registry.get(username)
    if session is None:
        raise HTTPException(status_code=404, detail=f"No open session for {username}")
    return session
