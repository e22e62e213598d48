from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..errors import AuthenticationError
from ..schemas import LoginRequest
from ..session import SessionRegistry
from .deps import get_registry, require_valid_username

router = APIRouter()


class SessionResponse(BaseModel):
    username: str
    transaction_count: int


@router.post("", response_model=SessionResponse)
def open_session(
    data: LoginRequest,
    username: str = Depends(require_valid_username),
    registry: SessionRegistry = Depends(get_registry),
):
    """Log in and open the user's session."""
    try:
        session = registry.login(username, data.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=403, detail=str(e))

    with session.lock:
        return SessionResponse(username=username, transaction_count=len(session.finance.transactions))


@router.delete("", status_code=204)
def close_session(username: str, registry: SessionRegistry = Depends(get_registry)):
    """Save the book and end the session."""
    if not registry.close(username):
        raise HTTPException(status_code=404, detail=f"No open session for {username}")
