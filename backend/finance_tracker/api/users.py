from fastapi import APIRouter, Depends, HTTPException

from ..schemas import AvailabilityResponse, RegisterRequest, RegisterResponse
from ..session import SessionRegistry
from .deps import get_registry, require_valid_username

router = APIRouter()


@router.get("/available", response_model=AvailabilityResponse)
def check_availability(
    username: str = Depends(require_valid_username),
    registry: SessionRegistry = Depends(get_registry),
):
    """Whether a new account can be registered under this username."""
    return AvailabilityResponse(username=username, available=registry.is_available(username))


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(
    data: RegisterRequest,
    username: str = Depends(require_valid_username),
    registry: SessionRegistry = Depends(get_registry),
):
    """Create a password-protected account."""
    if not registry.is_available(username):
        raise HTTPException(status_code=409, detail=f"Username {username} is already taken")
    registry.register(username, data.password, data.email)
    return RegisterResponse(username=username)
