from pydantic import BaseModel, Field


# --- Input schemas ---

class RegisterRequest(BaseModel):
    password: str = Field(..., min_length=1)
    email: str = ""


class LoginRequest(BaseModel):
    password: str


# --- Response schemas ---

class AvailabilityResponse(BaseModel):
    username: str
    available: bool


class RegisterResponse(BaseModel):
    username: str
