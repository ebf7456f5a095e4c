"""Auth schemas for request/response validation."""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Registration payload. Format rules are checked by the auth service."""

    email: str = Field(..., min_length=1, description="Account email")
    password: str = Field(..., min_length=1, description="Plain-text password (min. 8 characters)")
    name: str = Field(..., min_length=1, description="Display name")


class LoginRequest(BaseModel):
    """Login payload."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SessionUser(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    session_id: Optional[str] = Field(default=None, serialization_alias="sessionId")


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    user: SessionUser


class ProfileUser(BaseModel):
    id: str
    email: str
    name: str
    preferences: Dict[str, Any] = Field(default_factory=dict)


class ProfileResponse(BaseModel):
    success: bool = True
    user: ProfileUser
