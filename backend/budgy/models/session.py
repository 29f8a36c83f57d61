"""Authentication and session models."""
from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class SessionMode(str, Enum):
    """Active data-access mode."""

    ANONYMOUS = "ANONYMOUS"
    AUTHENTICATED = "AUTHENTICATED"
    LOGGED_OUT = "LOGGED_OUT"


class Session(BaseModel):
    """An authenticated session issued by the remote store."""

    user_id: str = Field(..., description="Remote identity")
    email: str
    access_token: str = ""
    refresh_token: Optional[str] = None
    user_metadata: Dict[str, Any] = Field(default_factory=dict)


class Credentials(BaseModel):
    """Email/password credentials."""

    email: str
    password: str


class SignUpRequest(BaseModel):
    """Account registration request."""

    email: str
    password: str
    confirm_password: str
    full_name: str = ""
    gender: str = "Male"


class AuthResponse(BaseModel):
    """Result of a sign-in, sign-up or sign-out action."""

    mode: SessionMode
    user_id: Optional[str] = None
    email: Optional[str] = None
    verification_sent: bool = False
    message: str = ""
