from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    email: str = Field(..., description="Email address (must be unique)", max_length=320)
    username: str = Field(..., description="Username (must be unique)", max_length=150)
    password: str = Field(..., description="Plaintext password; only its hash is stored")


class LoginRequest(BaseModel):
    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")


@dataclass(frozen=True)
class CurrentSession:
    """The session resolved for the current request.

    Resolved once per request by the session dependency and handed to the
    handlers that need identity; never mutated.
    """

    token: str
    user_id: uuid.UUID
    username: str
    expires_at: datetime
