"""
Authentication request schemas. Provider payloads are passed through as-is.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    profile: Dict[str, Any] = Field(default_factory=dict, description="Stored as user metadata")


class RefreshSessionRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)
