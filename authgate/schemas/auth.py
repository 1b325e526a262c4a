"""Pydantic schemas for the login endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Login credentials.

    Field contents are deliberately not format-checked: a malformed email
    must fail exactly like an unknown one.
    """

    email: str = Field(..., description="Account email used as the login identifier.")
    password: str = Field(..., description="Plaintext password.")

    def __repr__(self) -> str:
        return f"LoginRequest(email={self.email!r}, password='***')"


class UserPublic(BaseModel):
    """Authenticated account, without credential material."""

    id: str = Field(..., description="Account identifier.")
    email: str = Field(..., description="Account email.")
    name: str | None = Field(default=None, description="Display name, if set.")
    avatar: str | None = Field(default=None, description="Avatar URL, if set.")
