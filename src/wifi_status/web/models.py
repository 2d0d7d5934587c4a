"""Pydantic models for web API request/response validation."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class ConnectRequest(BaseModel):
    """Request body for joining a network."""

    ssid: str = Field(min_length=1, max_length=32)
    credential: Optional[str] = Field(default=None, max_length=128)

    @field_validator("credential", mode="before")
    @classmethod
    def empty_credential_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty passphrase as an open network."""
        return v or None


class ActionResponse(BaseModel):
    """Response body for a successful action."""

    success: bool = True
    status: Dict[str, Any]
