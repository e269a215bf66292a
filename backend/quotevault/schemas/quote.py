"""
QuoteVault Backend - Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models defining the API contract.
How:   FastAPI uses these models to validate request bodies, serialize responses,
       and generate OpenAPI documentation.
Who:   Used by route handlers and QuoteService.

Field names are snake_case in Python and camelCase on the wire
(createdAt, newCredential, ...). Both spellings are accepted on input.

Credential exposure:
    QuoteResponse has no credential field at all, so a sanitized record
    cannot leak it. Only QuoteWithCredentialResponse carries it.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


CAMEL_CASE_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
}


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class QuoteCreate(BaseModel):
    """
    What:  Body of POST /api/v1/quotes.

    Defaults (author, tags) and credential normalization are applied by
    QuoteService, not here; this model only enforces shape and required text.
    """
    title: str = Field(description="The quote itself")
    content: str = Field(description="Explanation or context of the quote")
    author: Optional[str] = Field(default=None, description="Defaults to 'Anonymous'")
    tags: Optional[List[str]] = Field(default=None, description="Defaults to []")
    credential: Optional[str] = Field(
        default=None,
        description="Optional password protecting the quote; blank means none",
    )

    model_config = CAMEL_CASE_CONFIG

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("title is required")
        return stripped

    @field_validator("content")
    @classmethod
    def require_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content is required")
        return v

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return [tag.strip() for tag in v]


class QuoteUpdate(QuoteCreate):
    """
    What:  Body of PUT /api/v1/quotes/{id}.

    `credential` is the value checked against the stored one.
    `new_credential` replaces it only when present in the body; a blank or
    null value clears protection.
    """
    new_credential: Optional[str] = Field(
        default=None,
        description="Replacement credential; omit to keep the current one",
    )

    @property
    def replaces_credential(self) -> bool:
        return "new_credential" in self.model_fields_set


class QuoteDeleteRequest(BaseModel):
    """Optional JSON body of DELETE /api/v1/quotes/{id}."""
    credential: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class QuoteResponse(BaseModel):
    """
    What:  Sanitized quote, returned by every endpoint except the
           include-credential read.
    """
    id: uuid.UUID = Field(description="Unique quote identifier (UUID)")
    title: str
    content: str
    author: str
    tags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    updated_at: datetime = Field(description="Last modification timestamp (UTC)")

    model_config = {**CAMEL_CASE_CONFIG, "from_attributes": True}

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Stores without timezone support (SQLite) hand back naive UTC values."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class QuoteWithCredentialResponse(QuoteResponse):
    """
    What:  Raw quote including its stored credential.
    Who:   GET /api/v1/quotes/{id}?includeCredential=true only.
    """
    credential: Optional[str] = Field(description="Stored credential, null if unprotected")


class MessageResponse(BaseModel):
    """Plain confirmation, e.g. after DELETE or on the root route."""
    message: str


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "unauthorized",
            "message": "Incorrect credential",
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
