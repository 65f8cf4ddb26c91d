"""
Contacts API — Pydantic Request/Response Schemas
=================================================

What:  Pydantic models defining the API contract for the contacts resource.
Why:   Request parsing, response serialization, and OpenAPI doc generation.
How:   FastAPI validates request bodies against these models and serializes
       responses through them. Fields are snake_case in Python and camelCase
       on the wire (`firstName`, `favoriteColor`, `createdAt`); the
       identifier is exposed as `_id`.

Design Decision:
    Schemas are separate from the SQLAlchemy model because:
    1. We control exactly what data is exposed (the revision marker never is)
    2. The list view is a projection, not the full record
    3. OpenAPI docs are generated from schemas, not from DB models

    Field-level business rules (trimming, non-blank, email shape) live in
    app/services/validation.py so that every write path runs them, not only
    the HTTP one.
"""

import uuid
from datetime import date, datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.services.validation import RuleViolation, check_field


class CamelModel(BaseModel):
    """Base model: camelCase aliases on the wire, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what clients send
# ══════════════════════════════════════════════════════════════════════════


def _birthday(value: Any) -> Any:
    # Pydantic's lax date parsing would take 0 as 1970-01-01; the is_date
    # rule only accepts ISO strings and date objects.
    try:
        return check_field("birthday", value)
    except RuleViolation as violation:
        raise ValueError(violation.message) from violation


IsoDate = Annotated[date, BeforeValidator(_birthday)]


class ContactCreate(CamelModel):
    """
    What:  Body of POST /contacts.
    Why:   All five fields are required; unknown fields are rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "firstName": "John",
                "lastName": "Doe",
                "email": "john@example.com",
                "favoriteColor": "Blue",
                "birthday": "1990-01-01",
            }
        },
    )

    first_name: str = Field(description="Given name (surrounding whitespace is trimmed)")
    last_name: str = Field(description="Family name (surrounding whitespace is trimmed)")
    email: str = Field(description="Email address, unique across contacts (stored lowercase)")
    favorite_color: str = Field(description="Favorite color, free-form")
    birthday: IsoDate = Field(description="Birthday (YYYY-MM-DD)")


class ContactUpdate(CamelModel):
    """
    What:  Body of PUT /contacts/{id}.
    Why:   Any subset of the five fields; omitted fields keep their values.
           A field sent as null is rejected rather than cleared.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        json_schema_extra={"example": {"favoriteColor": "Green"}},
    )

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    favorite_color: Optional[str] = None
    birthday: Optional[IsoDate] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns
# ══════════════════════════════════════════════════════════════════════════


class ContactListItem(CamelModel):
    """
    What:  Listing projection returned by GET /contacts.
    Why:   Name, email and color only; ids and dates stay on the detail view.
    """

    first_name: str
    last_name: str
    email: str
    favorite_color: str


class ContactResponse(CamelModel):
    """
    What:  Full contact returned by GET /contacts/{id}.
    Why:   Every stored field except the internal revision marker.
    """

    id: uuid.UUID = Field(alias="_id", description="Contact identifier")
    first_name: str
    last_name: str
    email: str
    favorite_color: str
    birthday: date
    created_at: datetime = Field(description="When the contact was created (UTC)")
    updated_at: datetime = Field(description="When the contact was last changed (UTC)")


class ContactCreatedResponse(BaseModel):
    """Returned by POST /contacts with HTTP 201."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id", description="Identifier of the new contact")
    message: str = Field(default="Contact created successfully")


class MessageResponse(BaseModel):
    """Returned by PUT /contacts/{id}."""

    message: str


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable code (invalid_identifier, validation_error,
               not_found, server_error, internal_server_error)
        message: Human-readable description
        details: Optional extra context (e.g. per-field validation errors)
        request_id: Correlation ID for tracing this error in server logs
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response. Always served with HTTP 200."""

    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    docs: bool = Field(description="Whether API documentation is being served")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: float = Field(description="Seconds since service started")

