"""
Contacts API — Contacts Route Handlers
=======================================

What:  CRUD endpoints for /contacts.
Why:   The HTTP face of the contact accessor.
How:   Each handler extracts path/query/body input, calls the injected
       accessor once, and shapes the response. Errors are raised, not
       returned; the global handlers in main.py map them to status codes.

Route Table:
    GET    /contacts         list (color filter, limit)      200
    GET    /contacts/{id}    full record                     200
    POST   /contacts         create                          201
    PUT    /contacts/{id}    partial update                  200
    DELETE /contacts/{id}    delete                          204

Caching Strategy:
    Reads carry a short private Cache-Control (5s). Writes carry none.
"""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query, Request, Response

from app.schemas.contact import (
    ContactCreate,
    ContactCreatedResponse,
    ContactListItem,
    ContactResponse,
    ContactUpdate,
    ErrorResponse,
    MessageResponse,
)
from app.services.contact_base import ContactAccessor

logger = logging.getLogger(__name__)

READ_CACHE_CONTROL = "private, max-age=5"

router = APIRouter(prefix="/contacts", tags=["Contacts"])


def get_contact_accessor(request: Request) -> ContactAccessor:
    """
    FastAPI dependency returning the accessor attached by create_app().

    Tests swap it either by passing their own accessor to create_app() or
    through app.dependency_overrides[get_contact_accessor].
    """
    return request.app.state.contacts


ContactId = Annotated[
    str,
    Path(
        description="Contact identifier (UUID)",
        examples=["3f2c8a54-8a0e-4a63-9b7e-3f1f0c5f2d11"],
    ),
]


@router.get(
    "",
    response_model=List[ContactListItem],
    responses={
        200: {"description": "Contacts matching the filter"},
        400: {"description": "Invalid query parameters", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List contacts",
    description=(
        "Returns contacts in creation order, projected to name, email and favorite "
        "color. Filter by exact favorite color with `color`; cap the result size "
        "with `limit` (default 20, max 100)."
    ),
)
async def list_contacts(
    response: Response,
    color: Optional[str] = Query(
        default=None,
        description="Only contacts whose favoriteColor equals this value (case-sensitive)",
    ),
    limit: int = Query(default=20, ge=1, le=100, description="Maximum number of contacts"),
    contacts: ContactAccessor = Depends(get_contact_accessor),
) -> List[ContactListItem]:
    result = await contacts.list(color=color, limit=limit)
    response.headers["Cache-Control"] = READ_CACHE_CONTROL
    return result


@router.get(
    "/{contact_id}",
    response_model=ContactResponse,
    responses={
        200: {"description": "Full contact record"},
        400: {"description": "Invalid contact ID", "model": ErrorResponse},
        404: {"description": "Contact not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single contact by ID",
)
async def get_contact(
    contact_id: ContactId,
    response: Response,
    contacts: ContactAccessor = Depends(get_contact_accessor),
) -> ContactResponse:
    """
    Args:
        contact_id: Taken as a plain string so a malformed value reaches the
                    accessor and becomes a 400 invalid_identifier, rather
                    than FastAPI's generic UUID parsing error.
    """
    result = await contacts.get_by_id(contact_id)
    response.headers["Cache-Control"] = READ_CACHE_CONTROL
    return result


@router.post(
    "",
    status_code=201,
    response_model=ContactCreatedResponse,
    responses={
        201: {"description": "Contact created"},
        400: {"description": "Validation failed or email already exists", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a contact",
    description="All five fields are required. Email must be unique (case-insensitive).",
)
async def create_contact(
    payload: ContactCreate,
    contacts: ContactAccessor = Depends(get_contact_accessor),
) -> ContactCreatedResponse:
    new_id = await contacts.create(payload.model_dump())
    return ContactCreatedResponse(id=new_id, message="Contact created successfully")


@router.put(
    "/{contact_id}",
    response_model=MessageResponse,
    responses={
        200: {"description": "Contact updated"},
        400: {"description": "Invalid contact ID or validation failed", "model": ErrorResponse},
        404: {"description": "Contact not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a contact",
    description="Send any subset of the fields; omitted fields keep their current values.",
)
async def update_contact(
    payload: ContactUpdate,
    contact_id: ContactId,
    contacts: ContactAccessor = Depends(get_contact_accessor),
) -> MessageResponse:
    # exclude_unset: only fields the client actually sent, explicit nulls included
    await contacts.update(contact_id, payload.model_dump(exclude_unset=True))
    return MessageResponse(message="Contact updated successfully")


@router.delete(
    "/{contact_id}",
    status_code=204,
    response_class=Response,
    responses={
        204: {"description": "Contact deleted"},
        400: {"description": "Invalid contact ID", "model": ErrorResponse},
        404: {"description": "Contact not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a contact",
)
async def delete_contact(
    contact_id: ContactId,
    contacts: ContactAccessor = Depends(get_contact_accessor),
) -> Response:
    await contacts.delete(contact_id)
    return Response(status_code=204)
