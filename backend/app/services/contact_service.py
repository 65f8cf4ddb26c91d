"""
Contacts API — Contact Service (SQLAlchemy Accessor)
=====================================================

What:  The data-access layer for contacts: list, get, create, update, delete.
Why:   Keeps every query, validation call, and error translation in one place,
       independent of HTTP concerns.
How:   Each operation opens one session from the injected Database, does a
       single-row unit of work, and commits. SQLAlchemy and driver errors are
       translated into the app exception hierarchy.
Who:   Built by create_app() and the seeder; called by route handlers.

Error Translation:
    malformed id               → InvalidIdentifierError (before any query)
    no row                     → NotFoundError
    rule violation             → ValidationError (from validation.py)
    unique email violation     → ValidationError("Email already exists")
    stale revision on write    → NotFoundError (row deleted concurrently)
    anything else              → StorageError (details logged, not returned)
"""

import logging
import uuid
from typing import Any, List, Mapping, Optional

from sqlalchemy import delete as sa_delete
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from app.database import Database
from app.exceptions import (
    ContactsAPIError,
    InvalidIdentifierError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from app.models.contact import Contact
from app.schemas.contact import ContactListItem, ContactResponse
from app.services.contact_base import ContactAccessor
from app.services.validation import validate_contact

logger = logging.getLogger(__name__)


def parse_contact_id(contact_id: str) -> uuid.UUID:
    """
    Parse a path identifier into a UUID.

    Raises:
        InvalidIdentifierError: Not a syntactically valid UUID
    """
    try:
        return uuid.UUID(str(contact_id))
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdentifierError(identifier=str(contact_id))


def to_response(contact: Contact) -> ContactResponse:
    """Full record view; the revision marker is left out."""
    return ContactResponse(
        id=contact.id,
        first_name=contact.first_name,
        last_name=contact.last_name,
        email=contact.email,
        favorite_color=contact.favorite_color,
        birthday=contact.birthday,
        created_at=contact.created_at,
        updated_at=contact.updated_at,
    )


def _duplicate_email(exc: IntegrityError) -> bool:
    return "email" in str(exc.orig).lower()


class ContactService(ContactAccessor):
    """
    SQLAlchemy implementation of ContactAccessor.

    Stateless apart from the injected Database, so one instance serves
    every request concurrently.
    """

    def __init__(self, database: Database):
        self.database = database

    async def list(
        self, color: Optional[str] = None, limit: int = 20
    ) -> List[ContactListItem]:
        """
        List contacts for the listing view.

        Query plan:
            SELECT first_name, last_name, email, favorite_color FROM contacts
            [WHERE favorite_color = :color] ORDER BY created_at, id LIMIT :limit

        The color comparison is exact (case-sensitive).
        """
        if limit < 1:
            raise ValidationError(message="limit must be a positive integer", field="limit")

        query = select(
            Contact.first_name,
            Contact.last_name,
            Contact.email,
            Contact.favorite_color,
        )
        if color is not None:
            query = query.where(Contact.favorite_color == color)
        query = query.order_by(Contact.created_at, Contact.id).limit(limit)

        try:
            async with self.database.session() as session:
                result = await session.execute(query)
                rows = result.all()
        except Exception as e:
            logger.error("Database error listing contacts: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to fetch contacts",
                context={"error_type": type(e).__name__},
            )

        logger.debug("Listed %d contacts (color=%s, limit=%d)", len(rows), color, limit)
        return [
            ContactListItem(
                first_name=row.first_name,
                last_name=row.last_name,
                email=row.email,
                favorite_color=row.favorite_color,
            )
            for row in rows
        ]

    async def get_by_id(self, contact_id: str) -> ContactResponse:
        uid = parse_contact_id(contact_id)
        try:
            async with self.database.session() as session:
                contact = await session.get(Contact, uid)
                if contact is None:
                    raise NotFoundError(resource="contact", resource_id=str(uid))
                return to_response(contact)
        except ContactsAPIError:
            raise
        except Exception as e:
            logger.error("Database error fetching contact %s: %s", uid, str(e))
            raise StorageError(
                message="Failed to fetch contact",
                context={"contact_id": str(uid), "error_type": type(e).__name__},
            )

    async def create(self, fields: Mapping[str, Any]) -> str:
        """
        Insert a new contact.

        Workflow:
            1. Run every validation rule (full record)
            2. INSERT; id, timestamps and revision are assigned on flush
            3. Commit and return the id as a string

        Duplicate emails are caught by the unique constraint rather than a
        pre-check query, so two concurrent creates cannot both succeed.
        """
        cleaned = validate_contact(fields)
        contact = Contact(**cleaned)

        try:
            async with self.database.session() as session:
                session.add(contact)
                await session.flush()
                new_id = str(contact.id)
        except IntegrityError as e:
            if _duplicate_email(e):
                raise ValidationError(message="Email already exists", field="email")
            logger.error("Integrity error creating contact: %s", str(e))
            raise StorageError(
                message="Failed to create contact",
                context={"error_type": type(e).__name__},
            )
        except Exception as e:
            logger.error("Database error creating contact: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to create contact",
                context={"error_type": type(e).__name__},
            )

        logger.info("Contact created: %s", new_id)
        return new_id

    async def update(self, contact_id: str, fields: Mapping[str, Any]) -> ContactResponse:
        """
        Apply a partial update.

        Fields not present in `fields` are left untouched. The UPDATE is
        guarded by the revision marker, so a row deleted between our read
        and our write is reported as not found instead of resurrected.
        """
        uid = parse_contact_id(contact_id)
        cleaned = validate_contact(fields, partial=True)

        try:
            async with self.database.session() as session:
                contact = await session.get(Contact, uid)
                if contact is None:
                    raise NotFoundError(resource="contact", resource_id=str(uid))
                for name, value in cleaned.items():
                    setattr(contact, name, value)
                await session.flush()
                # Pick up updated_at and revision as written
                await session.refresh(contact)
                updated = to_response(contact)
        except ContactsAPIError:
            raise
        except StaleDataError:
            raise NotFoundError(resource="contact", resource_id=str(uid))
        except IntegrityError as e:
            if _duplicate_email(e):
                raise ValidationError(message="Email already exists", field="email")
            logger.error("Integrity error updating contact %s: %s", uid, str(e))
            raise StorageError(
                message="Failed to update contact",
                context={"contact_id": str(uid), "error_type": type(e).__name__},
            )
        except Exception as e:
            logger.error("Database error updating contact %s: %s", uid, str(e), exc_info=True)
            raise StorageError(
                message="Failed to update contact",
                context={"contact_id": str(uid), "error_type": type(e).__name__},
            )

        logger.info("Contact updated: %s (%s)", uid, ", ".join(sorted(cleaned)))
        return updated

    async def delete(self, contact_id: str) -> None:
        uid = parse_contact_id(contact_id)
        try:
            async with self.database.session() as session:
                contact = await session.get(Contact, uid)
                if contact is None:
                    raise NotFoundError(resource="contact", resource_id=str(uid))
                await session.delete(contact)
        except ContactsAPIError:
            raise
        except StaleDataError:
            raise NotFoundError(resource="contact", resource_id=str(uid))
        except Exception as e:
            logger.error("Database error deleting contact %s: %s", uid, str(e), exc_info=True)
            raise StorageError(
                message="Failed to delete contact",
                context={"contact_id": str(uid), "error_type": type(e).__name__},
            )

        logger.info("Contact deleted: %s", uid)

    async def delete_all(self) -> int:
        try:
            async with self.database.session() as session:
                result = await session.execute(sa_delete(Contact))
                removed = result.rowcount or 0
        except Exception as e:
            logger.error("Database error clearing contacts: %s", str(e), exc_info=True)
            raise StorageError(
                message="Failed to clear contacts",
                context={"error_type": type(e).__name__},
            )
        logger.info("Removed %d contacts", removed)
        return removed

    async def ping(self) -> bool:
        try:
            async with self.database.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False
