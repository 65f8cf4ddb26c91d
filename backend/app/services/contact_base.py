"""
Contacts API — Abstract Contact Accessor Interface
===================================================

What:  Abstract base class defining the data-access contract for contacts.
Why:   Route handlers depend on this interface, not on SQLAlchemy. The app
       factory injects the concrete accessor; tests inject an in-memory one.
How:   ContactService (SQLAlchemy) implements every method. Implementations
       translate backend errors into the app exception hierarchy.
Who:   Called by the contacts route handlers, the health check, and the seeder.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from app.schemas.contact import ContactListItem, ContactResponse


class ContactAccessor(ABC):
    """
    Data-access operations for the contacts collection.

    Contract:
        - Identifiers are passed as strings; malformed ones raise
          InvalidIdentifierError before any query is made
        - Every write runs the rules in app/services/validation.py
        - Backend failures surface as StorageError, never raw driver errors
        - Each call is one independent unit of work (no cross-call transactions)
    """

    @abstractmethod
    async def list(
        self, color: Optional[str] = None, limit: int = 20
    ) -> List[ContactListItem]:
        """
        Return contacts in creation order, optionally filtered by exact
        favorite color, truncated to `limit`.

        Raises:
            StorageError: Query failed
        """
        ...

    @abstractmethod
    async def get_by_id(self, contact_id: str) -> ContactResponse:
        """
        Return the full contact.

        Raises:
            InvalidIdentifierError: `contact_id` is not a valid identifier
            NotFoundError: No contact with that identifier
            StorageError: Query failed
        """
        ...

    @abstractmethod
    async def create(self, fields: Mapping[str, Any]) -> str:
        """
        Validate and insert a contact; return its new identifier.

        Raises:
            ValidationError: Rule violation or email already in use
            StorageError: Insert failed
        """
        ...

    @abstractmethod
    async def update(self, contact_id: str, fields: Mapping[str, Any]) -> ContactResponse:
        """
        Validate and apply a partial update; return the updated contact.

        Raises:
            InvalidIdentifierError, NotFoundError, ValidationError, StorageError
        """
        ...

    @abstractmethod
    async def delete(self, contact_id: str) -> None:
        """
        Remove a contact.

        Raises:
            InvalidIdentifierError, NotFoundError, StorageError
        """
        ...

    @abstractmethod
    async def delete_all(self) -> int:
        """Remove every contact; return how many were removed."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """
        Lightweight connectivity probe for the health check.
        Returns False instead of raising when the backend is unreachable.
        """
        ...
