"""
Contacts API — Sample Data Seeder
==================================

What:  Replaces every contact with a small set of sample contacts.
Why:   Gives a fresh environment something to list and fetch.
How:   Uses the same Database and ContactService as the API, so the seed
       data passes the same validation rules as client input.

Usage:
    python -m app.seed          (or the `contacts-seed` console script)

Exit codes: 0 on success, 1 on any failure.
"""

import asyncio
import logging
import sys
from datetime import date
from typing import Any, Dict, List, Optional

from app.config import Settings, settings as default_settings
from app.database import Database
from app.exceptions import ContactsAPIError
from app.logging_config import setup_logging
from app.services.contact_service import ContactService

logger = logging.getLogger(__name__)

SAMPLE_CONTACTS: List[Dict[str, Any]] = [
    {
        "first_name": "John",
        "last_name": "Doe",
        "email": "john@example.com",
        "favorite_color": "Blue",
        "birthday": date(1990, 1, 1),
    },
    {
        "first_name": "Jane",
        "last_name": "Smith",
        "email": "jane@example.com",
        "favorite_color": "Green",
        "birthday": date(1985, 5, 15),
    },
]


async def seed(config: Optional[Settings] = None) -> List[str]:
    """
    Clear the contacts table and insert SAMPLE_CONTACTS.

    Returns:
        The identifiers of the inserted contacts, in insertion order.
    """
    database = Database(config or default_settings)
    try:
        await database.create_tables()
        logger.info("Connected for seeding")

        contacts = ContactService(database)
        removed = await contacts.delete_all()
        logger.info("Cleared %d existing contacts", removed)

        ids = [await contacts.create(fields) for fields in SAMPLE_CONTACTS]
        logger.info("Added %d sample contacts", len(ids))
        return ids
    finally:
        await database.dispose()


def main() -> int:
    setup_logging(default_settings)
    try:
        asyncio.run(seed())
    except ContactsAPIError as e:
        logger.error("Seeding error: %s | Context: %s", e.message, e.context)
        return 1
    except Exception as e:
        logger.error("Seeding error: %s", str(e), exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
