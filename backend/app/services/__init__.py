# Services package init
"""
Contacts API — Services Layer
==============================

What:  Data-access and business rules sitting between routes (HTTP) and the
       database (persistence).

Service Inventory:
    - ContactAccessor (abstract): Interface the route handlers depend on
    - ContactService: SQLAlchemy implementation of ContactAccessor
    - validation: Named field rules run before every contact write

Why services are separate from routes:
    1. Testability: The accessor is tested against SQLite without HTTP
    2. Replaceability: Handlers accept any ContactAccessor (tests use a fake)
    3. Reusability: The seeder writes through the same rules as the API
"""
