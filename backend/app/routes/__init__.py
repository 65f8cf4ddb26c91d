# Routes package init
"""
Contacts API — API Routes Package
==================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - index.py:     GET    /                  (welcome text)
    - contacts.py:  GET    /contacts          (list, color filter, limit)
                    GET    /contacts/{id}     (single contact)
                    POST   /contacts          (create)
                    PUT    /contacts/{id}     (partial update)
                    DELETE /contacts/{id}     (delete)
    - health.py:    GET    /health            (service health check)

Design Principle:
    Routes are THIN: extract input, call the injected ContactAccessor once,
    shape the response. Validation rules and error translation live in
    the services package; status code mapping lives in main.py.
"""
