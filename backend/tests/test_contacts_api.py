"""
Contacts API — HTTP Endpoint Tests
===================================

What:  End-to-end tests of the /contacts routes through the ASGI app.
Why:   Verifies the wire contract: paths, status codes, camelCase bodies,
       `_id`, headers, and error bodies.
How:   HTTPX AsyncClient over ASGITransport; the app is wired to the real
       ContactService on a per-test SQLite database.
"""

import uuid

import pytest


async def _create(client, payload) -> str:
    response = await client.post("/contacts", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["_id"]


class TestCreateContact:

    @pytest.mark.asyncio
    async def test_create_then_fetch(self, test_client, contact_payload):
        response = await test_client.post("/contacts", json=contact_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["_id"]
        assert body["message"] == "Contact created successfully"

        fetched = await test_client.get(f"/contacts/{body['_id']}")
        assert fetched.status_code == 200
        record = fetched.json()
        assert record["_id"] == body["_id"]
        for field, value in contact_payload.items():
            assert record[field] == value
        assert "createdAt" in record
        assert "updatedAt" in record
        assert "revision" not in record

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, test_client, contact_payload):
        await _create(test_client, contact_payload)
        contact_payload["email"] = "John@Example.com"

        response = await test_client.post("/contacts", json=contact_payload)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert response.json()["message"] == "Email already exists"

    @pytest.mark.asyncio
    async def test_missing_field_rejected(self, test_client, contact_payload):
        del contact_payload["birthday"]
        response = await test_client.post("/contacts", json=contact_payload)
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert "birthday" in body["details"]["errors"]

    @pytest.mark.asyncio
    async def test_missing_name_uses_rule_message(self, test_client, contact_payload):
        del contact_payload["firstName"]
        response = await test_client.post("/contacts", json=contact_payload)
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "First name is required"
        assert body["details"]["errors"] == {"firstName": "First name is required"}

    @pytest.mark.asyncio
    async def test_null_name_uses_rule_message(self, test_client, contact_payload):
        contact_payload["firstName"] = None
        response = await test_client.post("/contacts", json=contact_payload)
        assert response.status_code == 400
        assert response.json()["message"] == "First name is required"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("birthday", ["01/01/1990", "1990-13-01", 0, 19900101, True])
    async def test_bad_birthday_rejected(self, test_client, contact_payload, birthday):
        contact_payload["birthday"] = birthday
        response = await test_client.post("/contacts", json=contact_payload)
        assert response.status_code == 400
        assert response.json()["message"] == "Birthday must be a valid date (YYYY-MM-DD)"
        assert (await test_client.get("/contacts")).json() == []

    @pytest.mark.asyncio
    async def test_long_values_accepted(self, test_client, contact_payload):
        contact_payload["favoriteColor"] = "Deep ocean blue with silver flecks " * 3
        contact_payload["lastName"] = "D" * 250

        contact_id = await _create(test_client, contact_payload)

        record = (await test_client.get(f"/contacts/{contact_id}")).json()
        assert record["favoriteColor"] == "Deep ocean blue with silver flecks " * 3
        assert record["lastName"] == "D" * 250

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, test_client, contact_payload):
        contact_payload["lastName"] = "   "
        response = await test_client.post("/contacts", json=contact_payload)
        assert response.status_code == 400
        assert response.json()["message"] == "Last name is required"

    @pytest.mark.asyncio
    async def test_malformed_email_rejected(self, test_client, contact_payload):
        contact_payload["email"] = "john.example.com"
        response = await test_client.post("/contacts", json=contact_payload)
        assert response.status_code == 400
        assert response.json()["message"] == "Please enter a valid email"

    @pytest.mark.asyncio
    async def test_malformed_json_rejected(self, test_client):
        response = await test_client.post(
            "/contacts",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestGetContact:

    @pytest.mark.asyncio
    async def test_invalid_id_is_400(self, test_client):
        response = await test_client.get("/contacts/not-a-valid-id")
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_identifier"

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, test_client):
        response = await test_client.get(f"/contacts/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_read_cache_header(self, test_client, contact_payload):
        contact_id = await _create(test_client, contact_payload)
        response = await test_client.get(f"/contacts/{contact_id}")
        assert response.headers["Cache-Control"] == "private, max-age=5"


class TestListContacts:

    @pytest.mark.asyncio
    async def test_empty(self, test_client):
        response = await test_client.get("/contacts")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_projection_and_filter(self, test_client, contact_payload):
        await _create(test_client, contact_payload)
        await _create(test_client, {
            "firstName": "Jane",
            "lastName": "Smith",
            "email": "jane@example.com",
            "favoriteColor": "Green",
            "birthday": "1985-05-15",
        })

        response = await test_client.get("/contacts", params={"color": "Blue"})

        assert response.status_code == 200
        assert response.json() == [{
            "firstName": "John",
            "lastName": "Doe",
            "email": "john@example.com",
            "favoriteColor": "Blue",
        }]
        assert response.headers["Cache-Control"] == "private, max-age=5"

    @pytest.mark.asyncio
    async def test_limit(self, test_client, contact_payload):
        for i in range(3):
            contact_payload["email"] = f"john{i}@example.com"
            await _create(test_client, contact_payload)

        response = await test_client.get("/contacts", params={"limit": 1})

        assert response.status_code == 200
        assert len(response.json()) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", ["0", "101", "ten"])
    async def test_bad_limit_is_400(self, test_client, limit):
        response = await test_client.get("/contacts", params={"limit": limit})
        assert response.status_code == 400
        assert "limit" in response.json()["details"]["errors"]


class TestUpdateContact:

    @pytest.mark.asyncio
    async def test_partial_update(self, test_client, contact_payload):
        contact_id = await _create(test_client, contact_payload)

        response = await test_client.put(f"/contacts/{contact_id}", json={"favoriteColor": "Green"})

        assert response.status_code == 200
        assert response.json() == {"message": "Contact updated successfully"}
        record = (await test_client.get(f"/contacts/{contact_id}")).json()
        assert record["favoriteColor"] == "Green"
        assert record["firstName"] == "John"
        assert record["email"] == "john@example.com"
        assert record["birthday"] == "1990-01-01"

    @pytest.mark.asyncio
    async def test_null_field_rejected(self, test_client, contact_payload):
        contact_id = await _create(test_client, contact_payload)
        response = await test_client.put(f"/contacts/{contact_id}", json={"firstName": None})
        assert response.status_code == 400
        assert response.json()["message"] == "First name is required"

    @pytest.mark.asyncio
    async def test_numeric_birthday_rejected(self, test_client, contact_payload):
        contact_id = await _create(test_client, contact_payload)
        response = await test_client.put(f"/contacts/{contact_id}", json={"birthday": 0})
        assert response.status_code == 400
        assert response.json()["message"] == "Birthday must be a valid date (YYYY-MM-DD)"
        record = (await test_client.get(f"/contacts/{contact_id}")).json()
        assert record["birthday"] == "1990-01-01"

    @pytest.mark.asyncio
    async def test_empty_body_rejected(self, test_client, contact_payload):
        contact_id = await _create(test_client, contact_payload)
        response = await test_client.put(f"/contacts/{contact_id}", json={})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, test_client, contact_payload):
        contact_id = await _create(test_client, contact_payload)
        response = await test_client.put(f"/contacts/{contact_id}", json={"phone": "555"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_id(self, test_client):
        response = await test_client.put("/contacts/xyz", json={"favoriteColor": "Red"})
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_identifier"

    @pytest.mark.asyncio
    async def test_unknown_id(self, test_client):
        response = await test_client.put(f"/contacts/{uuid.uuid4()}", json={"favoriteColor": "Red"})
        assert response.status_code == 404


class TestDeleteContact:

    @pytest.mark.asyncio
    async def test_delete_then_get(self, test_client, contact_payload):
        contact_id = await _create(test_client, contact_payload)

        response = await test_client.delete(f"/contacts/{contact_id}")

        assert response.status_code == 204
        assert response.content == b""
        assert (await test_client.get(f"/contacts/{contact_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown(self, test_client):
        response = await test_client.delete(f"/contacts/{uuid.uuid4()}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_invalid_id(self, test_client):
        response = await test_client.delete("/contacts/42")
        assert response.status_code == 400


class TestServiceRoutes:

    @pytest.mark.asyncio
    async def test_index(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 200
        assert response.text == "Welcome to the Contacts API - try /contacts"

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["docs"] is True
        assert body["environment"] == "test"

    @pytest.mark.asyncio
    async def test_openapi_document(self, test_client):
        response = await test_client.get("/api-docs.json")
        assert response.status_code == 200
        spec = response.json()
        assert spec["info"]["title"] == "Contacts API"
        assert "/contacts" in spec["paths"]
        assert "/contacts/{contact_id}" in spec["paths"]
        assert "securitySchemes" not in spec.get("components", {})

    @pytest.mark.asyncio
    async def test_swagger_ui(self, test_client):
        response = await test_client.get("/api-docs")
        assert response.status_code == 200
        assert "swagger" in response.text.lower()

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/contacts", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/contacts")
        assert response.headers["X-Request-ID"]
