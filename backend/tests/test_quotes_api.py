"""
QuoteVault Backend - HTTP Endpoint Tests
=========================================

What:  End-to-end tests of the /api/v1/quotes endpoints and root routes.
How:   HTTPX AsyncClient against a fresh app, backed by a throwaway SQLite
       database (see conftest.py).

What we test:
    ✅ Create defaults and sanitized responses
    ✅ Credential-protected read/update/delete, master override
    ✅ includeCredential bypass
    ✅ 400 for malformed IDs and bodies, 404 for unknown IDs
    ✅ Newest-first listing
"""

from uuid import uuid4

import pytest

from conftest import MASTER_CREDENTIAL

QUOTES_URL = "/api/v1/quotes"


async def create_quote(client, **body):
    payload = {"title": "T1", "content": "C1"}
    payload.update(body)
    response = await client.post(QUOTES_URL, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestRootRoutes:

    @pytest.mark.asyncio
    async def test_welcome_message(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 200
        assert response.json() == {"message": "Welcome to QuoteVault API"}

    @pytest.mark.asyncio
    async def test_health_reports_database(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_header_echoed(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"


class TestCreateQuote:

    @pytest.mark.asyncio
    async def test_create_with_defaults_then_read(self, test_client):
        created = await create_quote(test_client)

        assert created["title"] == "T1"
        assert created["content"] == "C1"
        assert created["author"] == "Anonymous"
        assert created["tags"] == []
        assert "credential" not in created
        assert "createdAt" in created and "updatedAt" in created

        response = await test_client.get(f"{QUOTES_URL}/{created['id']}")
        assert response.status_code == 200
        fetched = response.json()
        for key in ("id", "title", "content", "author", "tags", "createdAt", "updatedAt"):
            assert fetched[key] == created[key]
        assert "credential" not in fetched

    @pytest.mark.asyncio
    async def test_create_keeps_author_and_tags(self, test_client):
        created = await create_quote(test_client, author="Marcus Aurelius", tags=["stoic", " calm "])

        assert created["author"] == "Marcus Aurelius"
        assert created["tags"] == ["stoic", "calm"]

    @pytest.mark.asyncio
    async def test_long_text_fields_accepted(self, test_client):
        title = "t" * 2000
        author = "a" * 600
        credential = "c" * 600

        created = await create_quote(test_client, title=title, author=author, credential=credential)

        assert created["title"] == title
        assert created["author"] == author
        opened = await test_client.get(
            f"{QUOTES_URL}/{created['id']}", params={"credential": credential}
        )
        assert opened.status_code == 200

    @pytest.mark.asyncio
    async def test_whitespace_credential_stored_as_absent(self, test_client):
        created = await create_quote(test_client, credential="   ")

        raw = await test_client.get(
            f"{QUOTES_URL}/{created['id']}", params={"includeCredential": "true"}
        )
        assert raw.json()["credential"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"content": "C1"},
            {"title": "T1"},
            {"title": "   ", "content": "C1"},
            {"title": "T1", "content": ""},
        ],
    )
    async def test_create_missing_required_field(self, test_client, body):
        response = await test_client.post(QUOTES_URL, json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert response.json()["message"]


class TestListQuotes:

    @pytest.mark.asyncio
    async def test_list_newest_first_without_credentials(self, test_client):
        first = await create_quote(test_client, title="first", credential="secret123")
        second = await create_quote(test_client, title="second")

        response = await test_client.get(QUOTES_URL)

        assert response.status_code == 200
        items = response.json()
        assert [item["id"] for item in items] == [second["id"], first["id"]]
        assert all("credential" not in item for item in items)

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get(QUOTES_URL)
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_timestamps_match_create(self, test_client):
        created = await create_quote(test_client)

        listed = (await test_client.get(QUOTES_URL)).json()[0]

        assert listed["createdAt"] == created["createdAt"]
        assert listed["updatedAt"] == created["updatedAt"]

    @pytest.mark.asyncio
    async def test_repeated_requests_never_throttled(self, test_client):
        for _ in range(150):
            response = await test_client.get(QUOTES_URL)
            assert response.status_code == 200


class TestReadQuote:

    @pytest.mark.asyncio
    async def test_protected_quote_credentials(self, test_client):
        created = await create_quote(test_client, credential="secret123")
        url = f"{QUOTES_URL}/{created['id']}"

        missing = await test_client.get(url)
        assert missing.status_code == 401
        assert missing.json()["error"] == "unauthorized"

        wrong = await test_client.get(url, params={"credential": "guess"})
        assert wrong.status_code == 401

        right = await test_client.get(url, params={"credential": "secret123"})
        assert right.status_code == 200
        assert "credential" not in right.json()

        master = await test_client.get(url, params={"credential": MASTER_CREDENTIAL})
        assert master.status_code == 200

    @pytest.mark.asyncio
    async def test_unprotected_quote_ignores_supplied_credential(self, test_client):
        created = await create_quote(test_client)

        response = await test_client.get(
            f"{QUOTES_URL}/{created['id']}", params={"credential": "anything"}
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_include_credential_returns_raw_record(self, test_client):
        created = await create_quote(test_client, credential="secret123")

        response = await test_client.get(
            f"{QUOTES_URL}/{created['id']}", params={"includeCredential": "true"}
        )

        assert response.status_code == 200
        assert response.json()["credential"] == "secret123"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("flag", ["yes", "1", "on", "TRUE", "True", "t"])
    async def test_include_credential_only_for_literal_true(self, test_client, flag):
        created = await create_quote(test_client, credential="secret123")

        response = await test_client.get(
            f"{QUOTES_URL}/{created['id']}", params={"includeCredential": flag}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unrecognized_include_credential_value_ignored(self, test_client):
        created = await create_quote(test_client, credential="secret123")

        response = await test_client.get(
            f"{QUOTES_URL}/{created['id']}",
            params={"includeCredential": "abc", "credential": "secret123"},
        )

        assert response.status_code == 200
        assert "credential" not in response.json()

    @pytest.mark.asyncio
    async def test_unknown_id(self, test_client):
        response = await test_client.get(f"{QUOTES_URL}/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["message"] == "Quote not found"

    @pytest.mark.asyncio
    async def test_malformed_id(self, test_client):
        response = await test_client.get(f"{QUOTES_URL}/not-a-valid-id")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid quote ID"


class TestUpdateQuote:

    @pytest.mark.asyncio
    async def test_update_unprotected(self, test_client):
        created = await create_quote(test_client)

        response = await test_client.put(
            f"{QUOTES_URL}/{created['id']}",
            json={"title": "T2", "content": "C2", "author": "Epictetus", "tags": ["x"]},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "T2"
        assert body["author"] == "Epictetus"
        assert body["tags"] == ["x"]
        assert "credential" not in body

    @pytest.mark.asyncio
    async def test_update_unprotected_ignores_supplied_credential(self, test_client):
        created = await create_quote(test_client)

        response = await test_client.put(
            f"{QUOTES_URL}/{created['id']}",
            json={"title": "T2", "content": "C2", "credential": "not-the-one"},
        )

        assert response.status_code == 200
        assert response.json()["title"] == "T2"

    @pytest.mark.asyncio
    async def test_null_new_credential_clears_protection(self, test_client):
        created = await create_quote(test_client, credential="secret123")
        url = f"{QUOTES_URL}/{created['id']}"

        response = await test_client.put(
            url,
            json={"title": "T1", "content": "C1", "credential": "secret123", "newCredential": None},
        )
        assert response.status_code == 200

        assert (await test_client.get(url)).status_code == 200

    @pytest.mark.asyncio
    async def test_update_protected_requires_credential(self, test_client):
        created = await create_quote(test_client, credential="secret123")
        url = f"{QUOTES_URL}/{created['id']}"

        denied = await test_client.put(url, json={"title": "T2", "content": "C2"})
        assert denied.status_code == 401

        allowed = await test_client.put(
            url, json={"title": "T2", "content": "C2", "credential": "secret123"}
        )
        assert allowed.status_code == 200

        # Credential unchanged when newCredential is omitted
        still_protected = await test_client.get(url)
        assert still_protected.status_code == 401

    @pytest.mark.asyncio
    async def test_blank_new_credential_clears_protection(self, test_client):
        created = await create_quote(test_client, credential="secret123")
        url = f"{QUOTES_URL}/{created['id']}"

        response = await test_client.put(
            url,
            json={"title": "T1", "content": "C1", "credential": "secret123", "newCredential": ""},
        )
        assert response.status_code == 200

        assert (await test_client.get(url)).status_code == 200

    @pytest.mark.asyncio
    async def test_new_credential_replaces_old(self, test_client):
        created = await create_quote(test_client, credential="secret123")
        url = f"{QUOTES_URL}/{created['id']}"

        response = await test_client.put(
            url,
            json={
                "title": "T1",
                "content": "C1",
                "credential": MASTER_CREDENTIAL,
                "newCredential": "rotated",
            },
        )
        assert response.status_code == 200

        assert (await test_client.get(url, params={"credential": "secret123"})).status_code == 401
        assert (await test_client.get(url, params={"credential": "rotated"})).status_code == 200

    @pytest.mark.asyncio
    async def test_update_unknown_and_malformed_id(self, test_client):
        body = {"title": "T1", "content": "C1"}
        assert (await test_client.put(f"{QUOTES_URL}/{uuid4()}", json=body)).status_code == 404
        assert (await test_client.put(f"{QUOTES_URL}/xyz", json=body)).status_code == 400


class TestDeleteQuote:

    @pytest.mark.asyncio
    async def test_delete_unprotected(self, test_client):
        created = await create_quote(test_client)
        url = f"{QUOTES_URL}/{created['id']}"

        response = await test_client.delete(url)

        assert response.status_code == 200
        assert response.json() == {"message": "Quote deleted successfully"}
        assert (await test_client.get(url)).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unprotected_ignores_supplied_credential(self, test_client):
        created = await create_quote(test_client)
        url = f"{QUOTES_URL}/{created['id']}"

        response = await test_client.delete(url, params={"credential": "not-the-one"})

        assert response.status_code == 200
        assert (await test_client.get(url)).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_protected_with_query_credential(self, test_client):
        created = await create_quote(test_client, credential="secret123")
        url = f"{QUOTES_URL}/{created['id']}"

        assert (await test_client.delete(url)).status_code == 401
        assert (await test_client.delete(url, params={"credential": "secret123"})).status_code == 200

    @pytest.mark.asyncio
    async def test_delete_protected_with_body_credential(self, test_client):
        created = await create_quote(test_client, credential="secret123")

        response = await test_client.request(
            "DELETE",
            f"{QUOTES_URL}/{created['id']}",
            json={"credential": "secret123"},
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_delete_with_master_override(self, test_client):
        created = await create_quote(test_client, credential="secret123")

        response = await test_client.delete(
            f"{QUOTES_URL}/{created['id']}", params={"credential": MASTER_CREDENTIAL}
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, test_client):
        response = await test_client.delete(f"{QUOTES_URL}/{uuid4()}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_malformed_id(self, test_client):
        response = await test_client.delete(f"{QUOTES_URL}/12345")
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
