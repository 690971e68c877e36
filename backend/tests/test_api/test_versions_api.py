from uuid import uuid4

import pytest
import pytest_asyncio


@pytest_asyncio.fixture
async def document_id(test_client, auth_headers) -> str:
    created = await test_client.post(
        "/api/v1/documents",
        json={"title": "A", "content": "<p>one two</p>", "visibility": "private"},
        headers=auth_headers,
    )
    document_id = created.json()["id"]
    await test_client.put(
        f"/api/v1/documents/{document_id}",
        json={"content": "<p>one two three</p>"},
        headers=auth_headers,
    )
    return document_id


@pytest.mark.asyncio
class TestVersionsAPI:
    async def test_list_versions(self, test_client, document_id, author):
        response = await test_client.get(f"/api/v1/documents/{document_id}/versions")

        assert response.status_code == 200
        body = response.json()
        assert body["total_versions"] == 2
        assert body["current_version"] == 2
        assert body["limit"] == 50
        assert [v["version_number"] for v in body["versions"]] == [2, 1]
        assert body["versions"][0]["changed_by"]["name"] == author.name
        assert "content" not in body["versions"][0]

    async def test_list_versions_pagination(self, test_client, document_id):
        response = await test_client.get(
            f"/api/v1/documents/{document_id}/versions", params={"limit": 1, "offset": 1}
        )

        body = response.json()
        assert [v["version_number"] for v in body["versions"]] == [1]

    async def test_limit_is_capped(self, test_client, document_id):
        response = await test_client.get(
            f"/api/v1/documents/{document_id}/versions", params={"limit": 5000}
        )

        assert response.status_code == 200
        assert response.json()["limit"] == 200

    async def test_zero_limit_is_rejected(self, test_client, document_id):
        response = await test_client.get(
            f"/api/v1/documents/{document_id}/versions", params={"limit": 0}
        )

        assert response.status_code == 422

    async def test_list_versions_unknown_document(self, test_client):
        response = await test_client.get(f"/api/v1/documents/{uuid4()}/versions")

        assert response.status_code == 404
        assert response.json()["code"] == "DOCUMENT_NOT_FOUND"

    async def test_get_version(self, test_client, document_id):
        response = await test_client.get(f"/api/v1/documents/{document_id}/versions/1")

        assert response.status_code == 200
        body = response.json()
        assert body["content"] == "<p>one two</p>"
        assert body["change_type"] == "created"
        assert body["word_count"] == 2

    async def test_get_missing_version(self, test_client, document_id):
        response = await test_client.get(f"/api/v1/documents/{document_id}/versions/9")

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "VERSION_NOT_FOUND"
        assert body["version_number"] == 9

    async def test_compare_versions(self, test_client, document_id):
        response = await test_client.get(f"/api/v1/documents/{document_id}/compare/1/2")

        assert response.status_code == 200
        body = response.json()
        assert body["content"]["changed"] is True
        assert body["content"]["word_count_diff"] == 1
        assert body["title"]["changed"] is False

    async def test_restore_version(self, test_client, document_id, auth_headers, mock_redis):
        response = await test_client.post(
            f"/api/v1/documents/{document_id}/restore/1", headers=auth_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["restored_from"] == 1
        assert body["restored_version"]["version_number"] == 3
        assert body["restored_version"]["change_summary"] == "Restored to version 1"
        assert body["document"]["content"] == "<p>one two</p>"
        assert mock_redis.published[-1]["version_number"] == 3

    async def test_restore_missing_version(self, test_client, document_id, auth_headers):
        response = await test_client.post(
            f"/api/v1/documents/{document_id}/restore/42", headers=auth_headers
        )

        assert response.status_code == 404

        history = await test_client.get(f"/api/v1/documents/{document_id}/versions")
        assert history.json()["total_versions"] == 2

    async def test_audit_endpoint_filters_by_entity(self, test_client, document_id):
        response = await test_client.get(
            "/api/v1/audit", params={"entity_type": "DOCUMENT", "entity_id": document_id}
        )

        assert response.status_code == 200
        actions = {entry["action"] for entry in response.json()}
        assert {"CREATE", "UPDATE", "UPDATE_CURRENT_VERSION"} <= actions
        assert all("metadata" in entry for entry in response.json())
