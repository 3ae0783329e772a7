"""
Test API Client Endpoints
"""

import base64
import json

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from datagate.api.deps import get_db, get_upload_disk
from datagate.domain.api_client import LOGO_MAX_LENGTH
from datagate.main import app
from datagate.services import ApiClientService

PNG_URI = "data:image/png;base64," + base64.b64encode(b"\x89PNG\r\n\x1a\nlogo").decode()


@pytest_asyncio.fixture
async def client(db_session, upload_disk):
    """HTTP client bound to the test database and upload disk"""
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_upload_disk] = lambda: upload_disk

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clean up overrides
    app.dependency_overrides = {}


async def _create(client, name, is_active=True):
    resp = await client.post("/api/clients", json={"name": name, "is_active": is_active})
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_create_client(client):
    resp = await client.post("/api/clients", json={"name": "alpha"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "操作成功"
    assert isinstance(body["timestamps"], int)
    assert body["data"]["name"] == "alpha"
    assert body["data"]["client_no"] == "C00000001"
    assert len(body["data"]["app_secret"]) == 24


@pytest.mark.asyncio
async def test_create_client_validation(client):
    """Test request body validation uses the error envelope"""
    resp = await client.post("/api/clients", json={"name": ""})

    assert resp.status_code == 422
    assert resp.json() == {
        "error": {
            "code": "unprocessable_entity",
            "http_code": 422,
            "message": "Request validation failed",
        }
    }


@pytest.mark.asyncio
async def test_get_client_masks_secret(client):
    created = await _create(client, "alpha")

    resp = await client.get(f"/api/clients/{created['id']}")

    assert resp.status_code == 200
    secret = resp.json()["data"]["app_secret"]
    assert secret == created["app_secret"][:4] + "*" * 16 + created["app_secret"][-4:]


@pytest.mark.asyncio
async def test_get_client_not_found(client):
    resp = await client.get("/api/clients/999")

    assert resp.status_code == 404
    assert resp.json() == {
        "error": {"code": "not_found", "http_code": 404, "message": "Client 999 not found"}
    }


@pytest.mark.asyncio
async def test_get_client_by_app_id(client):
    """Test the raw record is returned without the secret"""
    created = await _create(client, "alpha")

    resp = await client.get(f"/api/clients/by-app-id/{created['app_id']}")

    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == created["id"]
    assert "app_secret" not in body

    resp = await client.get("/api/clients/by-app-id/missing")
    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Requested response not found。"


@pytest.mark.asyncio
async def test_list_clients(client):
    """Test listing with a JSON condition"""
    await _create(client, "alpha")
    await _create(client, "beta")
    await _create(client, "alphabet", is_active=False)

    resp = await client.get(
        "/api/clients",
        params={"condition": json.dumps({"name": "alpha", "is_active": True})},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    assert body["data"][0]["name"] == "alpha"
    assert "*" in body["data"][0]["app_secret"]
    assert body["current_page"] == 1
    assert body["last_page"] == 1


@pytest.mark.asyncio
async def test_list_clients_pagination(client):
    for name in ("a", "b", "c"):
        await _create(client, name)

    resp = await client.get(
        "/api/clients",
        params={"page": 2, "per_page": 2, "order_by": "name", "order": "asc"},
    )

    body = resp.json()
    assert [c["name"] for c in body["data"]] == ["c"]
    assert body["total"] == 3
    assert body["last_page"] == 2


@pytest.mark.asyncio
async def test_list_clients_undecodable_condition_is_ignored(client):
    await _create(client, "alpha")

    resp = await client.get("/api/clients", params={"condition": "{not json"})

    assert resp.status_code == 200
    assert resp.json()["total"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("condition", [
    {"is_active": "sometimes"},
    {"owner": "bob"},
])
async def test_list_clients_invalid_condition(client, condition):
    """Test conditions failing validation"""
    resp = await client.get("/api/clients", params={"condition": json.dumps(condition)})

    assert resp.status_code == 422
    error = resp.json()["error"]
    assert error["code"] == "validation_error"
    assert error["message"] == "Invalid search condition"
    assert error["details"]["errors"]


@pytest.mark.asyncio
@pytest.mark.parametrize("params, code", [
    ({"order_by": "secret_sauce"}, "unsortable_attribute"),
    ({"order_by": "app_secret"}, "unsortable_attribute"),
    ({"order": "sideways"}, "unsupported_order"),
])
async def test_list_clients_invalid_order(client, params, code):
    resp = await client.get("/api/clients", params=params)

    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == code


@pytest.mark.asyncio
async def test_list_clients_per_page_limit(client):
    resp = await client.get("/api/clients", params={"per_page": 1001})

    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_update_client(client):
    created = await _create(client, "alpha")

    resp = await client.put(f"/api/clients/{created['id']}", json={"is_active": False})

    assert resp.status_code == 200
    assert resp.json()["data"]["is_active"] is False
    assert resp.json()["data"]["name"] == "alpha"


@pytest.mark.asyncio
async def test_update_client_conflict(client):
    await _create(client, "alpha")
    beta = await _create(client, "beta")

    resp = await client.put(f"/api/clients/{beta['id']}", json={"name": "alpha"})

    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "duplicate_name"


@pytest.mark.asyncio
async def test_update_client_not_found(client):
    resp = await client.put("/api/clients/999", json={"name": "ghost"})

    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_client(client):
    created = await _create(client, "alpha")

    resp = await client.delete(f"/api/clients/{created['id']}")
    assert resp.status_code == 200
    assert resp.json()["message"] == "操作成功"

    resp = await client.delete(f"/api/clients/{created['id']}")
    assert resp.status_code == 404

    resp = await client.get(f"/api/clients/{created['id']}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_rotate_secret(client):
    created = await _create(client, "alpha")

    resp = await client.post(f"/api/clients/{created['id']}/secret")

    assert resp.status_code == 200
    secret = resp.json()["data"]["app_secret"]
    assert secret != created["app_secret"]
    assert "*" not in secret


@pytest.mark.asyncio
async def test_rotate_secret_disabled(client):
    created = await _create(client, "alpha", is_active=False)

    resp = await client.post(f"/api/clients/{created['id']}/secret")

    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "forbidden"


@pytest.mark.asyncio
async def test_upload_logo(client, upload_disk):
    created = await _create(client, "alpha")

    resp = await client.post(f"/api/clients/{created['id']}/logo", json={"image": PNG_URI})

    assert resp.status_code == 200
    logo = resp.json()["data"]["logo"]
    assert logo.startswith("upload/logos/")
    assert logo.endswith(f"_{created['id']}.png")
    assert await upload_disk.exists(logo[len("upload/"):])


@pytest.mark.asyncio
async def test_upload_logo_rejected(client):
    created = await _create(client, "alpha")

    resp = await client.post(
        f"/api/clients/{created['id']}/logo",
        json={"image": "data:image/gif;base64,R0lGODlh"},
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "bad_request"


@pytest.mark.asyncio
async def test_upload_logo_unknown_client(client):
    resp = await client.post("/api/clients/999/logo", json={"image": PNG_URI})

    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_unknown_route(client):
    resp = await client.get("/api/nothing-here")

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "not_found"


@pytest.mark.asyncio
async def test_method_not_allowed(client):
    resp = await client.patch("/api/clients")

    assert resp.status_code == 405
    assert resp.json()["error"] == {
        "code": "method_not_allowed",
        "http_code": 405,
        "message": "Method Not Allowed",
    }


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")

    assert resp.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_upload_logo_too_large(client):
    created = await _create(client, "alpha")
    image = "data:image/png;base64," + "A" * LOGO_MAX_LENGTH

    resp = await client.post(f"/api/clients/{created['id']}/logo", json={"image": image})

    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "unprocessable_entity"


@pytest.mark.asyncio
async def test_upload_logo_client_removed_meanwhile(client, monkeypatch, tmp_path):
    """Test a client deleted during upload gives 404 and leaves no file"""
    created = await _create(client, "alpha")

    async def client_gone(self, id, path):
        return None

    monkeypatch.setattr(ApiClientService, "set_logo", client_gone)

    resp = await client.post(f"/api/clients/{created['id']}/logo", json={"image": PNG_URI})

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "not_found"
    assert list((tmp_path / "upload" / "logos").iterdir()) == []
