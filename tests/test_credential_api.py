"""Tests for credential issuance endpoints."""
import pytest
from httpx import AsyncClient

from credential_issuance.interaction.description import PNG_DATA_URI_PREFIX
from credential_issuance.interaction.pipeline import get_descriptor_assembler
from tests.conftest import RecordingEngine

BASE = "/api/v1/credential-issuance"


def assert_description(data: dict) -> None:
    assert set(data) == {"id", "jwt", "qr"}
    assert data["jwt"]
    assert data["qr"].startswith(PNG_DATA_URI_PREFIX)


@pytest.mark.asyncio
async def test_request(client: AsyncClient, engine: RecordingEngine):
    response = await client.post(f"{BASE}/request", json={"types": ["ProofOfAge"]})

    assert response.status_code == 200
    data = response.json()
    assert_description(data)
    assert data["id"] == "token-1"
    _, requirements, _ = engine.calls[0]
    assert requirements[0].type == "ProofOfAgeCredential"


@pytest.mark.asyncio
async def test_request_unknown_type(client: AsyncClient, engine: RecordingEngine):
    response = await client.post(
        f"{BASE}/request", json={"types": ["ProofOfAge", "NotAType", "ProofOfEmail"]}
    )

    assert response.status_code == 400
    assert "NotAType" in response.json()["detail"]
    assert engine.calls == []


@pytest.mark.asyncio
async def test_request_missing_types(client: AsyncClient):
    response = await client.post(f"{BASE}/request", json={})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_offer(client: AsyncClient, engine: RecordingEngine):
    response = await client.post(f"{BASE}/offer", json={"types": ["DrivingLicence"]})

    assert response.status_code == 200
    assert_description(response.json())
    _, offers, _ = engine.calls[0]
    assert offers[0].type == "DrivingLicenceCredential"


@pytest.mark.asyncio
async def test_offer_unknown_type(client: AsyncClient, engine: RecordingEngine):
    response = await client.post(f"{BASE}/offer", json={"types": ["unknown-type"]})

    assert response.status_code == 400
    assert "unknown-type" in response.json()["detail"]
    assert engine.calls == []


@pytest.mark.asyncio
async def test_custom_offer(client: AsyncClient, engine: RecordingEngine):
    body = [
        {
            "name": "n",
            "type": "t",
            "schema": "s",
            "claims": {"age": "33"},
            "renderAs": "claim",
            "display": {
                "title": {"path": ["age"]},
                "properties": [
                    {"path": ["missing"], "label": "Missing"},
                    {"text": "Literal", "label": "Text"},
                ],
            },
        }
    ]

    response = await client.post(f"{BASE}/offer/custom", json=body)

    assert response.status_code == 200
    assert_description(response.json())
    _, offers, _ = engine.calls[0]
    display = offers[0].display
    assert display.title.value == "33"
    assert [p.value for p in display.properties] == [None, "Literal"]
    assert [p.label for p in display.properties] == ["Missing", "Text"]


@pytest.mark.asyncio
async def test_custom_offer_non_ascii_index(client: AsyncClient, engine: RecordingEngine):
    body = [
        {
            "type": "t",
            "schema": "s",
            "claims": {"l": ["a", "b", "c"]},
            "renderAs": "claim",
            "display": {"title": {"path": ["l", "²"], "text": "fb"}},
        }
    ]

    response = await client.post(f"{BASE}/offer/custom", json=body)

    assert response.status_code == 200
    _, offers, _ = engine.calls[0]
    assert offers[0].display.title.value == "fb"


@pytest.mark.asyncio
async def test_custom_offer_invalid_render_as(client: AsyncClient, engine: RecordingEngine):
    body = [{"type": "t", "schema": "s", "claims": {}, "renderAs": "invalid"}]

    response = await client.post(f"{BASE}/offer/custom", json=body)

    assert response.status_code == 400
    assert "renderAs" in response.json()["detail"]
    assert engine.calls == []


@pytest.mark.asyncio
async def test_custom_offer_missing_schema(client: AsyncClient, engine: RecordingEngine):
    body = [{"type": "t", "renderAs": "document"}]

    response = await client.post(f"{BASE}/offer/custom", json=body)

    assert response.status_code == 400
    assert "schema" in response.json()["detail"]
    assert engine.calls == []


@pytest.mark.asyncio
async def test_encoding_failure_is_server_error(client: AsyncClient, make_assembler):
    from credential_issuance.main import app

    engine = RecordingEngine(jwt="x" * 5000)
    app.dependency_overrides[get_descriptor_assembler] = lambda: make_assembler(engine)

    response = await client.post(f"{BASE}/request", json={"types": ["ProofOfAge"]})

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal error encoding interaction token"


@pytest.mark.asyncio
async def test_list_types(client: AsyncClient):
    response = await client.get(f"{BASE}/types")

    assert response.status_code == 200
    data = response.json()
    assert "ProofOfAge" in data["request"]
    assert "DrivingLicence" in data["offer"]
    assert data["request"] == sorted(data["request"])


@pytest.mark.asyncio
async def test_unknown_route(client: AsyncClient):
    response = await client.get("/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"detail": "Not found"}
