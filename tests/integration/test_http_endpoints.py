"""
Integration tests for FastAPI HTTP endpoints.

The HTTP layer is real; the TMI chatter listing is served by a mock transport.
"""
import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from unittest.mock import AsyncMock, patch

from chatrelay.ingest import chatters as chatters_module
from chatrelay.ingest.chatters import ChattersFetchError
from chatrelay.main import app
from tests.unit.test_utils import json_transport, raw_transport


def _client():
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest_asyncio.fixture
async def tmi_listing(monkeypatch):
    """Install a mocked shared TMI client; returns a setter for its transport."""
    created = []

    def install(transport):
        client = httpx.AsyncClient(transport=transport)
        created.append(client)
        monkeypatch.setattr(chatters_module, "_client", client)

    yield install

    for client in created:
        await client.aclose()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_join_endpoint():
    async with _client() as client:
        response = await client.get("/join/somechannel")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {"status": 200}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_audience_endpoint(tmi_listing, sample_chatters):
    tmi_listing(json_transport(sample_chatters))

    async with _client() as client:
        response = await client.get("/channel/somechannel/audience")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    body = response.json()
    by_name = {viewer["name"]: viewer for viewer in body}
    assert len(body) == 6
    assert by_name["ModPerson"] == {
        "name": "ModPerson",
        "inChat": True,
        "isFollower": True,
        "isMod": True,
    }
    assert by_name["StaffPerson"]["isMod"] is False
    assert by_name["Chatty"]["isMod"] is False


@pytest.mark.integration
@pytest.mark.asyncio
async def test_audience_endpoint_empty_listing(tmi_listing):
    tmi_listing(json_transport({"chatters": {}}))

    async with _client() as client:
        response = await client.get("/channel/quiet/audience")

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.integration
@pytest.mark.asyncio
async def test_audience_endpoint_malformed_body(tmi_listing):
    tmi_listing(raw_transport(b"<html>oops</html>"))

    async with _client() as client:
        response = await client.get("/channel/broken/audience")

    # Failure envelope still travels with HTTP 200
    assert response.status_code == 200
    assert response.json() == {"status": 500}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_audience_endpoint_fetch_error():
    with patch(
        "chatrelay.main.fetch_chatters",
        new=AsyncMock(side_effect=ChattersFetchError("boom")),
    ) as mock_fetch:
        async with _client() as client:
            response = await client.get("/channel/offline/audience")

    mock_fetch.assert_awaited_once_with("offline")
    assert response.status_code == 200
    assert response.json() == {"status": 500}


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/"),
        ("GET", "/nope"),
        ("GET", "/channel/somechannel"),
        ("DELETE", "/health"),
    ],
)
async def test_unknown_routes_return_failure_envelope(method, path):
    async with _client() as client:
        response = await client.request(method, path)

    assert response.status_code == 200
    assert response.json() == {"status": 500}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_health_endpoint():
    async with _client() as client:
        response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "chatrelay"
    assert data["helix_client"] in {"ready", "unavailable"}


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["POST", "PUT", "DELETE"])
async def test_relay_routes_accept_any_method(method, tmi_listing):
    tmi_listing(json_transport({"chatters": {"viewers": ["Solo"]}}))

    async with _client() as client:
        join = await client.request(method, "/join/somechannel")
        audience = await client.request(method, "/channel/somechannel/audience")

    assert join.status_code == 200
    assert join.json() == {"status": 200}
    assert audience.json() == [
        {"name": "Solo", "inChat": True, "isFollower": True, "isMod": False}
    ]
