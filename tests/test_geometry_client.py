from __future__ import annotations

import httpx
import pytest

from core import UploadTicket
from geometry.client import GeometryBackendClient
from utils.exceptions import TransportFailure

from conftest import BACKEND_URL, IMAGE_URL, SESSION_ID, TICKET, UPLOAD_URL, FakeBackend


def _client(backend: FakeBackend) -> GeometryBackendClient:
    return GeometryBackendClient(BACKEND_URL, transport=backend.transport())


@pytest.mark.asyncio
async def test_initialize_opens_session(backend: FakeBackend) -> None:
    async with _client(backend) as client:
        session = await client.initialize(TICKET)

    assert session.session_id == SESSION_ID
    assert backend.calls == [("POST", f"{BACKEND_URL}/api/v2/ticket/{TICKET}")]


@pytest.mark.asyncio
async def test_initialize_http_error_raises_transport_failure(backend: FakeBackend) -> None:
    backend.routes[("POST", f"{BACKEND_URL}/api/v2/ticket/{TICKET}")] = lambda request: httpx.Response(500, text="boom")

    async with _client(backend) as client:
        with pytest.raises(TransportFailure) as exc_info:
            await client.initialize(TICKET)

    assert exc_info.value.status_code == 500
    assert "http 500" in str(exc_info.value)


@pytest.mark.asyncio
async def test_auth_failure_is_reported(backend: FakeBackend) -> None:
    backend.routes[("POST", f"{BACKEND_URL}/api/v2/ticket/{TICKET}")] = lambda request: httpx.Response(403)

    async with _client(backend) as client:
        with pytest.raises(TransportFailure) as exc_info:
            await client.initialize(TICKET)

    assert "auth failed" in str(exc_info.value)


@pytest.mark.asyncio
async def test_network_error_raises_transport_failure() -> None:
    def _fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with GeometryBackendClient(BACKEND_URL, transport=httpx.MockTransport(_fail)) as client:
        with pytest.raises(TransportFailure) as exc_info:
            await client.initialize(TICKET)

    assert "request failed" in str(exc_info.value)


@pytest.mark.asyncio
async def test_request_upload_sends_format_and_size(backend: FakeBackend) -> None:
    async with _client(backend) as client:
        session = await client.initialize(TICKET)
        ticket = await client.request_upload(session, "p1", content_type="image/png", size=1234)

    url = f"{BACKEND_URL}/api/v2/session/{SESSION_ID}/file/upload"
    assert backend.bodies[("POST", url)] == [{"p1": {"format": "image/png", "size": 1234}}]
    assert ticket.asset_id == "asset-1"
    assert ticket.href == UPLOAD_URL


@pytest.mark.asyncio
async def test_request_upload_without_target_fails(backend: FakeBackend) -> None:
    url = f"{BACKEND_URL}/api/v2/session/{SESSION_ID}/file/upload"
    backend.routes[("POST", url)] = lambda request: httpx.Response(200, json={"asset": {"file": {}}})

    async with _client(backend) as client:
        session = await client.initialize(TICKET)
        with pytest.raises(TransportFailure):
            await client.request_upload(session, "p1", content_type="image/png", size=10)


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [200, 201])
async def test_upload_accepts_ok_and_created(backend: FakeBackend, status: int) -> None:
    backend.upload_status = status
    ticket = UploadTicket(parameter_id="p1", href=UPLOAD_URL, asset_id="asset-1", headers={"x-amz-acl": "private"})

    async with _client(backend) as client:
        await client.upload(ticket, b"data", "image/png")

    assert backend.count("PUT", UPLOAD_URL) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [204, 403, 500])
async def test_upload_rejects_other_statuses(backend: FakeBackend, status: int) -> None:
    backend.upload_status = status
    ticket = UploadTicket(parameter_id="p1", href=UPLOAD_URL, asset_id="asset-1")

    async with _client(backend) as client:
        with pytest.raises(TransportFailure) as exc_info:
            await client.upload(ticket, b"data", "image/png")

    assert exc_info.value.status_code == status


@pytest.mark.asyncio
async def test_fetch_image_strips_content_type_parameters(backend: FakeBackend) -> None:
    backend.image_type = "Image/PNG; charset=binary"

    async with _client(backend) as client:
        image = await client.fetch_image(IMAGE_URL)

    assert image.content_type == "image/png"
    assert image.size == len(backend.image_bytes)


@pytest.mark.asyncio
async def test_fetch_image_not_found(backend: FakeBackend) -> None:
    async with _client(backend) as client:
        with pytest.raises(TransportFailure) as exc_info:
            await client.fetch_image("https://media.example/missing.png")

    assert exc_info.value.status_code == 404


def test_base_url_is_required() -> None:
    with pytest.raises(ValueError):
        GeometryBackendClient("  ")
