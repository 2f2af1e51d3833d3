"""Async HTTP client for the geometry backend (API v2) session endpoints."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Dict, Optional

import httpx

from core import RemoteSession, UploadTicket
from utils.exceptions import TransportFailure


logger = logging.getLogger(__name__)

API_PREFIX = "/api/v2"
UPLOAD_OK_STATUSES = {200, 201}


@dataclass
class FetchedImage:
    """Image bytes downloaded from a post, with the declared content type."""

    url: str
    data: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.data)


def _raise_for_status(response: httpx.Response, url: str) -> None:
    status = response.status_code
    if status in {401, 403}:
        raise TransportFailure("geometry backend auth failed", url=url, status_code=status)
    if status == 429:
        raise TransportFailure("geometry backend quota exceeded", url=url, status_code=status)
    if not response.is_success:
        raise TransportFailure(
            f"geometry backend http {status}: {response.text[:200]}",
            url=url,
            status_code=status,
        )


class GeometryBackendClient:
    """Session-scoped calls against one geometry backend.

    No call is retried: transport errors and non-success statuses raise
    ``TransportFailure`` immediately.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = str(base_url or "").strip().rstrip("/")
        if not self.base_url:
            raise ValueError("geometry backend base_url missing")
        self.timeout_s = float(timeout_s)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "GeometryBackendClient":
        self._http()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_s),
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._http().request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise TransportFailure(f"geometry backend timeout: {method} {url}", url=url) from exc
        except httpx.RequestError as exc:
            raise TransportFailure(f"geometry backend request failed: {exc}", url=url) from exc

    async def _call(self, method: str, path: str, *, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{API_PREFIX}{path}"
        response = await self._send(method, url, json=json)
        _raise_for_status(response, url)
        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportFailure("geometry backend returned invalid JSON", url=url, status_code=response.status_code) from exc
        if not isinstance(payload, dict):
            raise TransportFailure("geometry backend returned a non-object document", url=url, status_code=response.status_code)
        return payload

    async def initialize(self, ticket: str) -> RemoteSession:
        """Open a session for the model behind ``ticket``."""
        payload = await self._call("POST", f"/ticket/{ticket}")
        session = RemoteSession.from_document(payload)
        logger.info(
            "Opened session %s (%d parameters, %d outputs, %d exports)",
            session.session_id,
            len(session.parameters),
            len(session.outputs),
            len(session.exports),
        )
        return session

    async def customize(self, session: RemoteSession, body: Dict[str, Any]) -> RemoteSession:
        payload = await self._call("PUT", f"/session/{session.session_id}/output", json=body)
        return session.apply(payload)

    async def get_output_cache(self, session: RemoteSession, versions: Dict[str, str]) -> RemoteSession:
        payload = await self._call("POST", f"/session/{session.session_id}/output/cache", json=versions)
        return session.apply(payload)

    async def export(self, session: RemoteSession, body: Dict[str, Any]) -> RemoteSession:
        payload = await self._call("PUT", f"/session/{session.session_id}/export", json=body)
        return session.apply(payload)

    async def get_export_cache(self, session: RemoteSession, versions: Dict[str, str]) -> RemoteSession:
        payload = await self._call("POST", f"/session/{session.session_id}/export/cache", json=versions)
        return session.apply(payload)

    async def request_upload(
        self,
        session: RemoteSession,
        parameter_id: str,
        *,
        content_type: str,
        size: int,
    ) -> UploadTicket:
        """Ask the backend for an upload target for one file parameter."""
        body = {parameter_id: {"format": content_type, "size": int(size)}}
        path = f"/session/{session.session_id}/file/upload"
        payload = await self._call("POST", path, json=body)
        definition = ((payload.get("asset") or {}).get("file") or {}).get(parameter_id) or {}
        href = str(definition.get("href") or "").strip()
        asset_id = str(definition.get("id") or "").strip()
        if not href or not asset_id:
            raise TransportFailure(
                f"upload response carries no target for parameter {parameter_id}",
                url=f"{self.base_url}{API_PREFIX}{path}",
            )
        headers = {str(k): str(v) for k, v in dict(definition.get("headers") or {}).items()}
        return UploadTicket(parameter_id=parameter_id, href=href, asset_id=asset_id, headers=headers)

    async def upload(self, ticket: UploadTicket, data: bytes, content_type: str) -> None:
        headers = {"Content-Type": content_type}
        headers.update(ticket.headers)
        response = await self._send("PUT", ticket.href, content=data, headers=headers)
        if response.status_code not in UPLOAD_OK_STATUSES:
            raise TransportFailure("Could not upload image", url=ticket.href, status_code=response.status_code)
        logger.debug("Uploaded %d bytes for parameter %s", len(data), ticket.parameter_id)

    async def fetch_image(self, url: str) -> FetchedImage:
        response = await self._send("GET", url)
        if not response.is_success:
            raise TransportFailure(f"Could not fetch image from {url}", url=url, status_code=response.status_code)
        content_type = str(response.headers.get("content-type") or "").split(";")[0].strip().lower()
        return FetchedImage(url=url, data=response.content, content_type=content_type)
