from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest


BACKEND_URL = "https://backend.example"
IMAGE_URL = "https://media.example/img.png"
UPLOAD_URL = "https://upload.example/asset-1"
EXPORT_HREF = "https://cdn.example/export/out.png"
SESSION_ID = "sess-1"
TICKET = "ticket-abc"

MB = 1024 * 1024


class FakeClock:
    """Monotonic clock in seconds whose sleep advances time instead of waiting."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def scenario_document() -> Dict[str, Any]:
    return {
        "sessionId": SESSION_ID,
        "parameters": {
            "p1": {"id": "p1", "name": "Image", "type": "File", "format": ["image/png"], "max": 5 * MB},
            "p2": {"id": "p2", "name": "Message", "type": "String", "max": 280},
        },
        "outputs": {
            "p3": {"id": "p3", "name": "Generated Text", "version": "o-v1"},
        },
        "exports": {
            "p4": {"id": "p4", "name": "Image Export", "type": "download", "version": "e-v1"},
        },
    }


Route = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """Scripted geometry backend, image host and upload target behind one MockTransport."""

    def __init__(self, document: Optional[Dict[str, Any]] = None) -> None:
        self.document = document or scenario_document()
        self.calls: List[Tuple[str, str]] = []
        self.bodies: Dict[Tuple[str, str], List[Any]] = {}

        self.image_bytes = b"\x89PNG" + b"\x00" * (MB - 4)
        self.image_type = "image/png"
        self.upload_status = 201
        self.output_delays: List[Optional[float]] = [500, 0]
        self.export_delays: List[Optional[float]] = [500, 0]
        self.status_computation = "success"
        self.status_collect = "success"
        self.output_text = "a generated caption"
        self.routes: Dict[Tuple[str, str], Route] = {}

    # -- helpers ---------------------------------------------------------

    def count(self, method: str, path_suffix: str) -> int:
        return sum(1 for m, p in self.calls if m == method and p.endswith(path_suffix))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def _output_state(self, delay: Optional[float]) -> Dict[str, Any]:
        state: Dict[str, Any] = {"id": "p3", "name": "Generated Text", "version": "o-v2"}
        if delay is not None:
            state["delay"] = delay
        if not delay or delay <= 0:
            state["content"] = [{"data": self.output_text, "format": "string"}]
        return state

    def _export_state(self, delay: Optional[float]) -> Dict[str, Any]:
        state: Dict[str, Any] = {"id": "p4", "name": "Image Export", "type": "download", "version": "e-v2"}
        if delay is not None:
            state["delay"] = delay
        if not delay or delay <= 0:
            state["content"] = [{"href": EXPORT_HREF, "format": "png"}]
            state["status_computation"] = self.status_computation
            state["status_collect"] = self.status_collect
        return state

    def _next(self, delays: List[Optional[float]]) -> Optional[float]:
        return delays.pop(0) if len(delays) > 1 else delays[0]

    # -- transport -------------------------------------------------------

    def _handle(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        url = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        self.calls.append((method, url))
        if request.content and request.headers.get("content-type", "").startswith("application/json"):
            self.bodies.setdefault((method, url), []).append(json.loads(request.content))

        custom = self.routes.get((method, url))
        if custom is not None:
            return custom(request)

        api = f"{BACKEND_URL}/api/v2"
        if method == "GET" and url == IMAGE_URL:
            return httpx.Response(200, content=self.image_bytes, headers={"content-type": self.image_type})
        if method == "PUT" and url == UPLOAD_URL:
            return httpx.Response(self.upload_status)
        if method == "POST" and url == f"{api}/ticket/{TICKET}":
            return httpx.Response(200, json=self.document)
        if method == "POST" and url == f"{api}/session/{SESSION_ID}/file/upload":
            return httpx.Response(200, json={"asset": {"file": {"p1": {"id": "asset-1", "href": UPLOAD_URL}}}})
        if method == "PUT" and url == f"{api}/session/{SESSION_ID}/output":
            return httpx.Response(200, json={"outputs": {"p3": self._output_state(self._next(self.output_delays))}})
        if method == "POST" and url == f"{api}/session/{SESSION_ID}/output/cache":
            return httpx.Response(200, json={"outputs": {"p3": self._output_state(self._next(self.output_delays))}})
        if method == "PUT" and url == f"{api}/session/{SESSION_ID}/export":
            return httpx.Response(200, json={"exports": {"p4": self._export_state(self._next(self.export_delays))}})
        if method == "POST" and url == f"{api}/session/{SESSION_ID}/export/cache":
            return httpx.Response(200, json={"exports": {"p4": self._export_state(self._next(self.export_delays))}})
        return httpx.Response(404, text=f"no route for {method} {url}")


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()
