import asyncio
import json
from http import HTTPStatus
from typing import Any

import httpx

from src.clients.base import BaseIPLookupClient
from src.models.upstream_models import IPLocateRecord

GOOGLE_DNS_PAYLOAD: dict[str, Any] = {
    "ip": "8.8.8.8",
    "country": "United States",
    "country_code": "US",
    "city": "Mountain View",
    "time_zone": "America/Los_Angeles",
}


class RecordingTransport(httpx.AsyncBaseTransport):
    """httpx transport returning a fixed response and remembering requested URLs."""

    def __init__(
        self,
        status_code: int = HTTPStatus.OK,
        payload: Any = None,
        text: str | None = None,
    ) -> None:
        self._status_code = status_code
        self._content = text if text is not None else json.dumps(payload if payload is not None else {})
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(
            self._status_code,
            content=self._content.encode(),
            headers={"Content-Type": "application/json"},
            request=request,
        )


class FailingTransport(httpx.AsyncBaseTransport):
    """Transport that raises a configured httpx.RequestError to simulate network failure."""

    def __init__(self, exc_cls: type[httpx.RequestError] = httpx.ConnectError) -> None:
        self._exc_cls = exc_cls

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        raise self._exc_cls("Network failure", request=request)


class FakeLookupClient(BaseIPLookupClient):
    """In-memory upstream client counting how often it is called."""

    def __init__(self, payload: dict[str, Any] | None = None, exc: Exception | None = None) -> None:
        self._payload = payload if payload is not None else GOOGLE_DNS_PAYLOAD
        self._exc = exc
        self.calls: list[str] = []
        self.closed = False

    async def lookup_ip(self, ip: str) -> IPLocateRecord:
        self.calls.append(ip)
        if self._exc is not None:
            raise self._exc
        return IPLocateRecord.model_validate(self._payload)

    async def aclose(self) -> None:
        self.closed = True


class FakeClock:
    """Manually advanced time source for cache expiry tests."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class _DripStream(httpx.AsyncByteStream):
    def __init__(self, content: bytes, delay_seconds: float) -> None:
        self._content = content
        self._delay_seconds = delay_seconds

    async def __aiter__(self):
        for byte in self._content:
            await asyncio.sleep(self._delay_seconds)
            yield bytes([byte])


class SlowBodyTransport(httpx.AsyncBaseTransport):
    """Transport answering 200 right away but sending the JSON body one byte at a time."""

    def __init__(self, payload: Any, delay_seconds: float = 0.02) -> None:
        self._content = json.dumps(payload).encode()
        self._delay_seconds = delay_seconds

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            HTTPStatus.OK,
            stream=_DripStream(self._content, self._delay_seconds),
            headers={"Content-Type": "application/json"},
            request=request,
        )
