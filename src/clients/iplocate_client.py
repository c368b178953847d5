import asyncio
from http import HTTPStatus
from typing import Any

import httpx
from pydantic import ValidationError

from src.clients.base import BaseIPLookupClient
from src.errors import (
    UpstreamBadStatusError,
    UpstreamMalformedError,
    UpstreamReportedError,
    UpstreamUnreachableError,
)
from src.logger import logger
from src.models.upstream_models import IPLocateRecord

DEFAULT_BASE_URL = "https://www.iplocate.io/api/lookup"
DEFAULT_TIMEOUT_SECONDS = 10.0


class IpLocateClient(BaseIPLookupClient):
    """Client for the https://www.iplocate.io/ lookup API.

    A single `httpx.AsyncClient` is built at construction time and shared by all
    lookups. Pass `transport` to route requests somewhere other than the network
    (e.g. `httpx.MockTransport` in tests).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._client = httpx.AsyncClient(timeout=timeout_seconds, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    async def lookup_ip(self, ip: str) -> IPLocateRecord:
        """Fetch the iplocate.io record for `ip` with a single request, no retries."""
        url = f"{self._base_url}/{ip}"
        logger.info(f"Requesting geolocation from upstream url={url}")

        # httpx timeouts apply per connect/read/write; asyncio.timeout caps the whole request.
        try:
            async with asyncio.timeout(self._timeout_seconds):
                response = await self._client.get(url)
        except TimeoutError as exc:
            raise UpstreamUnreachableError(
                f"Failed to fetch geolocation data: request timed out after {self._timeout_seconds}s"
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise UpstreamUnreachableError(f"Failed to fetch geolocation data: {repr(exc)}") from exc

        if response.status_code != HTTPStatus.OK:
            raise UpstreamBadStatusError(f"API returned status {response.status_code}")

        record = self._parse_record(response)

        # iplocate.io reports application-level failures inside a 200 body.
        if record.error:
            raise UpstreamReportedError(f"API error: {record.error}")

        return record

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _parse_record(response: httpx.Response) -> IPLocateRecord:
        try:
            data: Any = response.json()
            return IPLocateRecord.model_validate(data)
        except (ValueError, ValidationError) as exc:
            raise UpstreamMalformedError(f"Failed to decode API response: {exc}") from exc
