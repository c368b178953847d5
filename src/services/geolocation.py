from ipaddress import ip_address

from src.cache import ExpiringLRUCache
from src.clients.base import BaseIPLookupClient
from src.errors import InvalidIpError, MissingIpError
from src.logger import logger
from src.models.common import LocationRecord
from src.models.upstream_models import IPLocateRecord


class GeolocationService:
    """Validates addresses and serves lookups from the cache or the upstream provider.

    Both collaborators are injected so every instance can run against its own
    cache and client. Validation and lookup are separate calls: `lookup` assumes
    its argument already passed `validate_ip`.
    """

    def __init__(self, cache: ExpiringLRUCache[LocationRecord], client: BaseIPLookupClient) -> None:
        self._cache = cache
        self._client = client

    @staticmethod
    def validate_ip(ip: str) -> None:
        """Raise unless `ip` is exactly a bare IPv4 or IPv6 literal.

        - Empty or whitespace-only -> MissingIpError.
        - Anything else that is not a plain address (CIDR, host:port, names,
          zone ids, surrounding whitespace) -> InvalidIpError.
        """
        if not ip or not ip.strip():
            raise MissingIpError("IP address is required")

        # ip_address() accepts scoped IPv6 ("fe80::1%eth0"); a zone is not a bare literal.
        if ip != ip.strip() or "%" in ip:
            raise InvalidIpError("Invalid IP address format")

        try:
            ip_address(ip)
        except ValueError as exc:
            raise InvalidIpError("Invalid IP address format") from exc

    async def lookup(self, ip: str) -> LocationRecord:
        """Return the location for `ip`, calling upstream only on a cache miss."""
        cached, found = self._cache.get(ip)
        if found:
            logger.debug(f"Cache hit ip={ip}")
            return cached

        logger.debug(f"Cache miss ip={ip}")
        record = self._normalize(await self._client.lookup_ip(ip))

        # Keyed by the caller's string, not the provider's echoed ip.
        self._cache.put(ip, record)
        return record

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _normalize(record: IPLocateRecord) -> LocationRecord:
        """Map the iplocate.io record into the canonical response shape."""
        return LocationRecord(
            address=record.ip,
            country=record.country,
            country_code=record.country_code,
            city=record.city,
            timezone=record.time_zone,
        )
