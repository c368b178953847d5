from abc import ABC, abstractmethod

from src.models.upstream_models import IPLocateRecord


class BaseIPLookupClient(ABC):
    """Abstract base for upstream IP geolocation clients.

    Implementations fetch the provider payload for a single address and raise
    one of the `UpstreamServiceError` subclasses on any failure, so callers only
    ever see a successfully parsed provider record.
    """

    @abstractmethod
    async def lookup_ip(self, ip: str) -> IPLocateRecord:
        """Fetch the provider record for an explicit IP address."""
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release any network resources held by the client."""
        return None
