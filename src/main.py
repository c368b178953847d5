from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware

from src.cache import ExpiringLRUCache
from src.clients.iplocate_client import IpLocateClient
from src.config import Settings, get_settings
from src.errors import AppError
from src.exception_handlers import app_error_handler, unhandled_exception_middleware
from src.logger import logger
from src.models.common import LocationRecord
from src.models.response_models import ErrorResponse, HealthResponse
from src.services.geolocation import GeolocationService


def build_geolocation_service(settings: Settings) -> GeolocationService:
    """Wire a service with its own cache and upstream client from settings."""
    cache: ExpiringLRUCache[LocationRecord] = ExpiringLRUCache(
        max_size=settings.cache_max_size,
        ttl_seconds=settings.cache_ttl_seconds,
    )
    client = IpLocateClient(
        base_url=settings.iplocate_base_url,
        timeout_seconds=settings.upstream_timeout_seconds,
    )
    return GeolocationService(cache=cache, client=client)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    app.state.geolocation_service = build_geolocation_service(settings)
    logger.info(
        "Started IP Lookup Service "
        f"upstream={settings.iplocate_base_url} cache_max_size={settings.cache_max_size} "
        f"cache_ttl_seconds={settings.cache_ttl_seconds}"
    )
    try:
        yield
    finally:
        await app.state.geolocation_service.aclose()


app = FastAPI(
    title="IP Lookup Service",
    version="0.1.0",
    description="Geolocation lookups for IPv4/IPv6 addresses backed by iplocate.io with an in-memory cache.",
    lifespan=lifespan,
)

# Middleware added later wraps earlier ones, so CORS also covers unexpected-error responses.
app.middleware("http")(unhandled_exception_middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_allow_origins),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.add_exception_handler(AppError, app_error_handler)


def get_geolocation_service(request: Request) -> GeolocationService:
    """Dependency returning the service created during application startup."""
    return request.app.state.geolocation_service


_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Missing or invalid IP address."},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Upstream lookup failed."},
}


@app.get(
    "/health",
    tags=["health"],
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health() -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(status="ok")


# The path convertor also matches an empty segment and values with "/" (CIDR),
# so those reach validation instead of falling through to a 404.
@app.get(
    "/api/lookup/{ip:path}",
    response_model=LocationRecord,
    responses=_ERROR_RESPONSES,
    status_code=status.HTTP_200_OK,
    tags=["ip"],
    summary="Look up geolocation information for an IP address.",
)
async def ip_lookup(
    request: Request,
    ip: str,
    service: Annotated[GeolocationService, Depends(get_geolocation_service)],
) -> LocationRecord:
    """Look up the location of the IPv4 or IPv6 address given in the path.

    - Empty address -> 400 `MISSING_IP`.
    - Malformed address -> 400 `INVALID_IP`.
    - Any upstream failure -> 500 `LOOKUP_FAILED`.
    """
    ip = ip.strip()
    logger.info(f"Performing IP lookup path={request.url.path} method={request.method} ip={ip}")

    service.validate_ip(ip)
    return await service.lookup(ip)
