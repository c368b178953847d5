from pydantic import BaseModel, ConfigDict


class LocationRecord(BaseModel):
    """Normalized geolocation data returned to callers and held in the cache.

    The record is frozen: a refreshed lookup replaces the cached instance
    instead of mutating it.
    """

    model_config = ConfigDict(frozen=True)

    address: str
    country: str
    country_code: str
    city: str = ""
    timezone: str
