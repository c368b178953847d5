from typing import Any

from pydantic import BaseModel, field_validator


class IPLocateRecord(BaseModel):
    """Subset of the iplocate.io lookup payload the service consumes.

    Extra fields in the payload are ignored. A provider-side failure is
    signalled through `error` inside an otherwise successful response.
    """

    ip: str = ""
    country: str = ""
    country_code: str = ""
    time_zone: str = ""
    city: str = ""
    error: str = ""

    @field_validator("ip", "country", "country_code", "time_zone", "city", "error", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        """Read explicit JSON nulls the same way as omitted fields."""
        if value is None:
            return ""
        return value
