from http import HTTPStatus


class AppError(Exception):
    """Base application error for the IP geolocation service.

    Every subclass carries the machine-readable `code` and the HTTP status the
    routing layer responds with.
    """

    code: str = "INTERNAL_ERROR"
    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR


class IpValidationError(AppError):
    """Base error for caller-supplied addresses that cannot be looked up."""

    status_code = HTTPStatus.BAD_REQUEST


class MissingIpError(IpValidationError):
    """Raised when the supplied IP address is empty after trimming."""

    code = "MISSING_IP"


class InvalidIpError(IpValidationError):
    """Raised when the supplied IP address is not a bare IPv4 or IPv6 literal."""

    code = "INVALID_IP"


class UpstreamServiceError(AppError):
    """Base error for upstream geolocation provider failures.

    All subclasses surface under the same external code; the cause is only
    visible through the message.
    """

    code = "LOOKUP_FAILED"


class UpstreamUnreachableError(UpstreamServiceError):
    """Raised when the request to the provider cannot be sent or times out."""


class UpstreamBadStatusError(UpstreamServiceError):
    """Raised when the provider answers with a non-200 status."""


class UpstreamMalformedError(UpstreamServiceError):
    """Raised when the provider body cannot be parsed into a provider record."""


class UpstreamReportedError(UpstreamServiceError):
    """Raised when the provider embeds an error string in a 200 response."""
