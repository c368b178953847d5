from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response model for the health check endpoint."""

    status: str


class ErrorResponse(BaseModel):
    """Error payload for failed lookups.

    `error` and `message` both carry the human-readable description; `code` is
    the machine-readable value callers branch on.
    """

    error: str
    code: str
    message: str
