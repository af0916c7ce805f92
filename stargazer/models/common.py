"""Common Pydantic models shared across routes."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error envelope; code mirrors the HTTP status."""

    code: int
    message: str
