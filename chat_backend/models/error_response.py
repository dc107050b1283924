"""Standard error payload returned by the API."""

from pydantic import BaseModel, Field

from ..utils.helpers import now_millis
from .enums import ErrorCode


class ErrorEnvelope(BaseModel):
    """Error information sent to clients in place of a stack trace.

    ``timestamp`` is the epoch time in milliseconds at which the error was
    translated for the HTTP response.
    """

    code: ErrorCode
    message: str
    details: str | None = None
    timestamp: int = Field(default_factory=now_millis)
