"""Content backend error taxonomy shared by every provider."""
from enum import Enum
from typing import Optional


class CMSErrorCode(str, Enum):
    """Kinds of content backend failure, independent of the backend."""

    CONNECTION_ERROR = "CONNECTION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    RATE_LIMITED = "RATE_LIMITED"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    UNKNOWN = "UNKNOWN"


class CMSError(Exception):
    """
    Error raised at a provider boundary.

    Backend-specific exceptions never escape a provider; they are wrapped
    here with exactly one CMSErrorCode and kept as ``cause``.
    """

    def __init__(
        self,
        message: str,
        code: CMSErrorCode = CMSErrorCode.UNKNOWN,
        cause: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.cause = cause

    def __repr__(self) -> str:
        return f"CMSError(code={self.code.value}, message={self.message!r})"
