"""Maps backend failures onto the shared CMSError taxonomy."""
from contextlib import contextmanager
from typing import Iterator

import requests

from cms_gateway.domain.errors import CMSError, CMSErrorCode

_STATUS_CODES = {
    401: CMSErrorCode.UNAUTHORIZED,
    403: CMSErrorCode.UNAUTHORIZED,
    404: CMSErrorCode.NOT_FOUND,
    429: CMSErrorCode.RATE_LIMITED,
}


def error_code_for_status(status: int) -> CMSErrorCode:
    """Map an HTTP status code to a CMSErrorCode."""
    return _STATUS_CODES.get(status, CMSErrorCode.UNKNOWN)


def error_from_response(backend: str, response: requests.Response) -> CMSError:
    """Build a CMSError from a non-2xx response."""
    return CMSError(
        f"{backend} API error: {response.status_code} {response.reason or ''}".rstrip(),
        error_code_for_status(response.status_code)
    )


def error_from_exception(backend: str, error: Exception) -> CMSError:
    """
    Build a CMSError from a transport-level exception.

    Args:
        backend: Backend name used in the message
        error: Exception raised by requests

    Returns:
        CMSError with CONNECTION_ERROR for network failures and timeouts,
        UNKNOWN otherwise
    """
    if isinstance(error, CMSError):
        return error
    if isinstance(error, (requests.ConnectionError, requests.Timeout)):
        return CMSError(f"Failed to connect to {backend}: {error}", CMSErrorCode.CONNECTION_ERROR, error)
    if isinstance(error, requests.exceptions.RetryError):
        return CMSError(f"{backend} retries exhausted: {error}", CMSErrorCode.CONNECTION_ERROR, error)
    return CMSError(f"{backend} request failed: {error}", CMSErrorCode.UNKNOWN, error)


@contextmanager
def invalid_response_guard(backend: str, what: str) -> Iterator[None]:
    """Turn transform failures into INVALID_RESPONSE errors."""
    try:
        yield
    except CMSError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise CMSError(
            f"{backend} returned an unexpected {what} payload: {e!r}",
            CMSErrorCode.INVALID_RESPONSE,
            e
        ) from e
