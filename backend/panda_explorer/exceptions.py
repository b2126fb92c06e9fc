"""
Domain exceptions for the application.

Components raise these internally and convert them into the ``error_message``
of the view they return, so nothing crosses the view boundary as an
exception. The status codes mirror what an HTTP front end would answer.
"""

from typing import Optional


class AppError(Exception):
    """Base application error with an HTTP-equivalent status code."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class MissingCredentialError(AppError):
    """Operation needs the API key and none is configured (401)."""

    def __init__(self, message: str = "API key not configured"):
        super().__init__(message, status_code=401)


class UpstreamUnavailableError(AppError):
    """Upstream answered with a non-success status (503)."""

    def __init__(self, message: str = "Upstream service unavailable", upstream_status: Optional[int] = None):
        self.upstream_status = upstream_status
        super().__init__(message, status_code=503)


class MalformedResponseError(AppError):
    """Response body missing or not in the expected shape (502)."""

    def __init__(self, message: str = "Malformed response from upstream"):
        super().__init__(message, status_code=502)


class UnsupportedSymbolError(AppError):
    """No CoinGecko mapping for the requested symbol (404)."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Symbol '{symbol}' is not supported for price history", status_code=404)


def describe_error(exc: Exception) -> str:
    """Plain-language message for a view's error field"""
    if isinstance(exc, AppError):
        return exc.message
    return f"Unexpected error: {exc}"
