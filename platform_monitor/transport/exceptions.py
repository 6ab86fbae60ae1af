"""Custom exceptions for the HTTP transport."""

from enum import Enum
from typing import Optional


class FetchErrorKind(str, Enum):
    """Failure categories reported by the transport."""

    NETWORK_ERROR = "NetworkError"
    TIMEOUT = "Timeout"
    TOO_MANY_REDIRECTS = "TooManyRedirects"


class FetchError(Exception):
    """Base exception for all transport failures.

    Catching this exception catches every way a single fetch can fail. The
    pipeline handles it per source and never lets it abort a run.
    """

    kind: FetchErrorKind = FetchErrorKind.NETWORK_ERROR

    def __init__(self, message: str, url: str, cause: Optional[BaseException] = None) -> None:
        """Initialize fetch error.

        Args:
            message: Human-readable error message
            url: URL whose fetch failed
            cause: Underlying exception, if any
        """
        super().__init__(message)
        self.url = url
        self.cause = cause


class NetworkError(FetchError):
    """Connection-level failure (DNS, refused, reset, invalid URL)."""

    kind = FetchErrorKind.NETWORK_ERROR


class FetchTimeoutError(FetchError):
    """The request did not complete within the configured timeout."""

    kind = FetchErrorKind.TIMEOUT


class TooManyRedirectsError(FetchError):
    """The redirect chain was longer than the configured cap."""

    kind = FetchErrorKind.TOO_MANY_REDIRECTS

    def __init__(self, message: str, url: str, max_redirects: int) -> None:
        super().__init__(message, url)
        self.max_redirects = max_redirects
