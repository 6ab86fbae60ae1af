"""HTTP transport: one GET per call, manual redirect following, no retries.

Usage:
    from platform_monitor.transport import HttpTransport, FetchError
    transport = HttpTransport(timeout=10, max_redirects=5)
    response = transport.fetch("https://hn.algolia.com/api/v1/search?query=Launch%20HN")
"""

from .client import HttpTransport
from .exceptions import (
    FetchError,
    FetchErrorKind,
    FetchTimeoutError,
    NetworkError,
    TooManyRedirectsError,
)
from .models import RawResponse

__all__ = [
    "HttpTransport",
    "RawResponse",
    # Exceptions
    "FetchError",
    "FetchErrorKind",
    "NetworkError",
    "FetchTimeoutError",
    "TooManyRedirectsError",
]
