"""HTTP transport used by the pipeline to fetch source pages."""

from typing import Dict, Optional
from urllib.parse import urljoin

import requests

from platform_monitor.logging import get_logger

from .exceptions import FetchTimeoutError, NetworkError, TooManyRedirectsError
from .models import RawResponse

logger = get_logger(__name__, component="transport")

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; PlatformMonitor/1.0)"


class HttpTransport:
    """Performs single-attempt HTTP GETs with a bounded redirect chain.

    Redirects are followed here rather than by requests so the hop count can
    be capped and reported as its own error kind. Each call uses the
    module-level ``requests.get``; no session state is shared, so one
    instance can serve concurrent fetches from several threads.

    Attributes:
        timeout: Per-request timeout in seconds (each redirect hop gets its own)
        user_agent: User-Agent header sent with every request
        max_redirects: Maximum redirect hops followed before giving up
    """

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        max_redirects: int = 5,
    ) -> None:
        """Initialize transport.

        Raises:
            ValueError: If timeout is not positive, max_redirects is negative
                or user_agent is empty
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got: {timeout}")
        if max_redirects < 0:
            raise ValueError(f"max_redirects cannot be negative, got: {max_redirects}")
        if not user_agent or not user_agent.strip():
            raise ValueError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()
        self.max_redirects = max_redirects

    def fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> RawResponse:
        """GET a URL, following up to max_redirects redirects.

        Args:
            url: Absolute URL to fetch
            headers: Header overrides merged over the defaults

        Returns:
            RawResponse for the final (non-redirect) response, whatever its status

        Raises:
            NetworkError: On connection-level failures
            FetchTimeoutError: If any hop exceeds the timeout
            TooManyRedirectsError: If the chain exceeds max_redirects
        """
        request_headers = {"User-Agent": self.user_agent}
        if headers:
            request_headers.update(headers)

        current_url = url
        for hop in range(self.max_redirects + 1):
            response = self._get(current_url, request_headers)

            location = response.headers.get("Location")
            if 300 <= response.status_code < 400 and location:
                if hop == self.max_redirects:
                    logger.warning(
                        f"Redirect limit reached for {url}",
                        extra={
                            "event": "transport.fetch.too_many_redirects",
                            "url": url,
                            "max_redirects": self.max_redirects,
                        },
                    )
                    raise TooManyRedirectsError(
                        f"More than {self.max_redirects} redirects fetching {url}",
                        url=url,
                        max_redirects=self.max_redirects,
                    )

                next_url = urljoin(current_url, location)
                logger.debug(
                    f"Following redirect to {next_url}",
                    extra={
                        "event": "transport.fetch.redirect",
                        "status_code": response.status_code,
                        "from_url": current_url,
                        "to_url": next_url,
                    },
                )
                current_url = next_url
                continue

            logger.debug(
                "HTTP request completed",
                extra={
                    "event": "transport.fetch.completed",
                    "url": current_url,
                    "status_code": response.status_code,
                    "redirects": hop,
                },
            )
            return RawResponse(
                url=current_url,
                status_code=response.status_code,
                text=response.text,
                headers=dict(response.headers),
                redirect_count=hop,
            )

        # The loop either returns or raises on its last iteration
        raise AssertionError("unreachable")

    def _get(self, url: str, headers: Dict[str, str]) -> requests.Response:
        """Issue one GET without automatic redirect handling."""
        logger.debug(
            f"HTTP GET {url}",
            extra={"event": "transport.fetch.request", "url": url, "timeout": self.timeout},
        )

        try:
            return requests.get(
                url,
                headers=headers,
                timeout=self.timeout,
                allow_redirects=False,
            )
        except requests.exceptions.Timeout as e:
            raise FetchTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
                cause=e,
            ) from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(
                f"Request to {url} failed: {e}",
                url=url,
                cause=e,
            ) from e
