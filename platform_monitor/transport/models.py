"""Data models for transport results."""

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class RawResponse:
    """Body and metadata of the final response of a fetch.

    Attributes:
        url: Final URL after redirects
        status_code: HTTP status of the final response
        text: Decoded response body
        headers: Response headers
        redirect_count: Number of redirect hops followed
    """

    url: str
    status_code: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)
    redirect_count: int = 0

    @property
    def ok(self) -> bool:
        """True for 2xx responses."""
        return 200 <= self.status_code < 300
