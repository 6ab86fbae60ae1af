"""Extractor for server-rendered pages that inline a JSON payload.

Product Hunt's homepage ships its feed inside a ``__NEXT_DATA__`` script tag.
The path to the feed inside that payload is undocumented and changes with
their frontend releases, so this extractor has a documented fallback: a
regex scan for ``"name":"..."`` pairs in the raw page.
"""

import json
import re
from typing import Any, List, Optional, Tuple
from urllib.parse import urljoin

from platform_monitor.domain.models import CanonicalRecord, RecordKind
from platform_monitor.logging import get_logger
from platform_monitor.transport.models import RawResponse

from .base import BaseExtractor, ExtractionPath, ExtractionResult

logger = get_logger(__name__, component="extractor")


class EmbeddedJsonExtractor(BaseExtractor):
    """Extracts launches from an HTML page with an embedded JSON feed.

    Primary path: parse the payload and walk ITEMS_PATH to a list of edges,
    mapping each ``edge.node`` to a startup record.

    Degraded path (payload missing, invalid, or ITEMS_PATH unresolved): pull
    every ``"name":"..."`` value out of the raw text. Those records have an
    empty tagline, zero popularity and the page URL as link.
    """

    EXTRACTOR_NAME = "embedded-json"
    PAYLOAD_PATTERN = re.compile(
        r'<script[^>]*\bid="__NEXT_DATA__"[^>]*>(.*?)</script>',
        re.DOTALL | re.IGNORECASE,
    )
    ITEMS_PATH = ["props", "initialState", "homefeed", "edges"]
    FALLBACK_NAME_PATTERN = re.compile(r'"name"\s*:\s*"((?:[^"\\]|\\.)+)"')
    POST_URL_TEMPLATE = "https://www.producthunt.com/posts/{slug}"

    def _extract(self, response: RawResponse) -> ExtractionResult:
        html_text = response.text or ""

        edges, reason = self._locate_items(html_text)
        if edges is None:
            return self._fallback_scan(html_text, response.url, reason)

        records = []
        for edge in edges:
            node = edge.get("node") if isinstance(edge, dict) else None
            if not isinstance(node, dict):
                continue
            record = self._transform_node(node, response.url)
            if record is not None:
                records.append(record)

        logger.debug(
            f"Parsed {len(records)} records from embedded payload",
            extra={"event": "extraction.primary", "source": self.source_name, "count": len(records)},
        )
        return ExtractionResult(records=records, path=ExtractionPath.PRIMARY)

    def _locate_items(self, html_text: str) -> Tuple[Optional[List[Any]], str]:
        """Find the item list; returns (items, "") or (None, reason)."""
        match = self.PAYLOAD_PATTERN.search(html_text)
        if not match:
            return None, "embedded JSON payload not found"

        try:
            payload = json.loads(match.group(1))
        except ValueError as e:
            return None, f"embedded JSON payload is not valid JSON: {e}"

        items = self._get_path(payload, self.ITEMS_PATH)
        if not isinstance(items, list):
            return None, f"path {'.'.join(self.ITEMS_PATH)} did not resolve to a list"

        return items, ""

    def _transform_node(self, node: dict, page_url: str) -> Optional[CanonicalRecord]:
        url = node.get("url")
        if not url and node.get("slug"):
            url = self.POST_URL_TEMPLATE.format(slug=node["slug"])
        if url:
            url = urljoin(page_url, str(url))

        return self._build_record(
            name=str(node.get("name") or ""),
            tagline=node.get("tagline") or "",
            url=url or "",
            kind=RecordKind.STARTUP,
            popularity=self._as_count(node.get("votesCount")),
        )

    def _fallback_scan(self, html_text: str, page_url: str, reason: str) -> ExtractionResult:
        """Degraded path: scrape name fields straight out of the page text."""
        records = []
        for match in self.FALLBACK_NAME_PATTERN.finditer(html_text):
            record = self._build_record(
                name=self._decode_json_string(match.group(1)),
                tagline="",
                url=page_url,
                kind=RecordKind.STARTUP,
                popularity=0,
            )
            if record is not None:
                records.append(record)

        logger.warning(
            f"Embedded payload unusable, fell back to name scan: {reason}",
            extra={
                "event": "extraction.degraded",
                "source": self.source_name,
                "reason": reason,
                "count": len(records),
            },
        )
        return ExtractionResult(records=records, path=ExtractionPath.DEGRADED, notes=[reason])

    @staticmethod
    def _decode_json_string(raw: str) -> str:
        """Decode JSON escapes (\\u00e9, \\") in a matched string body."""
        try:
            return json.loads(f'"{raw}"')
        except ValueError:
            return raw

    @staticmethod
    def _as_count(value: Any) -> int:
        try:
            return max(int(value), 0)
        except (TypeError, ValueError):
            return 0
