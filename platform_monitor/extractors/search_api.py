"""Extractor for the Hacker News (Algolia) search API."""

import json
import re
from typing import Optional

from platform_monitor.domain.models import CanonicalRecord, RecordKind
from platform_monitor.logging import get_logger
from platform_monitor.transport.models import RawResponse
from platform_monitor.utils.timestamps import parse_timestamp

from .base import BaseExtractor, ExtractionPath, ExtractionResult

logger = get_logger(__name__, component="extractor")


class SearchApiExtractor(BaseExtractor):
    """Extracts launch announcements from a JSON search response.

    Response shape:
        {"hits": [{"title": "Launch HN: Acme (YC W25) - ...", "url": "...",
                   "points": 120, "created_at": "...", "objectID": "123"}]}

    Only hits whose title contains the title marker are kept, and the marker
    prefix ("Launch HN: ") is stripped from the display name. A body that is
    not a JSON object with a ``hits`` list yields a FAILED, empty result.
    """

    EXTRACTOR_NAME = "search-api"
    ITEM_URL_TEMPLATE = "https://news.ycombinator.com/item?id={object_id}"

    def __init__(self, source_name: str, max_records: int = 0, title_marker: str = "Launch HN") -> None:
        super().__init__(source_name, max_records=max_records)
        if not title_marker or not title_marker.strip():
            raise ValueError("title_marker cannot be empty")
        self.title_marker = title_marker.strip()
        self._prefix_re = re.compile(rf"^\s*{re.escape(self.title_marker)}\s*:\s*", re.IGNORECASE)

    def _extract(self, response: RawResponse) -> ExtractionResult:
        try:
            data = json.loads(response.text or "")
        except ValueError as e:
            logger.warning(
                f"Search response is not valid JSON: {e}",
                extra={"event": "extraction.failed", "source": self.source_name},
            )
            return ExtractionResult.failed(f"response is not valid JSON: {e}")

        hits = data.get("hits") if isinstance(data, dict) else None
        if not isinstance(hits, list):
            logger.warning(
                "Search response has no hits list",
                extra={"event": "extraction.failed", "source": self.source_name},
            )
            return ExtractionResult.failed("response has no 'hits' list")

        marker = self.title_marker.lower()
        records = []
        for hit in hits:
            if not isinstance(hit, dict):
                continue
            title = hit.get("title")
            if not isinstance(title, str) or marker not in title.lower():
                continue

            record = self._transform_hit(hit, title)
            if record is not None:
                records.append(record)

        logger.debug(
            f"Kept {len(records)} of {len(hits)} hits",
            extra={"event": "extraction.primary", "source": self.source_name, "count": len(records)},
        )
        return ExtractionResult(records=records, path=ExtractionPath.PRIMARY)

    def _transform_hit(self, hit: dict, title: str) -> Optional[CanonicalRecord]:
        url = hit.get("url")
        if not url and hit.get("objectID"):
            url = self.ITEM_URL_TEMPLATE.format(object_id=hit["objectID"])

        points = hit.get("points")
        return self._build_record(
            name=self._prefix_re.sub("", title),
            tagline="",
            url=url or "",
            kind=RecordKind.STARTUP,
            popularity=points if isinstance(points, int) and points > 0 else 0,
            published_at=parse_timestamp(hit.get("created_at") or hit.get("created_at_i")),
        )
