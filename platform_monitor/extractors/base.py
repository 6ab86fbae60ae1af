"""Base extractor class shared by all source kinds.

An extractor turns the raw response of one source into canonical records.
Extractors never raise: malformed input degrades to a partial or empty
ExtractionResult, tagged with the path that produced it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from platform_monitor.domain.models import CanonicalRecord
from platform_monitor.logging import get_logger
from platform_monitor.transport.models import RawResponse

logger = get_logger(__name__, component="extractor")


class ExtractionPath(str, Enum):
    """Which parse path produced an extraction result."""

    PRIMARY = "primary"
    DEGRADED = "degraded"
    FAILED = "failed"


@dataclass
class ExtractionResult:
    """Records extracted from one response plus the path that produced them.

    Attributes:
        records: Canonical records, in page order
        path: PRIMARY for a clean parse, DEGRADED when a lossy fallback ran,
            FAILED when the input was unusable
        notes: Short diagnostics explaining a degraded or failed path
    """

    records: List[CanonicalRecord] = field(default_factory=list)
    path: ExtractionPath = ExtractionPath.PRIMARY
    notes: List[str] = field(default_factory=list)

    @property
    def is_degraded(self) -> bool:
        return self.path == ExtractionPath.DEGRADED

    @classmethod
    def failed(cls, note: str) -> "ExtractionResult":
        return cls(records=[], path=ExtractionPath.FAILED, notes=[note])


class BaseExtractor(ABC):
    """Base class for all source extractors.

    Subclasses implement _extract(). The public extract() wraps it so that
    an unexpected exception becomes a FAILED result instead of propagating,
    and applies the max_records limit.

    Attributes:
        source_name: Source tag written into every record
        max_records: Maximum records returned (0 = unlimited)
    """

    EXTRACTOR_NAME = "base"

    def __init__(self, source_name: str, max_records: int = 0) -> None:
        if not source_name or not source_name.strip():
            raise ValueError("source_name cannot be empty")
        if max_records < 0:
            raise ValueError(f"max_records cannot be negative, got: {max_records}")

        self.source_name = source_name.strip()
        self.max_records = max_records

    def extract(self, response: RawResponse) -> ExtractionResult:
        """Extract canonical records from a raw response.

        Args:
            response: Raw response fetched for this extractor's source

        Returns:
            ExtractionResult; never raises
        """
        try:
            result = self._extract(response)
        except Exception as e:
            logger.error(
                f"{self.EXTRACTOR_NAME} extractor failed on {response.url}: {e}",
                extra={
                    "event": "extraction.failed",
                    "extractor": self.EXTRACTOR_NAME,
                    "source": self.source_name,
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            return ExtractionResult.failed(f"{type(e).__name__}: {e}")

        result.records = self._truncate(result.records)
        return result

    @abstractmethod
    def _extract(self, response: RawResponse) -> ExtractionResult:
        """Source-specific extraction. May raise; extract() contains it."""

    def _build_record(self, **fields: Any) -> Optional[CanonicalRecord]:
        """Construct a record, or return None if it fails validation.

        Items without a usable name or url are dropped here so they never
        reach later stages.
        """
        try:
            return CanonicalRecord(source=self.source_name, **fields)
        except ValidationError as e:
            logger.debug(
                "Discarding item that failed validation",
                extra={
                    "event": "extraction.item.discarded",
                    "extractor": self.EXTRACTOR_NAME,
                    "source": self.source_name,
                    "item_name": fields.get("name"),
                    "error_count": e.error_count(),
                },
            )
            return None

    def _truncate(self, records: List[CanonicalRecord]) -> List[CanonicalRecord]:
        if self.max_records > 0 and len(records) > self.max_records:
            logger.debug(
                "Truncating records to max_records limit",
                extra={
                    "source": self.source_name,
                    "total": len(records),
                    "max": self.max_records,
                },
            )
            return records[: self.max_records]
        return records

    @staticmethod
    def _get_path(data: Any, path: List[str]) -> Any:
        """Walk nested dicts along path; None if any step is missing."""
        current = data
        for key in path:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
        return current

    def describe(self) -> Dict[str, Any]:
        return {
            "extractor": self.EXTRACTOR_NAME,
            "source": self.source_name,
            "max_records": self.max_records,
        }
