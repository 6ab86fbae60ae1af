"""Data models for pipeline execution tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from platform_monitor.domain.models import ScoredRecord
from platform_monitor.notifications.models import DeliveryResult, DeliveryStatus


@dataclass
class SourceRunStats:
    """
    Statistics for a single source within a pipeline run.

    Attributes:
        source_name: Configured source name
        kind: Source kind (extraction strategy)
        fetched: Whether a response was received
        status_code: HTTP status of the final response, if any
        extracted_count: Records produced by the extractor
        extraction_path: "primary", "degraded" or "failed"; None if never extracted
        error_type: Failure kind (NetworkError, Timeout, TooManyRedirects,
            HTTPStatus, ExtractionFailed or an unexpected exception's class name)
        error_message: Failure detail
        duration_seconds: Time spent on this source
    """

    source_name: str
    kind: str
    fetched: bool = False
    status_code: Optional[int] = None
    extracted_count: int = 0
    extraction_path: Optional[str] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def failed(self) -> bool:
        return self.error_type is not None

    @property
    def degraded(self) -> bool:
        return self.extraction_path == "degraded"


@dataclass
class PipelineRunResult:
    """
    Aggregate results from one pipeline run.

    Attributes:
        run_id: Unique run identifier (also present in every log line of the run)
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        source_stats: Per-source statistics, in configured source order
        total_extracted: Records extracted across all sources
        total_after_dedup: Records left after de-duplication
        total_ranked: Records with a positive score
        ranked: The ranking, highest score first
        delivery: Outcome of digest delivery
        total_duration_seconds: Run duration, computed if not set
    """

    run_id: str
    run_started_at: datetime
    run_finished_at: datetime
    source_stats: List[SourceRunStats] = field(default_factory=list)
    total_extracted: int = 0
    total_after_dedup: int = 0
    total_ranked: int = 0
    ranked: List[ScoredRecord] = field(default_factory=list)
    delivery: Optional[DeliveryResult] = None
    total_duration_seconds: float = 0.0

    def __post_init__(self):
        """Compute duration if not set."""
        if self.total_duration_seconds == 0.0:
            delta = self.run_finished_at - self.run_started_at
            self.total_duration_seconds = delta.total_seconds()

    @property
    def failed_sources(self) -> List[str]:
        return [s.source_name for s in self.source_stats if s.failed]

    @property
    def degraded_sources(self) -> List[str]:
        """Sources whose records came from a fallback parse."""
        return [s.source_name for s in self.source_stats if s.degraded]

    @property
    def had_errors(self) -> bool:
        """True if any source failed. Delivery failures are reported separately."""
        return any(s.failed for s in self.source_stats)

    @property
    def delivery_failed(self) -> bool:
        return self.delivery is not None and self.delivery.status == DeliveryStatus.FAILED
