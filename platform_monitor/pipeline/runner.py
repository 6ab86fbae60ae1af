"""Pipeline orchestration for one discovery run."""

import time
from concurrent.futures import ThreadPoolExecutor
from contextvars import copy_context
from typing import Callable, List, Tuple
from uuid import uuid4

from platform_monitor.config.exceptions import ConfigurationError
from platform_monitor.config.models import AppConfig, CriteriaConfig, SourceConfig
from platform_monitor.domain.models import CanonicalRecord
from platform_monitor.extractors.base import BaseExtractor, ExtractionPath
from platform_monitor.extractors.factory import get_extractor
from platform_monitor.logging import get_logger
from platform_monitor.logging.context import log_context
from platform_monitor.normalization.service import dedupe
from platform_monitor.notifications.service import Notifier
from platform_monitor.scoring.engine import ScoringEngine
from platform_monitor.transport.client import HttpTransport
from platform_monitor.transport.exceptions import FetchError
from platform_monitor.utils.timestamps import utc_now

from .models import PipelineRunResult, SourceRunStats

logger = get_logger(__name__, component="pipeline")

ExtractorFactory = Callable[[SourceConfig, CriteriaConfig], BaseExtractor]


class DiscoveryPipeline:
    """
    Orchestrates a single run across all enabled sources.

    Sources are fetched and extracted concurrently, one task per source.
    A failing source contributes zero records and a diagnostic; the others
    carry on. Once every task has finished, records are merged in configured
    source order, de-duplicated, scored and handed to the notifier.
    """

    def __init__(
        self,
        app_config: AppConfig,
        transport: HttpTransport,
        scoring_engine: ScoringEngine,
        notifier: Notifier,
        extractor_factory: ExtractorFactory = get_extractor,
    ):
        """
        Initialize the discovery pipeline.

        Args:
            app_config: Application configuration
            transport: HTTP transport shared by all source tasks
            scoring_engine: Engine ranking the merged records
            notifier: Delivers the ranked digest
            extractor_factory: Builds the extractor for a source
        """
        self.app_config = app_config
        self.transport = transport
        self.scoring_engine = scoring_engine
        self.notifier = notifier
        self.extractor_factory = extractor_factory

    def run_once(self) -> PipelineRunResult:
        """
        Execute one complete discovery run.

        This method:
        1. Builds an extractor per enabled source (fatal on misconfiguration)
        2. Fetches and extracts all sources concurrently
        3. Merges records in configured order and de-duplicates them
        4. Scores and ranks the merged records
        5. Delivers the digest

        Returns:
            PipelineRunResult with per-source stats, totals, ranking and delivery outcome

        Raises:
            ConfigurationError: If no source is enabled or a source cannot get an
                extractor. Source-level failures are captured in the result.
        """
        enabled_sources = self.app_config.get_enabled_sources()
        if not enabled_sources:
            raise ConfigurationError(
                "No enabled sources to run",
                suggestions=["Set enabled: true on at least one entry under 'sources'"],
            )

        extractors = [
            self.extractor_factory(source, self.app_config.criteria) for source in enabled_sources
        ]

        run_started_at = utc_now()
        run_id = uuid4().hex

        with log_context(run_id=run_id):
            logger.info(
                "Pipeline run started",
                extra={
                    "event": "pipeline.run.started",
                    "enabled_source_count": len(enabled_sources),
                    "disabled_source_count": len(self.app_config.sources) - len(enabled_sources),
                },
            )

            outcomes = self._run_sources(enabled_sources, extractors)

            source_stats = [stats for stats, _ in outcomes]
            merged: List[CanonicalRecord] = []
            for _, records in outcomes:
                merged.extend(records)

            unique = dedupe(merged)
            logger.info(
                f"De-duplicated {len(merged)} records to {len(unique)}",
                extra={
                    "event": "pipeline.records.deduplicated",
                    "before": len(merged),
                    "after": len(unique),
                },
            )

            ranked = self.scoring_engine.score(unique)
            delivery = self.notifier.deliver(ranked)

            result = PipelineRunResult(
                run_id=run_id,
                run_started_at=run_started_at,
                run_finished_at=utc_now(),
                source_stats=source_stats,
                total_extracted=len(merged),
                total_after_dedup=len(unique),
                total_ranked=len(ranked),
                ranked=ranked,
                delivery=delivery,
            )

            logger.info(
                "Pipeline run completed",
                extra={
                    "event": "pipeline.run.completed",
                    "duration_ms": int(result.total_duration_seconds * 1000),
                    "total_extracted": result.total_extracted,
                    "total_after_dedup": result.total_after_dedup,
                    "total_ranked": result.total_ranked,
                    "failed_sources": result.failed_sources,
                    "degraded_sources": result.degraded_sources,
                    "had_errors": result.had_errors,
                    "delivery_status": delivery.status.value,
                },
            )

            return result

    def _run_sources(
        self, sources: List[SourceConfig], extractors: List[BaseExtractor]
    ) -> List[Tuple[SourceRunStats, List[CanonicalRecord]]]:
        """Run all source tasks on a thread pool; results in configured order."""
        max_workers = min(self.app_config.advanced.max_concurrent_sources, len(sources))

        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="source") as executor:
            # Each task gets its own copy of the current context so run_id reaches worker logs
            futures = [
                executor.submit(copy_context().run, self._process_source, source, extractor)
                for source, extractor in zip(sources, extractors)
            ]
            return [future.result() for future in futures]

    def _process_source(
        self, source_config: SourceConfig, extractor: BaseExtractor
    ) -> Tuple[SourceRunStats, List[CanonicalRecord]]:
        """
        Fetch and extract a single source.

        Never raises: every failure is logged and recorded in the stats.

        Args:
            source_config: Configuration for the source to process
            extractor: Extractor bound to this source

        Returns:
            (SourceRunStats, records) for this source
        """
        source_start = time.monotonic()
        stats = SourceRunStats(source_name=source_config.name, kind=getattr(source_config.kind, "value", source_config.kind))
        records: List[CanonicalRecord] = []

        with log_context(source_name=source_config.name, source_kind=stats.kind):
            logger.info(
                f"Processing source: {source_config.name}",
                extra={"event": "source.run.started", "url": source_config.url},
            )

            try:
                response = self.transport.fetch(source_config.url)
                stats.fetched = True
                stats.status_code = response.status_code

                if not response.ok:
                    stats.error_type = "HTTPStatus"
                    stats.error_message = f"HTTP {response.status_code} from {response.url}"
                    logger.error(
                        f"Source {source_config.name} returned HTTP {response.status_code}",
                        extra={
                            "event": "source.fetch.failed",
                            "error_type": stats.error_type,
                            "status_code": response.status_code,
                        },
                    )
                    return stats, records

                result = extractor.extract(response)
                stats.extraction_path = result.path.value
                stats.extracted_count = len(result.records)

                if result.path == ExtractionPath.FAILED:
                    stats.error_type = "ExtractionFailed"
                    stats.error_message = "; ".join(result.notes) or "extraction failed"
                    logger.error(
                        f"Could not extract records from {source_config.name}: {stats.error_message}",
                        extra={"event": "source.extract.failed", "error_type": stats.error_type},
                    )
                    return stats, records

                records = result.records
                logger.info(
                    f"Extracted {len(records)} records from {source_config.name}",
                    extra={
                        "event": "source.extract.completed",
                        "count": len(records),
                        "extraction_path": stats.extraction_path,
                    },
                )

            except FetchError as e:
                stats.error_type = e.kind.value
                stats.error_message = str(e)
                logger.error(
                    f"Fetch failed for {source_config.name}: {e}",
                    extra={
                        "event": "source.fetch.failed",
                        "error_type": stats.error_type,
                        "url": e.url,
                    },
                )

            except Exception as e:
                # Unexpected error in this source; the run continues
                stats.error_type = type(e).__name__
                stats.error_message = str(e)
                records = []
                logger.error(
                    f"Unexpected error processing {source_config.name}: {e}",
                    extra={"event": "source.run.failed", "error_type": stats.error_type},
                    exc_info=True,
                )

            finally:
                stats.duration_seconds = time.monotonic() - source_start
                logger.debug(
                    f"Source processing completed: {source_config.name}",
                    extra={
                        "event": "source.run.completed",
                        "duration_seconds": stats.duration_seconds,
                        "failed": stats.failed,
                        "degraded": stats.degraded,
                    },
                )

        return stats, records
