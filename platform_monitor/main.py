"""Main entry point for the Platform Monitor."""

import argparse
import os
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from platform_monitor.config.environment import EnvironmentConfig
from platform_monitor.config.exceptions import ConfigurationError
from platform_monitor.config.loader import load_config
from platform_monitor.config.models import AppConfig
from platform_monitor.logging import get_logger
from platform_monitor.logging.config import configure_logging
from platform_monitor.notifications.service import Notifier
from platform_monitor.notifications.telegram_client import TelegramClient
from platform_monitor.pipeline import DiscoveryPipeline
from platform_monitor.scoring.engine import ScoringEngine
from platform_monitor.transport.client import HttpTransport

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > environment > config file.

    Args:
        config_path: Path to configuration file (None to search defaults)
        log_level_override: Log level from CLI

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with env_config.log_level resolved

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_pipeline(
    app_config: AppConfig, env_config: EnvironmentConfig, dry_run: bool = False
) -> DiscoveryPipeline:
    """Wire transport, scoring engine and notifier into a pipeline."""
    timeout = app_config.advanced.http_request_timeout

    transport = HttpTransport(
        timeout=timeout,
        user_agent=app_config.advanced.user_agent,
        max_redirects=app_config.advanced.max_redirects,
    )
    scoring_engine = ScoringEngine(app_config.criteria, app_config.scoring)
    notifier = Notifier(
        app_config.notifications,
        credentials=None if dry_run else env_config.telegram,
        telegram_client=TelegramClient(
            api_base=app_config.notifications.telegram_api_base,
            timeout=timeout,
        ),
    )

    return DiscoveryPipeline(
        app_config=app_config,
        transport=transport,
        scoring_engine=scoring_engine,
        notifier=notifier,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="platform-monitor",
        description="Platform Monitor - discover new platforms and signup bonuses and deliver a ranked digest",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Ignore Telegram credentials and print the digest to stdout",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run one discovery pass.

    Returns:
        Exit code: 0 once a run completes (even if delivery failed),
        1 on configuration or fatal errors.
    """
    start_time = time.time()
    args = parse_args(argv)
    load_dotenv()

    try:
        # Step 1: Load configuration (before logging, for the format)
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        # Step 2: Configure logging
        environment = os.environ.get("ENVIRONMENT", "local")
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=environment,
        )

        enabled_sources = app_config.get_enabled_sources()
        logger.info(
            "Platform Monitor starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "dry_run": args.dry_run,
                "enabled_sources": [s.name for s in enabled_sources],
                "channel_configured": env_config.channel_configured and not args.dry_run,
            },
        )
        logger.info(
            f"Categories: {', '.join(app_config.criteria.categories)}",
            extra={"event": "config.criteria.categories"},
        )
        logger.info(
            f"Bonus keywords: {', '.join(app_config.criteria.bonus_keywords)}",
            extra={"event": "config.criteria.bonus_keywords"},
        )

        # Step 3: Build and run the pipeline
        pipeline = build_pipeline(app_config, env_config, dry_run=args.dry_run)
        result = pipeline.run_once()

        logger.info(
            f"Run completed: {result.total_extracted} extracted, "
            f"{result.total_after_dedup} unique, "
            f"{result.total_ranked} ranked, "
            f"delivery {result.delivery.status.value}",
            extra={
                "event": "service.run.completed",
                "run_id": result.run_id,
                "duration_seconds": result.total_duration_seconds,
                "failed_sources": result.failed_sources,
                "degraded_sources": result.degraded_sources,
                "delivery_failed": result.delivery_failed,
            },
        )

        uptime_seconds = time.time() - start_time
        logger.info(
            "Platform Monitor stopped",
            extra={"event": "service.stopping", "uptime_seconds": round(uptime_seconds, 2)},
        )
        return 0

    except ConfigurationError as e:
        # Configuration errors are already formatted nicely
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            "Configuration error",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during run",
            extra={
                "event": "service.run.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
