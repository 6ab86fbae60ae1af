"""Factory function for instantiating source extractors."""

import logging

from platform_monitor.config.exceptions import ConfigurationError
from platform_monitor.config.models import CriteriaConfig, SourceConfig, SourceKind

from .base import BaseExtractor
from .cards import CardExtractor
from .embedded_json import EmbeddedJsonExtractor
from .search_api import SearchApiExtractor

logger = logging.getLogger(__name__)


def get_extractor(source_config: SourceConfig, criteria: CriteriaConfig) -> BaseExtractor:
    """Instantiate the extractor matching a source's kind.

    Args:
        source_config: Source configuration (kind, name, limits, markers)
        criteria: Interest criteria; card sources take min_bonus_amount from it

    Returns:
        Extractor bound to the source's name and record limit

    Raises:
        ConfigurationError: If the kind is not supported or the extractor
            rejects the source's settings

    Example:
        >>> source = SourceConfig(name="HN", kind="search-api", url="https://hn.algolia.com/api/v1/search")
        >>> extractor = get_extractor(source, CriteriaConfig())
        >>> result = extractor.extract(transport.fetch(source.url))
    """
    kind = source_config.kind.value if isinstance(source_config.kind, SourceKind) else str(source_config.kind)

    extractor_map = {
        SourceKind.EMBEDDED_JSON.value: lambda: EmbeddedJsonExtractor(
            source_config.name,
            max_records=source_config.max_records,
        ),
        SourceKind.SEARCH_API.value: lambda: SearchApiExtractor(
            source_config.name,
            max_records=source_config.max_records,
            title_marker=source_config.title_marker,
        ),
        SourceKind.CARD_HTML.value: lambda: CardExtractor(
            source_config.name,
            max_records=source_config.max_records,
            min_bonus_amount=criteria.min_bonus_amount,
            card_marker=source_config.card_marker,
        ),
    }

    build = extractor_map.get(kind.lower())
    if build is None:
        supported = ", ".join(sorted(extractor_map.keys()))
        raise ConfigurationError(
            f"Unknown source kind for source '{source_config.name}': {kind}",
            errors=[f"sources.{source_config.name}.kind: '{kind}' is not supported"],
            suggestions=[f"Use one of: {supported}"],
        )

    try:
        extractor = build()
    except ValueError as e:
        raise ConfigurationError(
            f"Failed to create {kind} extractor for source '{source_config.name}': {e}"
        ) from e

    logger.debug(
        "Created extractor instance",
        extra={
            "event": "extractor.created",
            "source_kind": kind,
            "extractor_class": type(extractor).__name__,
            **extractor.describe(),
        },
    )
    return extractor
