"""Source extractors turning raw responses into canonical records.

One extractor per source kind:
- embedded-json: embedded_json.EmbeddedJsonExtractor
- search-api: search_api.SearchApiExtractor
- card-html: cards.CardExtractor

Use the factory function to instantiate extractors:
    from platform_monitor.extractors import get_extractor
    extractor = get_extractor(source_config, app_config.criteria)
    result = extractor.extract(raw_response)
"""

from .base import BaseExtractor, ExtractionPath, ExtractionResult
from .cards import CardExtractor
from .embedded_json import EmbeddedJsonExtractor
from .factory import get_extractor
from .search_api import SearchApiExtractor

__all__ = [
    # Base and factory
    "BaseExtractor",
    "ExtractionPath",
    "ExtractionResult",
    "get_extractor",
    # Extractors
    "EmbeddedJsonExtractor",
    "SearchApiExtractor",
    "CardExtractor",
]
