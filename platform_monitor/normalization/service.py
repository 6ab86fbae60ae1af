"""Name normalization and de-duplication of canonical records.

Sources overlap: the same launch can show up on two feeds, and the card
extractor can see an offer in both its passes. Records are considered
duplicates when their names normalize to the same key; the first one in
source-traversal order is kept.
"""

import re
from typing import Iterable, List, Optional

from platform_monitor.domain.models import CanonicalRecord
from platform_monitor.logging import get_logger

logger = get_logger(__name__, component="normalization")

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_name(name: Optional[str]) -> str:
    """Build the de-duplication key for a record name.

    Trims, collapses internal whitespace and casefolds, so "Foo", "  foo  "
    and "FOO" share a key.

    Args:
        name: Display name (None is treated as empty)

    Returns:
        Normalized key (empty string for empty input)
    """
    if not name:
        return ""
    return _WHITESPACE_RE.sub(" ", name.strip()).casefold()


def dedupe(records: Iterable[CanonicalRecord]) -> List[CanonicalRecord]:
    """Drop records whose normalized name was already seen.

    Args:
        records: Records in source-traversal order

    Returns:
        New list holding the first occurrence of every name, order preserved
    """
    seen = {}
    unique = []

    for record in records:
        key = normalize_name(record.name)
        if key in seen:
            logger.debug(
                f"Dropping duplicate record '{record.name}' from {record.source}",
                extra={
                    "event": "normalization.record.duplicate",
                    "record_name": record.name,
                    "source": record.source,
                    "kept_source": seen[key],
                },
            )
            continue
        seen[key] = record.source
        unique.append(record)

    return unique
