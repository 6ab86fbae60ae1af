"""Template context for digest rendering.

This module turns ranked records into the display form shared by the
Telegram and console templates.
"""

from typing import Dict, List, Sequence

from platform_monitor.domain.models import ScoredRecord
from platform_monitor.utils.text import truncate_text
from platform_monitor.utils.timestamps import format_timestamp

MARKER_MONETARY = "\U0001F4B0"  # money bag
MARKER_BONUS = "\U0001F381"  # gift
MARKER_GENERIC = "\U0001F680"  # rocket

NO_TAGLINE = "No tagline"
TAGLINE_MAX_LENGTH = 200


def format_amount(amount: float) -> str:
    """Format a currency amount: 500 -> "$500", 1234.5 -> "$1,234.50"."""
    if float(amount).is_integer():
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def select_marker(record: ScoredRecord) -> str:
    """Monetary offers outrank keyword bonuses, which outrank plain launches."""
    if record.has_amount:
        return MARKER_MONETARY
    if record.has_bonus_signal:
        return MARKER_BONUS
    return MARKER_GENERIC


def build_record_context(record: ScoredRecord) -> Dict:
    """Build the display dictionary for one ranked record.

    Returns:
        Dictionary with keys:
        - marker: Emoji marker (monetary, bonus or generic)
        - title: Name, plus the amount in parentheses when one exists
        - name, tagline, source, url: Record fields (tagline shortened, "No tagline" when empty)
        - amount: Formatted amount or None
        - score: Numeric score
        - published: Publication time as ISO 8601 UTC, "" when unknown
    """
    amount = format_amount(record.monetary_amount) if record.has_amount else None
    return {
        "marker": select_marker(record),
        "title": f"{record.name} ({amount})" if amount else record.name,
        "name": record.name,
        "tagline": truncate_text(record.tagline, max_length=TAGLINE_MAX_LENGTH) or NO_TAGLINE,
        "source": record.source,
        "url": record.url,
        "amount": amount,
        "score": record.score,
        "published": format_timestamp(record.published_at),
    }


def build_digest_context(records: Sequence[ScoredRecord]) -> Dict:
    """Build the template context for a whole digest."""
    items: List[Dict] = [build_record_context(record) for record in records]
    return {"items": items, "count": len(items)}
