"""Text helpers shared by the card extractor and the digest payloads."""

import re
from typing import Optional

_AMOUNT_CLEAN_RE = re.compile(r"[,\s]")


def parse_amount(raw: Optional[str]) -> Optional[float]:
    """Parse a currency amount such as "1,250" or "500.00".

    Returns:
        The amount as float, or None if the string is not a number
    """
    if raw is None:
        return None
    try:
        return float(_AMOUNT_CLEAN_RE.sub("", raw))
    except ValueError:
        return None


def truncate_text(text: str, max_length: int = 200, suffix: str = "...") -> str:
    """Truncate text at a word boundary.

    Example:
        >>> truncate_text("Hello world this is long", max_length=12)
        'Hello...'
    """
    if len(text) <= max_length:
        return text

    cut = text[: max(max_length - len(suffix), 0)]
    if " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return cut + suffix
