"""De-duplication of canonical records by normalized name."""

from .service import dedupe, normalize_name

__all__ = [
    "normalize_name",
    "dedupe",
]
