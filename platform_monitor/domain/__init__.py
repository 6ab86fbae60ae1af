"""Domain models for the Platform Monitor."""

from .models import CanonicalRecord, RecordKind, ScoredRecord

__all__ = ["CanonicalRecord", "RecordKind", "ScoredRecord"]
