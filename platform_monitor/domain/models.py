"""Core domain models for discovered opportunities.

This module defines the data structures shared by every pipeline stage:
- CanonicalRecord: normalized opportunity produced by a source extractor
- ScoredRecord: CanonicalRecord plus the score and signals computed for one run
"""

import re
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from platform_monitor.utils.timestamps import ensure_utc


class RecordKind(str, Enum):
    """Kind of opportunity a record describes."""

    STARTUP = "startup"
    SIGNUP_BONUS = "signup-bonus"
    UNSPECIFIED = "unspecified"


class CanonicalRecord(BaseModel):
    """Normalized opportunity record.

    Every extractor reduces its source to this shape. Records are frozen:
    later stages derive new objects instead of editing them.
    """

    name: str = Field(..., description="Name of the platform or offer")
    tagline: str = Field("", description="Short free-text description")
    url: str = Field(..., description="Link to the source item")
    source: str = Field(..., description="Origin tag, e.g. ProductHunt")
    kind: RecordKind = Field(RecordKind.UNSPECIFIED, description="Opportunity kind")
    monetary_amount: Optional[float] = Field(
        None, ge=0, description="Bonus amount in currency units, bonus offers only"
    )
    popularity: int = Field(0, ge=0, description="Vote or point count")
    published_at: Optional[datetime] = Field(
        None, description="Source-provided timestamp (UTC), display only"
    )

    model_config = {"frozen": True}

    @field_validator("name", "url", "source")
    @classmethod
    def require_text(cls, v: str) -> str:
        """Strip and collapse whitespace; reject empty values."""
        collapsed = re.sub(r"\s+", " ", v or "").strip()
        if not collapsed:
            raise ValueError("Field cannot be empty or whitespace-only")
        return collapsed

    @field_validator("tagline", mode="before")
    @classmethod
    def clean_tagline(cls, v: Optional[str]) -> str:
        if v is None:
            return ""
        return re.sub(r"\s+", " ", str(v)).strip()

    @field_validator("popularity", mode="before")
    @classmethod
    def default_popularity(cls, v):
        """Unknown popularity counts as zero."""
        return 0 if v is None else v

    @field_validator("published_at")
    @classmethod
    def published_at_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @property
    def has_amount(self) -> bool:
        """True when the record carries a positive monetary amount."""
        return self.monetary_amount is not None and self.monetary_amount > 0

    def matchable_text(self) -> str:
        """Lowercase name and tagline, the text keyword signals are matched against."""
        return f"{self.name} {self.tagline}".lower()


class ScoredRecord(CanonicalRecord):
    """A CanonicalRecord ranked for a single run.

    Built by the scoring engine; discarded after the digest is delivered.
    """

    score: float = Field(..., ge=0, description="Combined ranking score")
    has_bonus_signal: bool = Field(False, description="Bonus keyword or amount present")
    has_category_signal: bool = Field(False, description="Category keyword present")

    @classmethod
    def from_record(
        cls,
        record: CanonicalRecord,
        score: float,
        has_bonus_signal: bool,
        has_category_signal: bool,
    ) -> "ScoredRecord":
        """Derive a scored record without touching the original."""
        return cls(
            **record.model_dump(exclude={"score", "has_bonus_signal", "has_category_signal"}),
            score=score,
            has_bonus_signal=has_bonus_signal,
            has_category_signal=has_category_signal,
        )
