"""Scoring engine ranking records against interest criteria.

score = min(amount / amount_divisor, amount_cap)
      + bonus_weight    * has_bonus_signal
      + category_weight * has_category_signal
      + min(popularity / popularity_divisor, popularity_cap)

Records scoring zero are not interesting and are dropped; the rest are
sorted by descending score with a stable sort, so ties keep input order.
"""

import logging
from typing import Iterable, List, Tuple

from platform_monitor.config.models import CriteriaConfig, ScoringWeights
from platform_monitor.domain.models import CanonicalRecord, ScoredRecord

logger = logging.getLogger(__name__)


class ScoringEngine:
    """Scores and ranks canonical records.

    The engine holds only its criteria and weights, so scoring the same
    input twice yields identical scores and order.
    """

    def __init__(self, criteria: CriteriaConfig, weights: ScoringWeights, logger_instance: logging.Logger = None):
        """Initialize ScoringEngine.

        Args:
            criteria: Bonus keywords and categories (already lowercased)
            weights: Weights, divisors and caps of the formula
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.criteria = criteria
        self.weights = weights
        self.logger = logger_instance or logger

    def score(self, records: Iterable[CanonicalRecord]) -> List[ScoredRecord]:
        """Score records and return the ranking.

        Args:
            records: De-duplicated canonical records

        Returns:
            ScoredRecords with score > 0, highest first
        """
        scored = []
        excluded = 0

        for record in records:
            result = self.score_record(record)
            if result.score <= 0:
                excluded += 1
                self.logger.debug(
                    f"Excluding zero-score record: {record.name}",
                    extra={"event": "scoring.record.excluded", "record_name": record.name, "source": record.source},
                )
                continue
            scored.append(result)

        ranked = sorted(scored, key=lambda r: -r.score)

        self.logger.info(
            f"Ranked {len(ranked)} records ({excluded} excluded)",
            extra={"event": "scoring.completed", "ranked": len(ranked), "excluded": excluded},
        )
        return ranked

    def score_record(self, record: CanonicalRecord) -> ScoredRecord:
        """Compute the score and signals for a single record."""
        has_bonus_signal, has_category_signal = self._signals(record)
        w = self.weights

        total = 0.0
        if record.has_amount:
            total += min(record.monetary_amount / w.amount_divisor, w.amount_cap)
        if has_bonus_signal:
            total += w.bonus_weight
        if has_category_signal:
            total += w.category_weight
        total += min(record.popularity / w.popularity_divisor, w.popularity_cap)

        return ScoredRecord.from_record(
            record,
            score=total,
            has_bonus_signal=has_bonus_signal,
            has_category_signal=has_category_signal,
        )

    def _signals(self, record: CanonicalRecord) -> Tuple[bool, bool]:
        text = record.matchable_text()
        has_bonus = record.has_amount or self._contains_any(text, self.criteria.bonus_keywords)
        has_category = self._contains_any(text, self.criteria.categories)
        return has_bonus, has_category

    @staticmethod
    def _contains_any(text: str, terms: List[str]) -> bool:
        """Substring match of any term in already-lowercased text."""
        return any(term in text for term in terms)
