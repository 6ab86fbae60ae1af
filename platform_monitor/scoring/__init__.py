"""Scoring and ranking of canonical records."""

from .engine import ScoringEngine

__all__ = ["ScoringEngine"]
