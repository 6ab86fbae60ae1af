"""Non-fatal configuration checks."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check raw configuration for suspicious but valid settings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    for source in config_dict.get("sources") or []:
        if isinstance(source, dict) and not source.get("enabled", True):
            name = source.get("name", "Unknown")
            warning_messages.append(f"Source '{name}' is disabled and will be skipped")

    criteria = config_dict.get("criteria") or {}
    if isinstance(criteria, dict):
        for key in ("categories", "bonus_keywords"):
            terms = criteria.get(key)
            if isinstance(terms, list) and not terms:
                warning_messages.append(
                    f"criteria.{key} is empty; the matching signal will never fire"
                )

    scoring = config_dict.get("scoring") or {}
    if isinstance(scoring, dict):
        weights = [scoring.get(key) for key in ("bonus_weight", "category_weight")]
        caps = [scoring.get(key) for key in ("amount_cap", "popularity_cap")]
        if all(value == 0 for value in weights + caps):
            warning_messages.append("All scoring weights and caps are 0; nothing will be ranked")

    advanced = config_dict.get("advanced") or {}
    if isinstance(advanced, dict):
        timeout = advanced.get("http_request_timeout")
        if isinstance(timeout, (int, float)) and timeout > 60:
            warning_messages.append(
                f"Long http_request_timeout ({timeout}s) can stall a run on one slow source"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
