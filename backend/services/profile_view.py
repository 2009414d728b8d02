import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

PLACEHOLDER = "N/A"


def safe_get(obj: Any, path: str, default: Any = None) -> Any:
    """
    Walk a dotted path through nested mappings. A missing segment, or a
    non-mapping along the way, yields `default`; a present null leaf is
    returned as None.
    """
    current = obj
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _one_decimal(value: float) -> str:
    # ties round away from zero, matching the dashboard's toFixed(1)
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_number(value: Any) -> Any:
    if _is_number(value):
        if value >= 1_000_000:
            return f"{_one_decimal(value / 1_000_000)}M"
        if value >= 1_000:
            return f"{_one_decimal(value / 1_000)}K"
        return f"{value:,}"
    return value or PLACEHOLDER


def format_score(value: Any) -> str:
    if _is_number(value):
        return _one_decimal(value)
    return PLACEHOLDER


def score_category(value: Any) -> str:
    if not _is_number(value):
        return "Unknown"
    if value >= 7:
        return "Excellent"
    if value >= 5:
        return "Good"
    if value >= 3:
        return "Fair"
    return "Poor"


def score_color(value: Any) -> str:
    if not _is_number(value):
        return "gray"
    if value >= 7:
        return "green"
    if value >= 5:
        return "blue"
    if value >= 3:
        return "yellow"
    return "red"


def risk_color(level: Any) -> str:
    return {
        "low": "green",
        "medium": "yellow",
        "high": "red",
    }.get(str(level or "").strip().lower(), "gray")
