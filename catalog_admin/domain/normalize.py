import math
from typing import Any


def normalize_option(raw: str | None) -> str:
    """Canonical form of a brand/category name: trimmed and upper-cased."""
    if raw is None:
        return ""
    return raw.strip().upper()


def normalize_title(raw: str | None) -> str:
    return normalize_option(raw)


def clean_label(raw: str | None) -> str:
    """Trim a free label without touching its case."""
    if raw is None:
        return ""
    return raw.strip()


def union_ordered(existing: list[str], extra: list[str]) -> list[str]:
    """Existing entries first, then any missing entries of `extra` in order."""
    seen = set(existing)
    merged = list(existing)
    for value in extra:
        if value and value not in seen:
            merged.append(value)
            seen.add(value)
    return merged


def dedupe_normalized(values: list[str]) -> list[str]:
    return union_ordered([], [normalize_option(v) for v in values])


def parse_price(raw: Any) -> float:
    """
    Permissive number parsing for price fields.
    Empty, non-numeric, NaN or infinite input becomes 0 instead of an error.
    """
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, int | float):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return 0
        try:
            value = float(text)
        except ValueError:
            return 0
    if math.isnan(value) or math.isinf(value):
        return 0
    return value
