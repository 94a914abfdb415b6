from __future__ import annotations

import math
import re
from typing import Any

LEADING_INTEGER_PATTERN = re.compile(r"^\s*([+-]?\d+)")


# -----------------------------------------------------------------------------
def extract_int(value: Any) -> int | None:
    """Parse the leading integer of a loosely typed request value.

    Strings are read up to the first non-digit character ("25rows" gives 25),
    floats are truncated and booleans, None or anything unparsable give None.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    if isinstance(value, str):
        match = LEADING_INTEGER_PATTERN.match(value)
        if match:
            return int(match.group(1))
    return None


# -----------------------------------------------------------------------------
def coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        return default
    if isinstance(value, (int, float)):
        return bool(value)
    return default


# -----------------------------------------------------------------------------
def coerce_int(
    value: Any, default: int, minimum: int | None = None, maximum: int | None = None
) -> int:
    candidate: int
    if isinstance(value, bool):
        candidate = int(value)
    else:
        try:
            candidate = int(value)
        except (TypeError, ValueError):
            candidate = default
    if minimum is not None and candidate < minimum:
        candidate = minimum
    if maximum is not None and candidate > maximum:
        candidate = maximum
    return candidate


# -----------------------------------------------------------------------------
def coerce_str(value: Any, default: str) -> str:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or default
    if value is None:
        return default
    return str(value).strip() or default


# -----------------------------------------------------------------------------
def coerce_str_or_none(value: Any) -> str | None:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


# -----------------------------------------------------------------------------
def coerce_string_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, (list, tuple, set)):
        candidates = list(value)
    elif value is None:
        candidates = []
    else:
        candidates = [value]
    normalized: list[str] = []
    for candidate in candidates:
        if candidate is None:
            continue
        text = (
            candidate.strip() if isinstance(candidate, str) else str(candidate).strip()
        )
        if text:
            normalized.append(text)
    return tuple(normalized)


__all__ = [
    "coerce_bool",
    "coerce_int",
    "coerce_str",
    "coerce_str_or_none",
    "coerce_string_tuple",
    "extract_int",
]
