"""Safe lookups into loosely-typed parameter mappings."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any


def is_number(value: Any) -> bool:
    """Return True for finite real numbers (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def get_param(params: Mapping[str, Any] | None, key: str, default: Any = None) -> Any:
    """Get a parameter value, falling back to ``default`` when missing or None.

    Args:
        params: Parameter mapping (may be None)
        key: Parameter name
        default: Value returned when the parameter is absent

    Returns:
        The stored value, or ``default``
    """
    if not params:
        return default
    value = params.get(key)
    return default if value is None else value


def get_number(params: Mapping[str, Any] | None, *keys: str, default: float = 0.0) -> float:
    """Get the first numeric value among ``keys`` as a float.

    Numeric strings are accepted, anything else falls through to the next key.
    """
    for key in keys:
        value = get_param(params, key)
        if is_number(value):
            return float(value)
        if isinstance(value, str):
            try:
                parsed = float(value)
            except ValueError:
                continue
            if math.isfinite(parsed):
                return parsed
    return default
