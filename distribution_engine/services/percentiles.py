"""Group percentile points into symmetric bands around a primary percentile.

Given the points computed for P10, P25, P50, P75, P90 with primary P50, the
result is the P50 line, the bands P25-P75 and P10-P90 (fading outwards) and
no leftovers. When one side has more points than the other, the surplus is
returned as single lines.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Union

from distribution_engine.core.config import settings
from distribution_engine.models.distribution import (
    PercentileOrganization,
    PercentilePair,
    PercentilePoint,
)

PointInput = Union[PercentilePoint, Mapping[str, Any]]


def _format_percentile(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def pair_name(lower: float, upper: float) -> str:
    return f"P{_format_percentile(lower)}-P{_format_percentile(upper)}"


def organize_percentiles(
    points: Iterable[PointInput] | None, primary_percentile_value: float | None = None
) -> PercentileOrganization:
    """Partition percentile points into primary, symmetric pairs and singles.

    Args:
        points: Points with ``percentile.value``, ``x`` and ``y``
        primary_percentile_value: Percentile treated as the central estimate
            (default from settings, normally 50)

    Returns:
        PercentileOrganization. The primary is the exact match, or the middle
        sorted point when there is no match and at least two points. Pair ``i``
        (counting outwards) gets opacity ``0.3 - 0.1 * i``, unclamped.
    """
    if primary_percentile_value is None:
        primary_percentile_value = settings.default_primary_percentile

    ordered = sorted(
        (p if isinstance(p, PercentilePoint) else PercentilePoint.model_validate(p) for p in points or []),
        key=lambda p: p.percentile.value,
    )
    if not ordered:
        return PercentileOrganization()

    match = next((p for p in ordered if p.percentile.value == primary_percentile_value), None)

    if len(ordered) == 1:
        return PercentileOrganization(primary=match, singles=ordered)

    primary = match if match is not None else ordered[len(ordered) // 2]
    base_opacity = settings.percentile_pair_base_opacity

    if len(ordered) == 2:
        if match is None:
            return PercentileOrganization(primary=primary, singles=ordered)
        first, second = ordered
        # the primary side stays empty; it is drawn as its own line
        pair = PercentilePair(
            lower=None if first is match else first,
            upper=None if second is match else second,
            opacity=base_opacity,
            name=pair_name(first.percentile.value, second.percentile.value),
        )
        return PercentileOrganization(primary=primary, percentile_pairs=[pair])

    primary_value = primary.percentile.value
    below = [p for p in ordered if p.percentile.value < primary_value]
    above = [p for p in ordered if p.percentile.value > primary_value]
    max_pairs = min(len(below), len(above))

    pairs = []
    for i in range(max_pairs):
        lower = below[len(below) - 1 - i]
        upper = above[i]
        pairs.append(
            PercentilePair(
                lower=lower,
                upper=upper,
                opacity=base_opacity - i * settings.percentile_pair_opacity_step,
                name=pair_name(lower.percentile.value, upper.percentile.value),
            )
        )

    singles = below[: len(below) - max_pairs] + above[max_pairs:]
    return PercentileOrganization(primary=primary, percentile_pairs=pairs, singles=singles)
