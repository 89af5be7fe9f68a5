"""Numeric inverse-CDF helpers for families without a closed-form quantile.

Two strategies are provided and parameterized by the family's CDF:

- ``bisect_quantile`` for continuous families (gamma): bracket ``[0, k * mean]``,
  widen the upper bound once by the same factor if it does not reach ``p``,
  then bisect for a fixed number of iterations.
- ``summation_quantile`` for discrete families (poisson): walk the PMF by a
  recurrence ratio until the running CDF reaches ``p``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from distribution_engine.core.config import settings

logger = logging.getLogger(__name__)


def bisect_quantile(
    cdf: Callable[[float], float],
    p: float,
    mean: float,
    *,
    lower: float = 0.0,
    max_iterations: int | None = None,
    tolerance: float | None = None,
    upper_multiplier: float | None = None,
) -> float:
    """Invert a monotone CDF on ``[lower, inf)`` by bisection.

    Args:
        cdf: Cumulative distribution function of one argument
        p: Target probability in (0, 1)
        mean: Distribution mean, used to size the initial bracket
        lower: Lower end of the support
        max_iterations: Bisection iterations (default from settings)
        tolerance: Stop once ``|cdf(mid) - p|`` is below this (default from settings)
        upper_multiplier: Bracket factor applied to the mean (default from settings)

    Returns:
        The approximate quantile. ``p <= 0`` returns ``lower``; ``p >= 1`` returns inf.
    """
    if p <= 0:
        return lower
    if p >= 1:
        return math.inf

    max_iterations = settings.quantile_max_iterations if max_iterations is None else max_iterations
    tolerance = settings.quantile_tolerance if tolerance is None else tolerance
    factor = settings.quantile_upper_multiplier if upper_multiplier is None else upper_multiplier

    low = lower
    high = factor * mean if mean > 0 else factor
    if cdf(high) < p:
        high *= factor

    mid = (low + high) / 2
    for iteration in range(max_iterations):
        mid = (low + high) / 2
        value = cdf(mid)
        if abs(value - p) < tolerance:
            logger.debug(f"Bisection converged after {iteration + 1} iterations: p={p}, x={mid}")
            return mid
        if value < p:
            low = mid
        else:
            high = mid

    return mid


def summation_quantile(
    first_term: float,
    ratio: Callable[[int], float],
    p: float,
    *,
    max_k: int | None = None,
) -> int:
    """Find the smallest integer k with ``P(X <= k) >= p`` by summing the PMF.

    Args:
        first_term: ``P(X = 0)``
        ratio: Function returning ``P(X = k) / P(X = k - 1)`` for k >= 1
        p: Target probability
        max_k: Upper cap on k (default from settings)

    Returns:
        The quantile, capped at ``max_k``
    """
    max_k = settings.poisson_max_k if max_k is None else max_k
    if p <= 0:
        return 0

    term = first_term
    cumulative = term
    k = 0
    while cumulative < p and k < max_k:
        k += 1
        term *= ratio(k)
        cumulative += term

    if cumulative < p:
        logger.debug(f"Summation reached cap k={max_k} with cdf={cumulative} < p={p}")
    return k
