"""Shared numeric helpers for the control loop."""

from __future__ import annotations

import math


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into ``[low, high]``; NaN collapses to ``low``."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return low
    if math.isnan(number):
        return low
    return min(max(number, low), high)


def ema(prev: float, sample: float, alpha: float) -> float:
    bounded_sample = clamp(sample, 0.0, 1.0)
    bounded_prev = clamp(prev, 0.0, 1.0)
    return alpha * bounded_sample + (1 - alpha) * bounded_prev


def smoothstep(value: float, edge0: float, edge1: float) -> float:
    """Cubic Hermite ease (3t^2 - 2t^3) of ``value`` across ``[edge0, edge1]``."""
    t = clamp((clamp(value, edge0, edge1) - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3 - 2 * t)


def exploration_ramp(value: float, exponent: float = 0.85) -> float:
    # Early part of the ramp stays calm.
    return clamp(value, 0.0, 1.0) ** exponent


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
