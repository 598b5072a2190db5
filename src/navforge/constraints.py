"""Coarse behavioural constraints derived from goal glide."""

from __future__ import annotations

import math

from navforge.state import ConstraintTuning
from navforge.util.numeric import clamp

CROSS_DOMAIN_GLIDE_THRESHOLD = 0.4


def constraint_tuner(glide: float) -> ConstraintTuning:
    bounded = clamp(glide, 0.0, 1.0)
    return ConstraintTuning(
        allow_cross_domain_exploration=bounded > CROSS_DOMAIN_GLIDE_THRESHOLD,
        planner_relaxation=bounded,
        navigator_boldness=math.sqrt(bounded),
    )
