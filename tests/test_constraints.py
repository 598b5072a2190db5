import math

from navforge.constraints import constraint_tuner


def test_cross_domain_unlocks_above_threshold():
    assert constraint_tuner(0.4).allow_cross_domain_exploration is False
    assert constraint_tuner(0.41).allow_cross_domain_exploration is True


def test_relaxation_and_boldness_follow_glide():
    tuning = constraint_tuner(0.25)
    assert tuning.planner_relaxation == 0.25
    assert math.isclose(tuning.navigator_boldness, 0.5)


def test_glide_is_clamped():
    high = constraint_tuner(3.0)
    assert high.planner_relaxation == 1.0
    assert high.navigator_boldness == 1.0
    low = constraint_tuner(float("nan"))
    assert low.planner_relaxation == 0.0
    assert low.allow_cross_domain_exploration is False
