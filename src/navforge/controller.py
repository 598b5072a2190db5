"""Adaptive sampling controller driven by per-step telemetry."""

from __future__ import annotations

import logging

from navforge.state import DEFAULT_CONTROL_STATE, ControlState, Telemetry
from navforge.util.logging import get_logger, log_event
from navforge.util.numeric import clamp, ema, exploration_ramp, smoothstep

ALPHA_SUCCESS = 0.35
ALPHA_TIMEOUT = 0.25
ALPHA_LOOP = 0.2
WEIGHT_FAIL = 0.7
WEIGHT_TIMEOUT = 0.2
WEIGHT_LOOP = 0.25
SNAP_RESET = True

MIN_SUCCESS_EMA = 0.05
MAX_EMA = 0.999

GLIDE_EDGE_LOW = 0.55
GLIDE_EDGE_HIGH = 0.9
CONTEXT_PRESSURE_WEIGHT = 0.1


def friction_budget(failure_pressure: float, timeout_pressure: float, loop_pressure: float) -> float:
    numerator = (
        WEIGHT_FAIL * failure_pressure
        + WEIGHT_TIMEOUT * timeout_pressure
        + WEIGHT_LOOP * loop_pressure
    )
    denominator = WEIGHT_FAIL + WEIGHT_TIMEOUT + WEIGHT_LOOP
    return clamp(numerator / denominator, 0.0, 1.0)


def context_usage(telemetry: Telemetry) -> float | None:
    """Fraction of the context window consumed, or None for a degenerate window."""
    window = clamp(telemetry.context_window, 0.0, float("inf"))
    if window <= 0:
        return None
    tokens = clamp(telemetry.input_tokens, 0.0, float("inf"))
    return clamp(tokens / window, 0.0, 1.0)


def compute_controller(state: ControlState, telemetry: Telemetry) -> ControlState:
    """Return the control state that follows ``state`` after observing ``telemetry``.

    A successful step snaps the controller back to calm: ``ema_success`` goes to 1 and
    both ``e`` and ``g`` go to 0. Failed steps blend the samples into the EMAs and
    derive exploration from the weighted friction budget, raised slightly when the
    context window is filling up, then shaped by a ``x ** 0.85`` ramp. Glide is a
    smoothstep of ``e`` over ``[0.55, 0.9]``.
    """
    snap = telemetry.last_outcome_success and SNAP_RESET
    success_sample = 1.0 if telemetry.last_outcome_success else 0.0
    timeout_sample = 1.0 if telemetry.timeout_happened else 0.0
    loop_sample = clamp(telemetry.loop_score, 0.0, 1.0)

    ema_success = 1.0 if snap else ema(state.ema_success, success_sample, ALPHA_SUCCESS)
    ema_timeouts = ema(state.ema_timeouts, timeout_sample, ALPHA_TIMEOUT)
    ema_loop = ema(state.ema_loop, loop_sample, ALPHA_LOOP)

    failure_pressure = 1 - clamp(ema_success, MIN_SUCCESS_EMA, MAX_EMA)
    exploration = friction_budget(failure_pressure, ema_timeouts, ema_loop)

    usage = context_usage(telemetry)
    if usage is not None:
        exploration = clamp(exploration + CONTEXT_PRESSURE_WEIGHT * usage, 0.0, 1.0)

    e = 0.0 if snap else exploration_ramp(exploration)
    g = 0.0 if snap else smoothstep(e, GLIDE_EDGE_LOW, GLIDE_EDGE_HIGH)

    return ControlState(
        ema_success=clamp(ema_success, 0.0, 1.0),
        ema_timeouts=clamp(ema_timeouts, 0.0, 1.0),
        ema_loop=clamp(ema_loop, 0.0, 1.0),
        e=clamp(e, 0.0, 1.0),
        g=clamp(g, 0.0, 1.0),
    )


class AdaptiveController:
    """Owns the control state for a single task."""

    def __init__(
        self,
        state: ControlState | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.state = state or DEFAULT_CONTROL_STATE
        self.logger = logger or get_logger("navforge.controller")
        self.steps = 0

    def update(self, telemetry: Telemetry) -> ControlState:
        self.state = compute_controller(self.state, telemetry)
        self.steps += 1
        log_event(
            self.logger,
            logging.DEBUG,
            "controller.update",
            step=self.steps,
            success=telemetry.last_outcome_success,
            e=self.state.e,
            g=self.state.g,
        )
        return self.state

    def reset(self) -> None:
        self.state = DEFAULT_CONTROL_STATE
        self.steps = 0
