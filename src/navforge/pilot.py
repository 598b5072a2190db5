"""Per-task wiring of the sampling controller and the navigator director."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Mapping, Sequence

from navforge.constraints import constraint_tuner
from navforge.controller import AdaptiveController
from navforge.director import DirectorContextMeta, DirectorService
from navforge.profiles import DEFAULT_ROLE_DEFAULTS
from navforge.runtime.events import PerformanceLogger
from navforge.runtime.settings import (
    DirectorSettingsConfig,
    DirectorSettingsStore,
    resolve_director_options,
)
from navforge.sampling import ModelCapability, apply_model_caps, director_map
from navforge.state import (
    ConstraintTuning,
    ControlState,
    DirectorDecision,
    DirectorProposal,
    LLMSettings,
    Role,
    RoleDefaults,
    Telemetry,
)
from navforge.util.logging import get_logger
from navforge.util.loop_score import LoopDetector


@dataclass(frozen=True)
class StepPlan:
    state: ControlState
    planner: LLMSettings
    navigator: LLMSettings
    constraints: ConstraintTuning


class TaskPilot:
    """Owns the controller and director for one task.

    The step loop calls ``observe`` once a step completes, reads ``sampling`` before
    each model call and calls ``arbitrate`` when both navigators have proposed.
    Instances must not be shared between tasks.
    """

    def __init__(
        self,
        task_id: str,
        defaults: RoleDefaults | None = None,
        recorder: PerformanceLogger | None = None,
        settings_store: DirectorSettingsStore | None = None,
        model_caps: Mapping[Role, ModelCapability] | None = None,
        director_defaults: DirectorSettingsConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.task_id = task_id
        self.defaults = defaults or DEFAULT_ROLE_DEFAULTS
        self.settings_store = settings_store
        self.director_defaults = director_defaults
        self.model_caps = dict(model_caps or {})
        self.logger = logger or get_logger("navforge.pilot")
        self.controller = AdaptiveController(logger=self.logger)
        self.director = DirectorService(recorder=recorder, logger=self.logger)
        self.loop_detector = LoopDetector()
        self.step = 0

    @property
    def state(self) -> ControlState:
        return self.controller.state

    def observe(self, telemetry: Telemetry) -> StepPlan:
        self.step += 1
        self.controller.update(telemetry)
        return self.plan()

    def loop_score(self, actions: Sequence[dict[str, Any]]) -> float:
        """Record the actions executed this step and return the resulting loop score."""
        return self.loop_detector.observe(actions)

    def sampling(self, role: Role | str, token_buffer_ratio: float | None = None) -> LLMSettings:
        resolved = Role(role)
        settings = director_map(
            resolved,
            self.state.e,
            self.state.g,
            self.defaults,
            token_buffer_ratio=token_buffer_ratio,
        )
        caps = self.model_caps.get(resolved)
        if caps is not None:
            settings = apply_model_caps(settings, caps)
        return settings

    def constraints(self) -> ConstraintTuning:
        return constraint_tuner(self.state.g)

    def plan(self, token_buffer_ratio: float | None = None) -> StepPlan:
        return StepPlan(
            state=self.state,
            planner=self.sampling(Role.PLANNER, token_buffer_ratio),
            navigator=self.sampling(Role.NAVIGATOR, token_buffer_ratio),
            constraints=self.constraints(),
        )

    def arbitrate(
        self,
        proposals: Sequence[DirectorProposal],
        overrides: Mapping[str, Any] | None = None,
    ) -> DirectorDecision:
        """Pick a proposal for the current step.

        Raises ``NoProposalsError`` when ``proposals`` is empty; the pilot's own state
        is left untouched in that case.
        """
        options = resolve_director_options(
            self.settings_store,
            overrides,
            defaults=self.director_defaults,
            logger=self.logger,
        )
        meta = DirectorContextMeta(task_id=self.task_id, step=self.step)
        return self.director.choose(proposals, meta, options)

    def reset(self) -> None:
        self.controller.reset()
        self.director.reset()
        self.loop_detector.reset()
        self.step = 0
