"""Typed state shared by the controller, mapper and director."""

from __future__ import annotations

from enum import Enum
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    PLANNER = "planner"
    NAVIGATOR = "navigator"


class NavigatorMode(str, Enum):
    DOM = "dom"
    VISION = "vision"


MAX_TOKEN_COUNT = 2**53


class Telemetry(BaseModel):
    """Per-step observation produced by the step loop.

    Numeric fields never fail validation: token counts are coerced to non-negative
    integers and ``loop_score`` is left for the controller to clamp.
    """

    model_config = ConfigDict(frozen=True)

    last_outcome_success: bool
    timeout_happened: bool = False
    loop_score: float = 0.0
    input_tokens: int = 0
    context_window: int = 0

    @field_validator("loop_score", mode="before")
    @classmethod
    def _coerce_loop_score(cls, value: Any) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0

    @field_validator("input_tokens", "context_window", mode="before")
    @classmethod
    def _coerce_token_count(cls, value: Any) -> int:
        # NaN, negative and unparsable counts become 0; fractions are floored.
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0
        if math.isnan(number) or number <= 0:
            return 0
        return int(min(number, MAX_TOKEN_COUNT))


class ControlState(BaseModel):
    model_config = ConfigDict(frozen=True)

    ema_success: float = 1.0
    ema_timeouts: float = 0.0
    ema_loop: float = 0.0
    e: float = 0.0
    g: float = 0.0


DEFAULT_CONTROL_STATE = ControlState()


class LLMSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    temperature: float
    top_p: float
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0
    max_tokens: int
    top_k: int | None = None

    def to_request_params(self) -> dict[str, Any]:
        """Keyword arguments for a chat completion request; omits an unset top_k."""
        return self.model_dump(exclude_none=True)


class RoleDefaults(BaseModel):
    model_config = ConfigDict(frozen=True)

    planner: LLMSettings
    navigator: LLMSettings

    def for_role(self, role: Role | str) -> LLMSettings:
        return getattr(self, Role(role).value)


class ConstraintTuning(BaseModel):
    model_config = ConfigDict(frozen=True)

    allow_cross_domain_exploration: bool
    planner_relaxation: float
    navigator_boldness: float


class DirectorProposal(BaseModel):
    mode: NavigatorMode
    score: float
    model_output: Any = None
    actions: list[dict[str, Any]] = Field(default_factory=list)
    rationale: str = ""


class DirectorDecision(BaseModel):
    proposal: DirectorProposal
    rationale: str
    scores: dict[NavigatorMode, float]
