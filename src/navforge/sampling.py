"""Map controller state onto concrete LLM sampling parameters."""

from __future__ import annotations

from dataclasses import dataclass
import re

from navforge.state import LLMSettings, Role, RoleDefaults
from navforge.util.numeric import clamp, exploration_ramp, round_half_up

TEMPERATURE_BOOST = {Role.PLANNER: 0.65, Role.NAVIGATOR: 0.45}
TOP_P_BOOST = {Role.PLANNER: 0.25, Role.NAVIGATOR: 0.18}
PENALTY_RELIEF = 0.35
PRESENCE_GLIDE_SHARE = 0.75
TOP_K_BOOST = 0.3
TOP_K_RANGE = (1, 2000)
MAX_TOKENS_EXPLORATION_BONUS = 0.15
MAX_TOKENS_GLIDE_BONUS = 0.1
MAX_TOKENS_BUFFER_BONUS = 0.1
MAX_TOKENS_RANGE = (128, 320_000)


def adjust_temperature(base: float, exploration: float, role: Role) -> float:
    return clamp(base + TEMPERATURE_BOOST[role] * exploration, 0.0, 2.0)


def adjust_top_p(base: float, exploration: float, role: Role) -> float:
    return clamp(base + TOP_P_BOOST[role] * exploration, 0.0, 1.0)


def adjust_penalty(base: float, glide: float) -> float:
    return clamp(base - PENALTY_RELIEF * glide, -2.0, 2.0)


def adjust_top_k(top_k: int | None, exploration: float) -> int | None:
    if top_k is None:
        return None
    delta = round_half_up(top_k * (TOP_K_BOOST * exploration))
    low, high = TOP_K_RANGE
    return int(clamp(top_k + delta, low, high))


def adjust_max_tokens(
    base: int, exploration: float, glide: float, token_buffer_ratio: float | None
) -> int:
    exploration_bonus = round_half_up(
        base * (MAX_TOKENS_EXPLORATION_BONUS * exploration + MAX_TOKENS_GLIDE_BONUS * glide)
    )
    ratio = clamp(token_buffer_ratio if token_buffer_ratio is not None else 0.0, 0.0, 1.0)
    buffer_bonus = round_half_up(base * MAX_TOKENS_BUFFER_BONUS * ratio)
    low, high = MAX_TOKENS_RANGE
    return int(clamp(base + exploration_bonus + buffer_bonus, low, high))


def director_map(
    role: Role | str,
    exploration: float,
    glide: float,
    defaults: RoleDefaults,
    token_buffer_ratio: float | None = None,
) -> LLMSettings:
    """Derive sampling parameters for ``role`` from its baseline.

    Exploration raises temperature, top_p and top_k (through a softening
    ``x ** 0.85`` ramp). Glide relieves the repetition penalties and, together with
    exploration and the token buffer hint, grows the token budget. The planner gets a
    larger boost ceiling than the navigator.
    """
    resolved = Role(role)
    baseline = defaults.for_role(resolved)
    tuned = exploration_ramp(exploration)
    glide = clamp(glide, 0.0, 1.0)
    return LLMSettings(
        temperature=adjust_temperature(baseline.temperature, tuned, resolved),
        top_p=adjust_top_p(baseline.top_p, tuned, resolved),
        frequency_penalty=adjust_penalty(baseline.frequency_penalty, glide),
        presence_penalty=adjust_penalty(
            baseline.presence_penalty, glide * PRESENCE_GLIDE_SHARE
        ),
        top_k=adjust_top_k(baseline.top_k, tuned),
        max_tokens=adjust_max_tokens(baseline.max_tokens, tuned, glide, token_buffer_ratio),
    )


@dataclass(frozen=True)
class ModelCapability:
    top_k: bool
    max_top_k: int | None = None


_TOP_K_FAMILIES = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (r"mistral", r"mixtral", r"llama", r"qwen", r"deepseek", r"command", r"mpt", r"yi")
]
_NO_TOP_K_PROVIDERS = {"ollama", "anthropic"}
DEFAULT_MAX_TOP_K = 200


def get_model_caps(model_id: str | None, provider_id: str | None) -> ModelCapability:
    """Conservative capability lookup; only top_k support is differentiated."""
    model = (model_id or "").lower()
    provider = (provider_id or "").lower()
    if provider in _NO_TOP_K_PROVIDERS:
        return ModelCapability(top_k=False)
    if not any(pattern.search(model) for pattern in _TOP_K_FAMILIES):
        return ModelCapability(top_k=False)
    return ModelCapability(top_k=True, max_top_k=DEFAULT_MAX_TOP_K)


def apply_model_caps(settings: LLMSettings, caps: ModelCapability) -> LLMSettings:
    if settings.top_k is None:
        return settings
    if not caps.top_k:
        return settings.model_copy(update={"top_k": None})
    if caps.max_top_k is not None and settings.top_k > caps.max_top_k:
        return settings.model_copy(update={"top_k": caps.max_top_k})
    return settings
