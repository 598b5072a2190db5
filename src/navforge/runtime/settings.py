"""Persisted director and general agent settings."""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from pydantic import BaseModel

from navforge.director import DirectorCtlOptions
from navforge.runtime.storage import KeyValueStore
from navforge.util.logging import get_logger, log_event
from navforge.util.numeric import clamp

DIRECTOR_SETTINGS_KEY = "director-settings"
GENERAL_SETTINGS_KEY = "general-settings"


class DirectorSettingsConfig(BaseModel):
    vision_score_offset: float = 0.05
    hysteresis_margin: float = 0.08
    prefer_dom_on_tie: bool = True


class GeneralSettingsConfig(BaseModel):
    max_steps: int = 100
    max_actions_per_step: int = 5
    max_failures: int = 3
    use_vision: bool = True
    use_vision_for_planner: bool = True
    planning_interval: int = 3
    display_highlights: bool = True
    replay_historical_tasks: bool = True
    vision_navigation_ratio: float = 0.1


DEFAULT_DIRECTOR_SETTINGS = DirectorSettingsConfig()
DEFAULT_GENERAL_SETTINGS = GeneralSettingsConfig()


def _known_fields(payload: Any, defaults: Mapping[str, Any]) -> dict[str, Any]:
    if not isinstance(payload, Mapping):
        return {}
    return {key: value for key, value in payload.items() if key in defaults}


def normalize_director_settings(
    payload: Mapping[str, Any] | None,
    defaults: DirectorSettingsConfig | None = None,
) -> DirectorSettingsConfig:
    """Merge ``payload`` over ``defaults`` (the builtin defaults when omitted).

    Both numeric fields end up in ``[0, 1]`` (NaN and unparsable values become 0) and
    ``prefer_dom_on_tie`` is coerced with ``bool``. Unknown keys are ignored.
    """
    merged = (defaults or DEFAULT_DIRECTOR_SETTINGS).model_dump()
    merged.update(_known_fields(payload, merged))
    return DirectorSettingsConfig(
        vision_score_offset=clamp(merged["vision_score_offset"], 0.0, 1.0),
        hysteresis_margin=clamp(merged["hysteresis_margin"], 0.0, 1.0),
        prefer_dom_on_tie=bool(merged["prefer_dom_on_tie"]),
    )


def _finite_ratio(value: Any) -> float:
    try:
        ratio = float(value)
    except (TypeError, ValueError):
        return DEFAULT_GENERAL_SETTINGS.vision_navigation_ratio
    if not math.isfinite(ratio):
        return DEFAULT_GENERAL_SETTINGS.vision_navigation_ratio
    return clamp(ratio, 0.0, 1.0)


def normalize_general_settings(payload: Mapping[str, Any] | None) -> GeneralSettingsConfig:
    """Merge ``payload`` over the defaults.

    Vision usage and historical replay are always enabled regardless of the stored
    values; ``vision_navigation_ratio`` is clamped to ``[0, 1]`` and a non-finite
    ratio falls back to the default.
    """
    merged = DEFAULT_GENERAL_SETTINGS.model_dump()
    merged.update(_known_fields(payload, merged))
    merged["use_vision"] = True
    merged["use_vision_for_planner"] = True
    merged["replay_historical_tasks"] = True
    merged["vision_navigation_ratio"] = _finite_ratio(merged["vision_navigation_ratio"])
    return GeneralSettingsConfig.model_validate(merged)


class DirectorSettingsStore:
    """Persisted director settings; missing fields fall back to ``defaults``."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = DIRECTOR_SETTINGS_KEY,
        defaults: DirectorSettingsConfig | None = None,
    ) -> None:
        self.store = store
        self.key = key
        self.defaults = normalize_director_settings(None, defaults)

    def get(self, defaults: DirectorSettingsConfig | None = None) -> DirectorSettingsConfig:
        return normalize_director_settings(self.store.get(self.key), defaults or self.defaults)

    def update(self, settings: Mapping[str, Any]) -> DirectorSettingsConfig:
        current = self.get().model_dump()
        merged = normalize_director_settings({**current, **settings}, self.defaults)
        self.store.set(self.key, merged.model_dump())
        return merged

    def reset_to_defaults(self) -> None:
        self.store.set(self.key, self.defaults.model_dump())


class GeneralSettingsStore:
    def __init__(self, store: KeyValueStore, key: str = GENERAL_SETTINGS_KEY) -> None:
        self.store = store
        self.key = key

    def get(self) -> GeneralSettingsConfig:
        return normalize_general_settings(self.store.get(self.key))

    def update(self, settings: Mapping[str, Any]) -> GeneralSettingsConfig:
        current = self.get().model_dump()
        merged = normalize_general_settings({**current, **settings})
        self.store.set(self.key, merged.model_dump())
        return merged

    def reset_to_defaults(self) -> None:
        self.store.set(self.key, DEFAULT_GENERAL_SETTINGS.model_dump())


def resolve_director_options(
    settings_store: DirectorSettingsStore | None,
    overrides: Mapping[str, Any] | None = None,
    defaults: DirectorSettingsConfig | None = None,
    logger: logging.Logger | None = None,
) -> DirectorCtlOptions:
    """Merge defaults, persisted settings and per-call overrides.

    Fields the store has never persisted take their value from ``defaults`` when
    given, otherwise from the store's own defaults.

    A failing settings store never reaches the caller: the failure is logged and the
    defaults are used instead.
    """
    logger = logger or get_logger("navforge.settings")
    base = defaults or DEFAULT_DIRECTOR_SETTINGS
    stored = base
    if settings_store is not None:
        try:
            stored = settings_store.get(defaults)
        except Exception as exc:
            log_event(
                logger,
                logging.WARNING,
                "settings.load_failed",
                store="director",
                error=exc,
                fallback="defaults",
            )
            stored = base
    payload = stored.model_dump()
    payload.update(overrides or {})
    return DirectorCtlOptions.model_validate(payload)
