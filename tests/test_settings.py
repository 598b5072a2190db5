from typing import Any

from navforge.director import DirectorCtlOptions
from navforge.runtime.settings import (
    DEFAULT_DIRECTOR_SETTINGS,
    DIRECTOR_SETTINGS_KEY,
    DirectorSettingsConfig,
    DirectorSettingsStore,
    GeneralSettingsStore,
    normalize_director_settings,
    normalize_general_settings,
    resolve_director_options,
)
from navforge.runtime.storage import KeyValueStore, MemoryKeyValueStore


class BrokenStore(KeyValueStore):
    def get(self, key: str) -> Any | None:
        raise OSError("disk unavailable")

    def set(self, key: str, value: Any) -> None:
        raise OSError("disk unavailable")


def test_director_settings_are_clamped():
    settings = normalize_director_settings(
        {"vision_score_offset": float("nan"), "hysteresis_margin": 5, "prefer_dom_on_tie": 0}
    )
    assert settings == DirectorSettingsConfig(
        vision_score_offset=0.0, hysteresis_margin=1.0, prefer_dom_on_tie=False
    )


def test_director_settings_ignore_garbage_payload():
    assert normalize_director_settings(None) == DEFAULT_DIRECTOR_SETTINGS
    assert normalize_director_settings(["not", "a", "mapping"]) == DEFAULT_DIRECTOR_SETTINGS
    assert normalize_director_settings({"unknown": 1}) == DEFAULT_DIRECTOR_SETTINGS


def test_general_settings_force_vision_and_replay():
    settings = normalize_general_settings(
        {
            "use_vision": False,
            "use_vision_for_planner": False,
            "replay_historical_tasks": False,
            "max_steps": 40,
            "vision_navigation_ratio": float("inf"),
        }
    )
    assert settings.use_vision is True
    assert settings.use_vision_for_planner is True
    assert settings.replay_historical_tasks is True
    assert settings.max_steps == 40
    assert settings.vision_navigation_ratio == 0.1


def test_general_settings_ratio_clamped():
    assert normalize_general_settings({"vision_navigation_ratio": 1.7}).vision_navigation_ratio == 1.0
    assert normalize_general_settings({"vision_navigation_ratio": "x"}).vision_navigation_ratio == 0.1


def test_director_store_update_merges_partials():
    backing = MemoryKeyValueStore()
    store = DirectorSettingsStore(backing)
    store.update({"hysteresis_margin": 0.2})
    store.update({"prefer_dom_on_tie": False})
    settings = store.get()
    assert settings.hysteresis_margin == 0.2
    assert settings.prefer_dom_on_tie is False
    assert settings.vision_score_offset == 0.05
    assert backing.get(DIRECTOR_SETTINGS_KEY)["hysteresis_margin"] == 0.2
    store.reset_to_defaults()
    assert store.get() == DEFAULT_DIRECTOR_SETTINGS


def test_general_store_update_and_reset():
    store = GeneralSettingsStore(MemoryKeyValueStore())
    updated = store.update({"max_failures": 7, "use_vision": False})
    assert updated.max_failures == 7
    assert updated.use_vision is True
    assert store.get().max_failures == 7
    store.reset_to_defaults()
    assert store.get().max_failures == 3


def test_resolve_merges_stored_and_overrides():
    store = DirectorSettingsStore(MemoryKeyValueStore())
    store.update({"vision_score_offset": 0.1})
    options = resolve_director_options(store, {"prefer_dom_on_tie": False})
    assert options == DirectorCtlOptions(
        vision_score_offset=0.1, hysteresis_margin=0.08, prefer_dom_on_tie=False
    )


def test_resolve_falls_back_to_defaults_on_store_failure(caplog):
    options = resolve_director_options(
        DirectorSettingsStore(BrokenStore()), {"hysteresis_margin": 0.3}
    )
    assert options.vision_score_offset == 0.05
    assert options.hysteresis_margin == 0.3
    assert "settings.load_failed" in caplog.text


def test_resolve_without_store_uses_supplied_defaults():
    defaults = DirectorSettingsConfig(vision_score_offset=0.0)
    options = resolve_director_options(None, defaults=defaults)
    assert options.vision_score_offset == 0.0


def test_store_normalizes_over_supplied_defaults():
    custom = DirectorSettingsConfig(vision_score_offset=0.2, hysteresis_margin=0.0)
    store = DirectorSettingsStore(MemoryKeyValueStore(), defaults=custom)
    assert store.get() == custom
    store.update({"prefer_dom_on_tie": False})
    assert store.get().vision_score_offset == 0.2
    assert store.get().prefer_dom_on_tie is False
    store.reset_to_defaults()
    assert store.get() == custom


def test_resolve_applies_defaults_to_fields_missing_from_store():
    backing = MemoryKeyValueStore({DIRECTOR_SETTINGS_KEY: {"vision_score_offset": 0.3}})
    options = resolve_director_options(
        DirectorSettingsStore(backing),
        defaults=DirectorSettingsConfig(hysteresis_margin=0.0),
    )
    assert options.vision_score_offset == 0.3
    assert options.hysteresis_margin == 0.0
