"""Shared construction helpers for stores, recorders and task pilots."""

from __future__ import annotations

from pathlib import Path

from navforge.config import Settings
from navforge.pilot import TaskPilot
from navforge.profiles import get_profile, load_role_defaults
from navforge.runtime.events import PerformanceLogger
from navforge.runtime.settings import DirectorSettingsStore
from navforge.runtime.storage import KeyValueStore, MemoryKeyValueStore, SqliteKeyValueStore
from navforge.state import RoleDefaults
from navforge.util.logging import get_logger


def build_store(settings: Settings, store_path: str | None = None) -> KeyValueStore:
    path = store_path or settings.store_path
    if path:
        return SqliteKeyValueStore(Path(path))
    return MemoryKeyValueStore()


def build_role_defaults(
    settings: Settings, profile: str | None = None, profile_path: str | None = None
) -> RoleDefaults:
    path = profile_path or settings.profile_path
    if path:
        return load_role_defaults(Path(path))
    return get_profile(profile or settings.profile)


def build_recorder(settings: Settings, store: KeyValueStore) -> PerformanceLogger:
    return PerformanceLogger(store, max_events=settings.max_events)


def build_pilot(
    settings: Settings,
    task_id: str,
    store: KeyValueStore | None = None,
    defaults: RoleDefaults | None = None,
) -> TaskPilot:
    """Build a pilot for one task; the store may be shared, the pilot may not."""
    store = store or build_store(settings)
    director_defaults = settings.director_defaults()
    return TaskPilot(
        task_id=task_id,
        defaults=defaults or build_role_defaults(settings),
        recorder=build_recorder(settings, store),
        settings_store=DirectorSettingsStore(store, defaults=director_defaults),
        director_defaults=director_defaults,
        logger=get_logger("navforge.pilot", settings.log_level.upper()),
    )
