"""Baseline sampling defaults per role."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError
import yaml

from navforge.state import LLMSettings, RoleDefaults


class ProfileConfigError(ValueError):
    """Raised when a role defaults file is invalid."""


PROFILES: dict[str, RoleDefaults] = {
    "default": RoleDefaults(
        planner=LLMSettings(
            temperature=0.3,
            top_p=0.9,
            frequency_penalty=0.0,
            presence_penalty=0.0,
            max_tokens=4096,
        ),
        navigator=LLMSettings(
            temperature=0.1,
            top_p=0.85,
            frequency_penalty=0.0,
            presence_penalty=0.0,
            max_tokens=2048,
        ),
    ),
    "open_weights": RoleDefaults(
        planner=LLMSettings(
            temperature=0.4,
            top_p=0.9,
            frequency_penalty=0.2,
            presence_penalty=0.1,
            max_tokens=4096,
            top_k=40,
        ),
        navigator=LLMSettings(
            temperature=0.15,
            top_p=0.85,
            frequency_penalty=0.2,
            presence_penalty=0.1,
            max_tokens=2048,
            top_k=20,
        ),
    ),
}

DEFAULT_ROLE_DEFAULTS = PROFILES["default"]


def get_profile(name: str | None) -> RoleDefaults:
    if name and name in PROFILES:
        return PROFILES[name]
    return DEFAULT_ROLE_DEFAULTS


def parse_role_defaults(data: Any, source: str = "profile") -> RoleDefaults:
    """Build role defaults from a mapping; a role missing from it keeps the builtin."""
    if not isinstance(data, dict):
        raise ProfileConfigError(f"{source} must be a mapping.")
    unknown = set(data.keys()) - {"planner", "navigator"}
    if unknown:
        names = ", ".join(sorted(unknown))
        raise ProfileConfigError(f"{source} has unknown roles: {names}.")
    roles: dict[str, LLMSettings] = {}
    for role in ("planner", "navigator"):
        base = DEFAULT_ROLE_DEFAULTS.for_role(role)
        section = data.get(role)
        if section is None:
            roles[role] = base
            continue
        if not isinstance(section, dict):
            raise ProfileConfigError(f"{source}.{role} must be a mapping.")
        try:
            roles[role] = LLMSettings.model_validate({**base.model_dump(), **section})
        except ValidationError as exc:
            fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in exc.errors())
            raise ProfileConfigError(f"{source}.{role} has invalid fields: {fields}.") from exc
    return RoleDefaults(**roles)


def load_role_defaults(path: Path) -> RoleDefaults:
    """Load role defaults from a YAML file with ``planner``/``navigator`` sections."""
    path = Path(path)
    if not path.exists():
        raise ProfileConfigError(f"Profile file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ProfileConfigError(f"Profile file {path} is not valid YAML.") from exc
    return parse_role_defaults(data or {}, source=path.name)
