"""Adaptive sampling control and navigator arbitration for browser agents."""

from navforge.constraints import constraint_tuner
from navforge.controller import AdaptiveController, compute_controller
from navforge.director import (
    DirectorContextMeta,
    DirectorCtlOptions,
    DirectorService,
    NoProposalsError,
)
from navforge.pilot import TaskPilot
from navforge.sampling import director_map
from navforge.state import (
    DEFAULT_CONTROL_STATE,
    ControlState,
    DirectorDecision,
    DirectorProposal,
    LLMSettings,
    NavigatorMode,
    Role,
    RoleDefaults,
    Telemetry,
)

__all__ = [
    "AdaptiveController",
    "ControlState",
    "DEFAULT_CONTROL_STATE",
    "DirectorContextMeta",
    "DirectorCtlOptions",
    "DirectorDecision",
    "DirectorProposal",
    "DirectorService",
    "LLMSettings",
    "NavigatorMode",
    "NoProposalsError",
    "Role",
    "RoleDefaults",
    "TaskPilot",
    "Telemetry",
    "compute_controller",
    "constraint_tuner",
    "director_map",
]
