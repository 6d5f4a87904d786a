"""pidsim library providing a PID step-response simulator."""

from .errors import ConfigurationError, InputParseError
from .export import trace_to_csv, trace_to_payload
from .pid_models import (
    DampedSpringPlant,
    DelayBuffer,
    PIDController,
)
from .preferences import (
    ControllerPrefs,
    Preferences,
    SimulationPrefs,
    load_preferences,
)
from .simulation import (
    ControllerParams,
    SimulationConfig,
    SimulationSession,
    SimulationTrace,
    compute_step_metrics,
    parse_gain,
    run_simulation,
)

__all__ = [
    "ConfigurationError",
    "InputParseError",
    "trace_to_payload",
    "trace_to_csv",
    "PIDController",
    "DelayBuffer",
    "DampedSpringPlant",
    "Preferences",
    "ControllerPrefs",
    "SimulationPrefs",
    "load_preferences",
    "ControllerParams",
    "SimulationConfig",
    "SimulationSession",
    "SimulationTrace",
    "compute_step_metrics",
    "parse_gain",
    "run_simulation",
]
