"""Closed-loop step simulation of a PID controller driving a delayed spring/damper plant."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .errors import ConfigurationError, InputParseError, require_positive_finite
from .pid_models import DampedSpringPlant, DelayBuffer, PIDController

GAIN_NAMES = ("kp", "ki", "kd")
# Decimal places shown next to each gain slider.
GAIN_DECIMALS = {"kp": 2, "ki": 3, "kd": 2}


@dataclass(frozen=True)
class ControllerParams:
    """Gains for constructing a :class:`PIDController`."""

    kp: float = 0.0
    ki: float = 0.0
    kd: float = 0.0


@dataclass(frozen=True)
class SimulationConfig:
    """Fixed constants of a simulation run (time step, horizon, delay, plant)."""

    dt: float = 0.1
    max_time: float = 300.0
    delay_steps: int = 10
    spring: float = 0.1
    damping: float = 0.5

    @property
    def num_steps(self) -> int:
        return int(math.floor(self.max_time / self.dt))

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` if the run cannot be simulated."""

        require_positive_finite("dt", self.dt)
        require_positive_finite("max_time", self.max_time)
        if isinstance(self.delay_steps, bool) or not isinstance(self.delay_steps, int):
            raise ConfigurationError("delay_steps must be an integer")
        if self.delay_steps < 0:
            raise ConfigurationError("delay_steps must be non-negative")


@dataclass(frozen=True)
class SimulationTrace:
    """Aligned time series produced by one run, plus step metrics.

    Series are tuples and metrics a read-only mapping, so a trace shared
    between subscribers cannot be altered by any of them.
    """

    time: Tuple[float, ...]
    setpoint: Tuple[float, ...]
    pose: Tuple[float, ...]
    output: Tuple[float, ...]
    metrics: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "time", tuple(self.time))
        object.__setattr__(self, "setpoint", tuple(self.setpoint))
        object.__setattr__(self, "pose", tuple(self.pose))
        object.__setattr__(self, "output", tuple(self.output))
        object.__setattr__(self, "metrics", MappingProxyType(dict(self.metrics)))

    @property
    def time_labels(self) -> List[str]:
        """Return the time axis formatted to one decimal for chart labels."""

        return [f"{t:.1f}" for t in self.time]

    def __len__(self) -> int:
        return len(self.time)


def run_simulation(config: SimulationConfig, params: ControllerParams) -> SimulationTrace:
    """Simulate the full horizon from rest and return the trace.

    The recorded output is the controller command at each tick; the plant is
    driven by that command ``delay_steps`` ticks later.
    """

    config.validate()
    dt = config.dt

    controller = PIDController(kp=params.kp, ki=params.ki, kd=params.kd, sample_time=dt)
    plant = DampedSpringPlant(spring=config.spring, damping=config.damping, sample_time=dt)
    delay = DelayBuffer(config.delay_steps)

    controller.reset()
    plant.reset()
    delay.reset()

    time: List[float] = []
    setpoints: List[float] = []
    poses: List[float] = []
    outputs: List[float] = []

    for index in range(config.num_steps):
        t = index * dt
        sp = 1.0 if t > 0 else 0.0

        u = controller.update(sp, plant.pose)
        u_delayed = delay.push_pop(u)
        pose, _vel = plant.update(u_delayed)

        time.append(t)
        setpoints.append(sp)
        poses.append(pose)
        outputs.append(u)

    metrics = compute_step_metrics(time, setpoints, poses)
    return SimulationTrace(time=time, setpoint=setpoints, pose=poses, output=outputs, metrics=metrics)


def compute_step_metrics(time: Sequence[float], setpoint: Sequence[float], pose: Sequence[float]) -> Dict[str, float]:
    """Compute step-response metrics for tuning guidance.

    ``response_time`` is the first time the pose reaches 98 % of the final
    setpoint (the last sample time if it never does). ``overshoot_pct`` is the
    peak excursion past the final setpoint as a percentage of it, never
    negative. ``final_error`` is the setpoint minus the pose at the last tick.
    """

    if not time:
        return {"response_time": 0.0, "overshoot_pct": 0.0, "final_error": 0.0}

    final_sp = setpoint[-1]
    if final_sp == 0:
        response_time = 0.0
    else:
        threshold = 0.98 * final_sp
        response_time = _find_first_crossing(time, pose, threshold)

    overshoot_pct = 0.0
    if final_sp != 0:
        peak = max(pose) if final_sp > 0 else min(pose)
        overshoot_pct = max(0.0, (peak - final_sp) / final_sp * 100.0)

    return {
        "response_time": response_time,
        "overshoot_pct": overshoot_pct,
        "final_error": float(final_sp - pose[-1]),
    }


def _find_first_crossing(time: Sequence[float], output: Sequence[float], threshold: float) -> float:
    comparison = (lambda y: y >= threshold) if threshold >= 0 else (lambda y: y <= threshold)
    for t, y in zip(time, output):
        if comparison(y):
            return float(t)
    return float(time[-1])


def parse_gain(value: Any) -> float:
    """Parse a raw slider or text-field value into a finite gain."""

    if value is None or value == "":
        raise InputParseError("Missing numeric value")
    try:
        numeric = float(value)
    except (TypeError, ValueError) as exc:
        raise InputParseError(f"Not a number: {value!r}") from exc
    if not math.isfinite(numeric):
        raise InputParseError(f"Gain must be finite, got {value!r}")
    return numeric


def clamp_gain(value: float, upper: float, lower: float = 0.0) -> float:
    """Clamp a gain into a slider's ``[lower, upper]`` range."""

    return max(lower, min(upper, value))


def format_gain(name: str, value: float) -> str:
    """Format a gain for display with the precision its slider uses."""

    if name not in GAIN_DECIMALS:
        raise ValueError(f"Unknown gain {name!r}; expected one of {', '.join(GAIN_NAMES)}")
    return f"{value:.{GAIN_DECIMALS[name]}f}"


TraceListener = Callable[[SimulationTrace], None]


class SimulationSession:
    """Holds the current gains and trace, re-running on every gain change.

    Every run starts from the zero state; nothing carries over between runs
    except the stored gains.
    """

    def __init__(self, config: Optional[SimulationConfig] = None, params: Optional[ControllerParams] = None) -> None:
        self._config = config or SimulationConfig()
        self._config.validate()
        self._params = params or ControllerParams()
        self._listeners: List[TraceListener] = []
        self._trace = run_simulation(self._config, self._params)

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def params(self) -> ControllerParams:
        return self._params

    @property
    def trace(self) -> SimulationTrace:
        """Return the trace of the most recent run."""

        return self._trace

    def subscribe(self, listener: TraceListener) -> Callable[[], None]:
        """Register ``listener`` for new traces and return an unsubscribe callable."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on_params_changed(self, params: ControllerParams) -> SimulationTrace:
        """Re-run the whole horizon with ``params`` and publish the new trace."""

        trace = run_simulation(self._config, params)
        self._params = params
        self._trace = trace
        for listener in list(self._listeners):
            listener(trace)
        return trace

    def set_gain(self, name: str, value: float) -> SimulationTrace:
        """Change a single gain (``kp``, ``ki`` or ``kd``) and re-run."""

        if name not in GAIN_NAMES:
            raise ValueError(f"Unknown gain {name!r}; expected one of {', '.join(GAIN_NAMES)}")
        return self.on_params_changed(replace(self._params, **{name: value}))


__all__ = [
    "ControllerParams",
    "SimulationConfig",
    "SimulationTrace",
    "SimulationSession",
    "run_simulation",
    "compute_step_metrics",
    "parse_gain",
    "clamp_gain",
    "format_gain",
    "GAIN_NAMES",
    "GAIN_DECIMALS",
]
