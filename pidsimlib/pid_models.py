"""Controller, delay-line and plant models for the PID step simulator."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterator, Tuple

from .errors import ConfigurationError, require_positive_finite


@dataclass
class PIDController:
    """Discrete positional PID controller with rectangular integration.

    Parameters
    ----------
    kp, ki, kd:
        Proportional, integral and derivative gains. Any sign is accepted.
    sample_time:
        Controller execution period (seconds). Must be positive.

    The integral accumulates without bound and the output is never clamped,
    so peaking and windup remain visible in the trace.
    """

    kp: float = 0.0
    ki: float = 0.0
    kd: float = 0.0
    sample_time: float = 0.1

    _integral: float = field(init=False, default=0.0, repr=False)
    _prev_error: float = field(init=False, default=0.0, repr=False)
    _output: float = field(init=False, default=0.0, repr=False)

    def __post_init__(self) -> None:
        require_positive_finite("sample_time", self.sample_time)

    def reset(self) -> None:
        """Clear the accumulated integral and the stored error."""

        self._integral = 0.0
        self._prev_error = 0.0
        self._output = 0.0

    @property
    def integral(self) -> float:
        return self._integral

    @property
    def prev_error(self) -> float:
        return self._prev_error

    @property
    def output(self) -> float:
        """Return the most recent controller output."""

        return self._output

    def update(self, setpoint: float, pv: float) -> float:
        """Advance the controller one sample and return the new output."""

        error = setpoint - pv
        self._integral += error * self.sample_time
        derivative = (error - self._prev_error) / self.sample_time

        self._output = self.kp * error + self.ki * self._integral + self.kd * derivative
        self._prev_error = error
        return self._output


class DelayBuffer:
    """Fixed-length FIFO delaying a signal by ``delay_steps`` samples.

    The buffer starts full of zeros, so the first ``delay_steps`` values popped
    are zero. A zero-length buffer passes values straight through.
    """

    def __init__(self, delay_steps: int) -> None:
        if isinstance(delay_steps, bool) or not isinstance(delay_steps, int):
            raise ConfigurationError("delay_steps must be an integer")
        if delay_steps < 0:
            raise ConfigurationError("delay_steps must be non-negative")
        self.delay_steps = delay_steps
        self._queue: Deque[float] = deque(maxlen=delay_steps)
        self.reset()

    def reset(self) -> None:
        """Refill the queue with zeros."""

        self._queue.clear()
        self._queue.extend([0.0] * self.delay_steps)

    def push_pop(self, value: float) -> float:
        """Append ``value`` and return the oldest queued sample."""

        if self.delay_steps == 0:
            return value
        oldest = self._queue[0]
        # maxlen evicts the head on append
        self._queue.append(value)
        return oldest

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self) -> Iterator[float]:
        return iter(self._queue)


@dataclass
class DampedSpringPlant:
    """Unit-mass spring/damper plant integrated with semi-implicit Euler.

    Velocity is advanced first and the new velocity is used to advance the
    position.
    """

    spring: float = 0.1
    damping: float = 0.5
    sample_time: float = 0.1

    _pose: float = field(init=False, default=0.0, repr=False)
    _vel: float = field(init=False, default=0.0, repr=False)

    def __post_init__(self) -> None:
        require_positive_finite("sample_time", self.sample_time)

    @property
    def pose(self) -> float:
        """Return the current plant position."""

        return self._pose

    @property
    def vel(self) -> float:
        return self._vel

    def reset(self) -> None:
        """Return the plant to rest at the origin."""

        self._pose = 0.0
        self._vel = 0.0

    def update(self, control_input: float) -> Tuple[float, float]:
        """Advance the plant one sample and return ``(pose, vel)``."""

        acceleration = control_input - self.damping * self._vel - self.spring * self._pose
        self._vel = self._vel + acceleration * self.sample_time
        self._pose = self._pose + self._vel * self.sample_time
        return self._pose, self._vel


__all__ = [
    "PIDController",
    "DelayBuffer",
    "DampedSpringPlant",
]
