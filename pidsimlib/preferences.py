"""Utility helpers for loading startup configuration."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigurationError
from .simulation import ControllerParams, SimulationConfig

DEFAULT_PREFERENCES_PATH = Path("config/user_prefs.json")


@dataclass
class ControllerPrefs:
    kp: float
    ki: float
    kd: float
    kp_max: float
    ki_max: float
    kd_max: float


@dataclass
class SimulationPrefs:
    dt: float
    max_time: float
    delay_steps: int
    spring: float
    damping: float


@dataclass
class Preferences:
    controller: ControllerPrefs
    simulation: SimulationPrefs

    @classmethod
    def defaults(cls) -> "Preferences":
        return cls(
            controller=ControllerPrefs(
                kp=0.0,
                ki=0.0,
                kd=0.0,
                kp_max=2.0,
                ki_max=0.1,
                kd_max=5.0,
            ),
            simulation=SimulationPrefs(
                dt=0.1,
                max_time=300.0,
                delay_steps=10,
                spring=0.1,
                damping=0.5,
            ),
        )

    def to_config(self) -> SimulationConfig:
        """Build the run configuration; values are passed through unconverted so
        :meth:`SimulationConfig.validate` sees exactly what the file held."""

        sim = self.simulation
        return SimulationConfig(
            dt=sim.dt,
            max_time=sim.max_time,
            delay_steps=sim.delay_steps,
            spring=sim.spring,
            damping=sim.damping,
        )

    def to_params(self) -> ControllerParams:
        return ControllerParams(kp=self.controller.kp, ki=self.controller.ki, kd=self.controller.kd)


def load_preferences(path: Path | None = None) -> Preferences:
    target = path or DEFAULT_PREFERENCES_PATH
    if not target.exists():
        return Preferences.defaults()

    try:
        payload = json.loads(target.read_text())
    except (json.JSONDecodeError, OSError):
        return Preferences.defaults()

    try:
        controller_data = payload["controller"]
        simulation_data = payload["simulation"]
    except (KeyError, TypeError):
        return Preferences.defaults()

    try:
        controller = ControllerPrefs(**controller_data)
        simulation = SimulationPrefs(**simulation_data)
    except TypeError:
        return Preferences.defaults()

    prefs = Preferences(controller=controller, simulation=simulation)
    try:
        prefs.to_config().validate()
    except ConfigurationError:
        return Preferences.defaults()
    return prefs


__all__ = [
    "Preferences",
    "ControllerPrefs",
    "SimulationPrefs",
    "load_preferences",
    "DEFAULT_PREFERENCES_PATH",
]
