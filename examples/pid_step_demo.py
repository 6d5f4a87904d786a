"""Quick simulation to visualize the PID controller driving the delayed spring/damper plant."""

from __future__ import annotations

from pathlib import Path

from pidsimlib.plotting import build_figure
from pidsimlib.simulation import (
    ControllerParams,
    SimulationConfig,
    SimulationTrace,
    run_simulation,
)


def run_demo(
    kp: float = 0.5,
    ki: float = 0.01,
    kd: float = 0.5,
    max_time: float = 300.0,
) -> SimulationTrace:
    """Simulate a step response and return the trace."""

    config = SimulationConfig(max_time=max_time)
    return run_simulation(config, ControllerParams(kp=kp, ki=ki, kd=kd))


def main() -> None:
    trace = run_demo()
    figure = build_figure(trace, max_time=300.0)

    reports_dir = Path("reports")
    reports_dir.mkdir(exist_ok=True)
    output_path = reports_dir / "pid_step_demo.html"
    figure.write_html(str(output_path), include_plotlyjs="cdn")
    print(f"Saved PID step demo plot to {output_path}")
    print("Step metrics:")
    for name, value in sorted(trace.metrics.items()):
        print(f"  {name}: {value:.4f}")


if __name__ == "__main__":
    main()
