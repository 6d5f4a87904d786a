"""Tests for the Plotly figure builder."""

from pidsimlib.plotting import Y_AXIS_RANGE, build_figure
from pidsimlib.simulation import ControllerParams, SimulationConfig, run_simulation


def test_figure_has_three_series():
    config = SimulationConfig(max_time=5.0)
    trace = run_simulation(config, ControllerParams(kp=1.0, kd=5.0))
    fig = build_figure(trace, max_time=config.max_time)

    assert [series.name for series in fig.data] == ["Setpoint", "Current Pose", "Output"]
    assert list(fig.data[2].y) == list(trace.output)
    assert tuple(fig.layout.yaxis.range) == Y_AXIS_RANGE
    assert tuple(fig.layout.xaxis.range) == (0.0, 5.0)


def test_figure_keeps_values_outside_display_range():
    trace = run_simulation(SimulationConfig(max_time=1.0), ControllerParams(kd=5.0))
    fig = build_figure(trace)
    assert max(fig.data[2].y) > Y_AXIS_RANGE[1]
