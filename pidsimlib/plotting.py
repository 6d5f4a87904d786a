"""Plotly rendering of a :class:`SimulationTrace`."""

from __future__ import annotations

import plotly.graph_objects as go

from .simulation import SimulationTrace

# Display range only; traces are never clamped to it.
Y_AXIS_RANGE = (-1.0, 3.0)


def build_figure(trace: SimulationTrace, max_time: float | None = None) -> go.Figure:
    """Build a Plotly figure of setpoint, plant pose and controller output."""

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            name="Setpoint",
            x=trace.time,
            y=trace.setpoint,
            mode="lines",
            line=dict(color="#4B90E2", dash="dash"),
        )
    )
    fig.add_trace(
        go.Scatter(
            name="Current Pose",
            x=trace.time,
            y=trace.pose,
            mode="lines",
            line=dict(color="#E91E63", shape="spline"),
        )
    )
    fig.add_trace(
        go.Scatter(
            name="Output",
            x=trace.time,
            y=trace.output,
            mode="lines",
            line=dict(color="#4CAF50", shape="spline"),
        )
    )

    x_max = max_time if max_time is not None else (trace.time[-1] if trace.time else 1.0)
    fig.update_layout(
        title="PID Controller vs Delayed Spring/Damper Plant",
        xaxis=dict(title="Time (s)", range=[0.0, x_max]),
        yaxis=dict(title="Normalized Value", range=list(Y_AXIS_RANGE)),
        template="plotly_white",
        legend=dict(orientation="h", x=0.5, xanchor="center", y=-0.15),
        margin=dict(l=60, r=40, t=60, b=40),
        transition=dict(duration=500),
    )
    return fig


__all__ = ["build_figure", "Y_AXIS_RANGE"]
