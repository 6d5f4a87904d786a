"""Dash application for interactive PID gain tuning against a delayed spring/damper plant."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping

from dash import Dash, Input, Output, State, callback_context, dcc, html, no_update
from dash.exceptions import PreventUpdate

from pidsimlib.export import trace_to_csv, trace_to_payload
from pidsimlib.plotting import build_figure
from pidsimlib.preferences import load_preferences
from pidsimlib.simulation import (
    ControllerParams,
    SimulationSession,
    clamp_gain,
    format_gain,
    parse_gain,
)

GAIN_STEPS = {"kp": 0.01, "ki": 0.001, "kd": 0.01}


def _format_metrics(metrics: Mapping[str, float]) -> html.Table:
    label_map = {
        "response_time": "Response Time (s)",
        "overshoot_pct": "Overshoot (%)",
        "final_error": "Final Error",
    }
    rows = []
    for key in ["response_time", "overshoot_pct", "final_error"]:
        value = metrics.get(key, float("nan"))
        rows.append(
            html.Tr([
                html.Th(label_map.get(key, key)),
                html.Td(f"{value:.4f}"),
            ])
        )
    return html.Table(rows, className="metrics-table")


def build_gain_row(*, name: str, label: str, max_value: float, value: float) -> html.Div:
    return html.Div(
        [
            html.Label(label, className="controller-label"),
            html.Span(
                dcc.Input(
                    id=f"{name}-slider",
                    type="range",
                    min=0.0,
                    max=max_value,
                    step=GAIN_STEPS[name],
                    value=value,
                    className="controller-range",
                ),
                className="controller-range-wrapper",
            ),
            html.Div(
                [
                    html.Span(format_gain(name, value), id=f"{name}-display", className="controller-display"),
                    dcc.Input(
                        id=name,
                        type="number",
                        value=value,
                        step=GAIN_STEPS[name],
                        className="controller-input",
                    ),
                ],
                className="controller-value-row",
            ),
        ],
        className="controller-row",
    )


_PREFERENCES = load_preferences()

SESSION = SimulationSession(config=_PREFERENCES.to_config(), params=_PREFERENCES.to_params())

GAIN_MAX = {
    "kp": _PREFERENCES.controller.kp_max,
    "ki": _PREFERENCES.controller.ki_max,
    "kd": _PREFERENCES.controller.kd_max,
}

app = Dash(__name__)
app.title = "PID Controller Simulator"

app.layout = html.Div(
    [
        html.H1("PID Controller Simulator", className="page-title"),
        html.Div(
            [
                html.Div(
                    [
                        dcc.Graph(
                            id="step-graph",
                            figure=build_figure(SESSION.trace, max_time=SESSION.config.max_time),
                        ),
                        html.Div(id="metrics-panel", children=_format_metrics(SESSION.trace.metrics), className="metrics-card"),
                    ],
                    className="results-card",
                ),
                html.Div(
                    [
                        html.H2("Controller", className="card-title"),
                        build_gain_row(name="kp", label="Kp", max_value=GAIN_MAX["kp"], value=SESSION.params.kp),
                        build_gain_row(name="ki", label="Ki", max_value=GAIN_MAX["ki"], value=SESSION.params.ki),
                        build_gain_row(name="kd", label="Kd", max_value=GAIN_MAX["kd"], value=SESSION.params.kd),
                        html.Div(
                            [
                                html.Button("Download CSV", id="download-button", n_clicks=0),
                            ],
                            className="sim-actions",
                        ),
                        html.Div(id="status-message", className="status", children="Ready."),
                    ],
                    className="card controller-card",
                ),
            ],
            className="layout-grid",
        ),
        dcc.Store(id="result-store", data=trace_to_payload(SESSION.trace)),
        dcc.Download(id="download-data"),
    ]
)


def _register_gain_sync(name: str) -> None:
    """Keep a gain's slider, number field and display span in agreement."""

    @app.callback(
        Output(name, "value"),
        Output(f"{name}-slider", "value"),
        Output(f"{name}-display", "children"),
        Input(f"{name}-slider", "value"),
        Input(name, "value"),
        prevent_initial_call=True,
    )
    def sync_gain(slider_value: Any, input_value: Any):
        ctx = callback_context
        if not ctx.triggered:
            raise PreventUpdate

        triggered = ctx.triggered_id
        raw = slider_value if triggered == f"{name}-slider" else input_value
        try:
            numeric = parse_gain(raw)
        except ValueError as exc:
            raise PreventUpdate from exc

        numeric = clamp_gain(numeric, GAIN_MAX[name])
        return numeric, numeric, format_gain(name, numeric)


for _name in ("kp", "ki", "kd"):
    _register_gain_sync(_name)


@app.callback(
    Output("step-graph", "figure"),
    Output("metrics-panel", "children"),
    Output("status-message", "children"),
    Output("result-store", "data"),
    Input("kp-slider", "value"),
    Input("ki-slider", "value"),
    Input("kd-slider", "value"),
    prevent_initial_call=True,
)
def run_simulation_callback(kp_value: Any, ki_value: Any, kd_value: Any):
    try:
        params = ControllerParams(
            kp=parse_gain(kp_value),
            ki=parse_gain(ki_value),
            kd=parse_gain(kd_value),
        )
        trace = SESSION.on_params_changed(params)
    except ValueError as exc:  # invalid input or simulation configuration
        return no_update, no_update, f"Error: {exc}", no_update

    figure = build_figure(trace, max_time=SESSION.config.max_time)
    status = f"Last updated {datetime.now().strftime('%H:%M:%S')}"
    return figure, _format_metrics(trace.metrics), status, trace_to_payload(trace)


@app.callback(
    Output("download-data", "data"),
    Input("download-button", "n_clicks"),
    State("result-store", "data"),
    prevent_initial_call=True,
)
def download_csv(n_clicks: int, payload: Dict[str, Any]):
    if n_clicks <= 0:
        raise PreventUpdate
    if not payload:
        raise PreventUpdate

    filename = f"pid_sim_result_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
    return dict(content=trace_to_csv(payload), filename=filename)


if __name__ == "__main__":
    app.run(debug=True)
