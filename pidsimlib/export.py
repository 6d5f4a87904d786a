"""Serialization of a :class:`SimulationTrace` for browser storage and CSV download."""

from __future__ import annotations

import io
from typing import Any, Dict, Mapping

from .simulation import SimulationTrace

CSV_COLUMNS = ("time", "setpoint", "pose", "output")


def trace_to_payload(trace: SimulationTrace) -> Dict[str, Any]:
    """Return a JSON-serializable dict of the trace with one-decimal time labels."""

    return {
        "time": trace.time_labels,
        "setpoint": list(trace.setpoint),
        "pose": list(trace.pose),
        "output": list(trace.output),
    }


def trace_to_csv(payload: Mapping[str, Any]) -> str:
    buffer = io.StringIO()
    buffer.write(",".join(CSV_COLUMNS))
    buffer.write("\n")
    for row in zip(*(payload[column] for column in CSV_COLUMNS)):
        buffer.write(",".join(f"{value}" for value in row))
        buffer.write("\n")
    return buffer.getvalue()


__all__ = ["CSV_COLUMNS", "trace_to_payload", "trace_to_csv"]
