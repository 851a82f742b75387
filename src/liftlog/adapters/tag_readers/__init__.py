"""Tag readers that stand in for NFC hardware."""

from __future__ import annotations

from .jsonl import JsonLinesTagReader, iter_payload_lines
from .mock import (
    DEFAULT_SETS,
    MOCK_MACHINES,
    MockMachine,
    SimulatedMachine,
    describe_machine,
    mock_tap_in_payload,
    mock_tap_out_payload,
    new_session_id,
    recovery_payload,
)
from .simulated import SimulatedTagReader

__all__ = [
    "DEFAULT_SETS",
    "MOCK_MACHINES",
    "JsonLinesTagReader",
    "MockMachine",
    "SimulatedMachine",
    "SimulatedTagReader",
    "describe_machine",
    "iter_payload_lines",
    "mock_tap_in_payload",
    "mock_tap_out_payload",
    "new_session_id",
    "recovery_payload",
]
