"""Mock machines and firmware emulation for development without hardware.

``SimulatedMachine`` behaves like the machine firmware: the newest session id
sits in slot ``a``; finishing a session shifts ids down through ``b``..``d``
and keeps set data for as many of them as the tag has room for.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from liftlog.adapters.tag_payload import encode_text_record
from liftlog.domain.model import (
    MANUAL_MACHINE_TYPE,
    MAX_PRIOR_SESSIONS,
    is_manual_machine,
    manual_exercise_name,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

PAYLOAD_VERSION = 1
DEFAULT_FIRMWARE_VERSION = "1.2.0"

_SLOT_NAMES = ("b", "c", "d")


@dataclass(frozen=True, slots=True)
class MockMachine:
    machine_id: str
    machine_name: str
    machine_type: str = "cable_stack"
    exercise_id: str | None = None


MOCK_MACHINES: tuple[MockMachine, ...] = (
    MockMachine("machine-001", "Lat Pulldown", exercise_id="lat-pulldown"),
    MockMachine("machine-002", "Cable Row", exercise_id="cable-row"),
    MockMachine("machine-003", "Chest Press", exercise_id="chest-press"),
    MockMachine("machine-004", "Leg Press", exercise_id="leg-press"),
)


def describe_machine(machine_id: str) -> MockMachine | None:
    """Known machine for ``machine_id``; manual exercises get a name from their id."""

    for machine in MOCK_MACHINES:
        if machine.machine_id == machine_id:
            return machine
    if is_manual_machine(machine_id):
        return MockMachine(machine_id, manual_exercise_name(machine_id), MANUAL_MACHINE_TYPE)
    return None


DEFAULT_SETS: tuple[dict[str, float | int], ...] = (
    {"weight_lbs": 90, "reps": 12, "duration_ms": 45000},
    {"weight_lbs": 95, "reps": 10, "duration_ms": 40000},
    {"weight_lbs": 100, "reps": 8, "duration_ms": 35000},
)


def new_session_id(now: float | None = None) -> str:
    millis = int((time.time() if now is None else now) * 1000)
    return f"session-{millis}-{uuid4().hex[:9]}"


def _machine_fields(machine: MockMachine, firmware_version: str) -> dict[str, Any]:
    return {
        "v": PAYLOAD_VERSION,
        "machine_id": machine.machine_id,
        "machine_name": machine.machine_name,
        "machine_type": machine.machine_type,
        "fw": firmware_version,
        "exercise_id": machine.exercise_id,
        "exercise_name": machine.machine_name,
    }


def mock_tap_in_payload(
    machine: MockMachine = MOCK_MACHINES[0], *, session_id: str | None = None
) -> dict[str, Any]:
    """Tag contents for a machine nobody has used yet."""

    payload = _machine_fields(machine, DEFAULT_FIRMWARE_VERSION)
    payload["session_id_a"] = session_id or new_session_id()
    return payload


def mock_tap_out_payload(
    machine: MockMachine = MOCK_MACHINES[0],
    *,
    completed_session_id: str,
    session_id: str | None = None,
    sets: Sequence[dict[str, float | int]] = DEFAULT_SETS,
    now: float | None = None,
) -> dict[str, Any]:
    """Tag contents after ``completed_session_id`` finished with ``sets``."""

    end_time = int(time.time() if now is None else now)
    payload = mock_tap_in_payload(machine, session_id=session_id)
    payload["session_id_b"] = completed_session_id
    payload["session_data_b"] = {
        "start_time": end_time - 360,
        "end_time": end_time,
        "sets": [dict(item) for item in sets],
    }
    return payload


def recovery_payload(
    machine: MockMachine = MOCK_MACHINES[1], *, now: float | None = None
) -> dict[str, Any]:
    """Tag holding two finished sessions nobody collected."""

    current = time.time() if now is None else now
    millis = int(current * 1000)
    payload = _machine_fields(machine, DEFAULT_FIRMWARE_VERSION)
    payload.update(
        {
            "session_id_a": f"session-{millis}-new",
            "session_id_b": f"session-{millis - 600_000}-recent",
            "session_data_b": {
                "start_time": int(current) - 900,
                "end_time": int(current) - 600,
                "sets": [
                    {"weight_lbs": 80, "reps": 10, "duration_ms": 30000},
                    {"weight_lbs": 85, "reps": 8, "duration_ms": 28000},
                    {"weight_lbs": 80, "reps": 10, "duration_ms": 32000},
                ],
            },
            "session_id_c": f"session-{millis - 1_800_000}-older",
            "session_data_c": {
                "start_time": int(current) - 2100,
                "end_time": int(current) - 1800,
                "sets": [
                    {"weight_lbs": 75, "reps": 12, "duration_ms": 35000},
                    {"weight_lbs": 80, "reps": 10, "duration_ms": 30000},
                ],
            },
        }
    )
    return payload


class SimulatedMachine:
    """In-memory machine that writes its tag the way the firmware does."""

    def __init__(
        self,
        machine: MockMachine = MOCK_MACHINES[0],
        *,
        data_capacity: int = MAX_PRIOR_SESSIONS,
        firmware_version: str = DEFAULT_FIRMWARE_VERSION,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[float], str] = new_session_id,
    ) -> None:
        if not 0 <= data_capacity <= MAX_PRIOR_SESSIONS:
            raise ValueError(f"data_capacity must be between 0 and {MAX_PRIOR_SESSIONS}")
        self.machine = machine
        self._data_capacity = data_capacity
        self._firmware_version = firmware_version
        self._clock = clock
        self._id_factory = id_factory

        self._current_id = id_factory(clock())
        self._started_at = int(clock())
        self._sets: list[dict[str, float | int]] = []
        self._prior: list[tuple[str, dict[str, Any]]] = []

    @property
    def current_session_id(self) -> str:
        return self._current_id

    @property
    def prior_session_ids(self) -> list[str]:
        return [session_id for session_id, _ in self._prior]

    def record_set(self, weight_lbs: float, reps: int, duration_ms: int) -> None:
        self._sets.append({"weight_lbs": weight_lbs, "reps": reps, "duration_ms": duration_ms})

    def finish_session(self) -> str:
        """Close the current session, shift the slots and open a fresh one."""

        finished_id = self._current_id
        data = {"start_time": self._started_at, "end_time": int(self._clock()), "sets": self._sets}
        self._prior.insert(0, (finished_id, data))
        del self._prior[MAX_PRIOR_SESSIONS:]

        self._current_id = self._id_factory(self._clock())
        self._started_at = int(self._clock())
        self._sets = []
        return finished_id

    def tag_contents(self) -> dict[str, Any]:
        payload = _machine_fields(self.machine, self._firmware_version)
        payload["session_id_a"] = self._current_id
        for index, (slot, (session_id, data)) in enumerate(
            zip(_SLOT_NAMES, self._prior, strict=False)
        ):
            payload[f"session_id_{slot}"] = session_id
            # oldest slots lose their data first when the tag is full
            if index < self._data_capacity:
                payload[f"session_data_{slot}"] = data
        return payload

    def tag_record(self) -> bytes:
        """NDEF Text record payload the phone would read from the tag."""

        return encode_text_record(json.dumps(self.tag_contents()))
