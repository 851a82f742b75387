"""Tag payload value objects.

These mirror what a machine's NFC tag carries after parsing. Optional fields
stay ``None`` when the tag did not provide them; consumers must read ``None``
as "unknown", never as zero.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

MAX_PRIOR_SESSIONS = 3


@dataclass(frozen=True, slots=True, kw_only=True)
class SetRecord:
    weight_lbs: float
    reps: int
    duration_ms: int


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionRecord:
    """Sets recorded by the machine between a tap-in and its tap-out."""

    started_at_unix: int
    ended_at_unix: int
    sets: tuple[SetRecord, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class RawTagPayload:
    machine_id: str
    current_session_id: str
    version: int | None = None
    machine_name: str | None = None
    machine_type: str | None = None
    firmware_version: str | None = None
    exercise_id: str | None = None
    exercise_name: str | None = None

    # most-recent-first; a prior id without data means the tag ran out of room
    prior_session_ids: tuple[str, ...] = ()
    prior_session_data: Mapping[str, SessionRecord] = field(
        default_factory=dict[str, SessionRecord]
    )

    @property
    def machine_label(self) -> str:
        return self.machine_name or self.machine_id
