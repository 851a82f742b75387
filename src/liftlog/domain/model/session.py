"""In-memory tap session tracked between tap-in and tap-out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class ActiveSession:
    session_id: str
    armed_at: datetime
    machine_id: str | None = None
    machine_name: str | None = None

    @property
    def machine_label(self) -> str:
        return self.machine_name or self.machine_id or "machine"
