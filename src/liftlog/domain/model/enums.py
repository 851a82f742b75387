"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class WeightUnit(StrEnum):
    LBS = "lbs"
    KG = "kg"


class ActionKind(StrEnum):
    """Discriminator for reconciliation actions."""

    IGNORE = "ignore"
    START = "start"
    COMPLETE = "complete"
    ABANDON_THEN_START = "abandon_then_start"
