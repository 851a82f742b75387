"""Weight conversion helpers.

Storage is always pounds; kilograms are a display concern. Conversions are
only reversible to floating-point precision.
"""

from __future__ import annotations

import re
from typing import Final

from liftlog.domain.model.enums import WeightUnit

LBS_TO_KG: Final[float] = 0.453592
KG_TO_LBS: Final[float] = 2.20462

# leading decimal number, the way a user types it ("12.5", "-3", ".5kg", "1e2")
_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def lbs_to_kg(lbs: float) -> float:
    return lbs * LBS_TO_KG


def kg_to_lbs(kg: float) -> float:
    return kg * KG_TO_LBS


def convert_weight(weight_lbs: float, unit: WeightUnit | str) -> float:
    """Return ``weight_lbs`` expressed in ``unit``."""

    if unit == WeightUnit.KG:
        return lbs_to_kg(weight_lbs)
    return weight_lbs


def format_weight(weight_lbs: float, unit: WeightUnit | str) -> str:
    if unit == WeightUnit.KG:
        return f"{lbs_to_kg(weight_lbs):.1f}kg"
    return f"{weight_lbs:.0f}lbs"


def parse_weight_input(text: str, unit: WeightUnit | str) -> float:
    """Parse user input in ``unit`` into pounds.

    Only the leading number counts, so ``"12.5kg"`` reads as 12.5; input
    that does not start with a number reads as 0.
    """

    match = _LEADING_NUMBER.match(text)
    value = float(match.group(1)) if match else 0.0
    if unit == WeightUnit.KG:
        return kg_to_lbs(value)
    return value
