"""Band chemistry state - the four bounded relationship axes.

Every axis is an integer in [0, 100]. Values are clamped on construction,
so a state object can never hold an out-of-range value, even when built
from a corrupted database row.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, field_validator

AXIS_MIN = 0
AXIS_MAX = 100

AXES = ("chemistry_level", "romantic_tension", "creative_alignment", "conflict_index")


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_axis(value: Any) -> int:
    """Coerce a raw axis value to an int in [0, 100].

    Infinities saturate at the nearest bound. None, NaN and anything that
    is not a number read as the floor.
    """
    if value is None:
        return AXIS_MIN
    try:
        number = float(value)
    except (TypeError, ValueError):
        return AXIS_MIN
    if math.isnan(number):
        return AXIS_MIN
    if math.isinf(number):
        return AXIS_MAX if number > 0 else AXIS_MIN
    return int(clamp(round(number), AXIS_MIN, AXIS_MAX))


class BandChemistryState(BaseModel):
    chemistry_level: int = 50       # overall cohesion, higher is better
    romantic_tension: int = 0       # higher is more volatile
    creative_alignment: int = 50    # shared artistic vision
    conflict_index: int = 0         # interpersonal friction, higher is worse

    model_config = {"frozen": True}

    @field_validator(*AXES, mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> int:
        return clamp_axis(value)

    @classmethod
    def coerce(cls, source: Any) -> BandChemistryState:
        """Build a clamped state from a state, a mapping, or any object with the axis attributes.

        ORM rows and API payloads both go through here, so the engine never
        sees an out-of-range value regardless of where it came from. An axis
        the source does not carry (missing key or missing attribute) takes
        the new-band default, the same for mappings and objects.
        """
        if isinstance(source, BandChemistryState):
            return cls(**source.model_dump())
        if isinstance(source, Mapping):
            values = {axis: source[axis] for axis in AXES if axis in source}
        else:
            values = {axis: getattr(source, axis) for axis in AXES if hasattr(source, axis)}
        return cls(**values)

    def apply(self, update: Mapping[str, int]) -> BandChemistryState:
        """Return a new state with a partial update merged in (and clamped)."""
        values = self.model_dump()
        values.update({k: v for k, v in update.items() if k in AXES})
        return BandChemistryState(**values)

    def shifted(
        self,
        chemistry: int = 0,
        tension: int = 0,
        alignment: int = 0,
        conflict: int = 0,
    ) -> BandChemistryState:
        """Return a new state with the deltas added, clamped once."""
        return BandChemistryState(
            chemistry_level=self.chemistry_level + chemistry,
            romantic_tension=self.romantic_tension + tension,
            creative_alignment=self.creative_alignment + alignment,
            conflict_index=self.conflict_index + conflict,
        )
