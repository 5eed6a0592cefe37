"""Modifier calculator - turns a chemistry state into gameplay multipliers.

Consumed by the gig, songwriting and rehearsal systems. Each modifier is an
independent weighted sum over the four axes, clamped to its own range.
"""

from __future__ import annotations

import math
import random
from typing import Any, Protocol

from pydantic import BaseModel

from band_dynamics.core.state import BandChemistryState, clamp

# High tension is usually destabilizing on stage, occasionally electric.
TENSION_VOLATILITY_THRESHOLD = 50
TENSION_VOLATILITY_BAD = -0.10
TENSION_VOLATILITY_GOOD = 0.08
TENSION_VOLATILITY_BAD_CUTOFF = 0.4  # draws above this (60%) are bad nights


class RandomSource(Protocol):
    def random(self) -> float: ...


class ChemistryModifiers(BaseModel):
    song_quality: float             # x0.6 - x1.5 songwriting output
    performance_rating: float       # x0.5 - x1.5 live performance score
    member_leave_risk: int          # 0 - 80 % per week
    drama_event_chance: int         # 2 - 60 % per action
    rehearsal_efficiency: float     # x0.5 - x1.5 rehearsal gains
    fan_perception: int             # -25 - +25 fan growth modifier

    model_config = {"frozen": True}


def _round_half_up(value: float, places: int = 0) -> float:
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def sample_tension_volatility(romantic_tension: int, rng: RandomSource | None = None) -> float:
    """One-shot performance swing for high-tension bands, zero otherwise."""
    if romantic_tension <= TENSION_VOLATILITY_THRESHOLD:
        return 0.0
    rng = rng or random
    if rng.random() > TENSION_VOLATILITY_BAD_CUTOFF:
        return TENSION_VOLATILITY_BAD
    return TENSION_VOLATILITY_GOOD


def compute_modifiers(state: Any, rng: RandomSource | None = None) -> ChemistryModifiers:
    """Calculate all gameplay modifiers from the four-axis chemistry state.

    The only random element is the tension volatility term on the performance
    rating; pass a seeded ``random.Random`` (or any object with ``random()``)
    as ``rng`` to make the result reproducible. The input is not modified.
    """
    s = BandChemistryState.coerce(state)
    chemistry = s.chemistry_level
    tension = s.romantic_tension
    alignment = s.creative_alignment
    conflict = s.conflict_index

    song_quality = clamp(
        0.7
        + alignment / 200     # +0.0 to +0.5
        + chemistry / 500     # +0.0 to +0.2
        - conflict / 500      # -0.2 to 0.0
        - tension / 1000,     # -0.1 to 0.0
        0.6, 1.5,
    )

    performance_rating = clamp(
        0.6
        + chemistry / 150     # +0.0 to +0.67
        - conflict / 400      # -0.25 to 0.0
        + alignment / 500     # +0.0 to +0.2
        + sample_tension_volatility(tension, rng),
        0.5, 1.5,
    )

    member_leave_risk = clamp(
        conflict * 0.4 + tension * 0.2 - chemistry * 0.3 - alignment * 0.1 + 15,
        0, 80,
    )

    drama_event_chance = clamp(
        2 + conflict * 0.35 + tension * 0.2 - chemistry * 0.15,
        2, 60,
    )

    rehearsal_efficiency = clamp(
        0.6 + chemistry / 200 + alignment / 250 - conflict / 500,
        0.5, 1.5,
    )

    fan_perception = clamp(
        chemistry / 5 - conflict / 5 - tension / 10 - 5,
        -25, 25,
    )

    return ChemistryModifiers(
        song_quality=_round_half_up(song_quality, 3),
        performance_rating=_round_half_up(performance_rating, 3),
        member_leave_risk=int(_round_half_up(member_leave_risk)),
        drama_event_chance=int(_round_half_up(drama_event_chance)),
        rehearsal_efficiency=_round_half_up(rehearsal_efficiency, 3),
        fan_perception=int(_round_half_up(fan_perception)),
    )
