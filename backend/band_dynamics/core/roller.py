"""Event roller - decides which candidate drama events actually fire."""

from __future__ import annotations

import math
import random
from collections.abc import Iterable

from band_dynamics.core.modifiers import RandomSource
from band_dynamics.core.state import clamp

DEFAULT_MAX_EVENTS = 2


def roll_events(
    candidates: Iterable[tuple[str, float]],
    max_events: int = DEFAULT_MAX_EVENTS,
    rng: RandomSource | None = None,
) -> list[str]:
    """Roll each candidate in order and return the preset keys that fire.

    One uniform draw in [0, 100) per candidate; it fires when the draw is
    below its probability (NaN counts as 0). Rolling stops once
    ``max_events`` have fired, so earlier candidates win ties for the cap.
    """
    rng = rng or random
    fired: list[str] = []
    for preset_key, probability in candidates:
        if len(fired) >= max_events:
            break
        if math.isnan(probability):
            probability = 0
        if rng.random() * 100 < clamp(probability, 0, 100):
            fired.append(preset_key)
    return fired
