"""Weekly drift - ambient healing and decay, applied once per game week."""

from __future__ import annotations

from typing import Any

from band_dynamics.core.state import BandChemistryState, clamp_axis

NEUTRAL_ALIGNMENT = 50
CONFLICT_DECAY = 3
TENSION_DECAY = 2
ALIGNMENT_RECOVERY = 2   # below neutral: rebuilds faster than it erodes
ALIGNMENT_EROSION = 1    # above neutral
CHRONIC_CONFLICT_THRESHOLD = 50
CHRONIC_CONFLICT_CHEMISTRY_LOSS = 2


def weekly_drift(state: Any) -> dict[str, int]:
    """Return the partial state update for one week of natural drift.

    Only fields whose value actually changes are included, so a band that
    has fully settled yields an empty dict.
    """
    s = BandChemistryState.coerce(state)

    if s.creative_alignment < NEUTRAL_ALIGNMENT:
        alignment = s.creative_alignment + ALIGNMENT_RECOVERY
    elif s.creative_alignment > NEUTRAL_ALIGNMENT:
        alignment = s.creative_alignment - ALIGNMENT_EROSION
    else:
        alignment = s.creative_alignment

    chemistry = s.chemistry_level
    if s.conflict_index > CHRONIC_CONFLICT_THRESHOLD:
        chemistry -= CHRONIC_CONFLICT_CHEMISTRY_LOSS

    drifted = {
        "conflict_index": clamp_axis(s.conflict_index - CONFLICT_DECAY),
        "romantic_tension": clamp_axis(s.romantic_tension - TENSION_DECAY),
        "creative_alignment": clamp_axis(alignment),
        "chemistry_level": clamp_axis(chemistry),
    }
    return {axis: value for axis, value in drifted.items() if value != getattr(s, axis)}
