"""Trigger evaluator - proposes candidate drama events for a situation.

Returns (preset key, probability %) candidates only; nothing fires here.
Probabilities are independent, not normalized. Candidate order matters:
the event roller gives earlier candidates priority when the cap is hit.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, NamedTuple

from band_dynamics.core.presets import PresetKey
from band_dynamics.core.state import BandChemistryState


class TriggerSource(str, Enum):
    ROMANTIC_BREAKUP = "romantic_breakup"
    RIVALRY = "rivalry"
    CREATIVE_DISAGREEMENT = "creative_disagreement"
    PUBLIC_SCANDAL = "public_scandal"
    WEEKLY_CHECK = "weekly_check"
    GIG_OUTCOME = "gig_outcome"
    SONGWRITING_SESSION = "songwriting_session"


class DramaCandidate(NamedTuple):
    preset_key: str
    probability: float


Handler = Callable[[BandChemistryState], list[DramaCandidate]]


def _candidate(key: PresetKey, probability: float) -> DramaCandidate:
    return DramaCandidate(key.value, probability)


def _romantic_breakup(s: BandChemistryState) -> list[DramaCandidate]:
    candidates = [_candidate(PresetKey.ROMANTIC_BREAKUP, 90)]
    if s.romantic_tension > 40:
        candidates.append(_candidate(PresetKey.MEMBER_THREAT_LEAVE, 20))
    if s.conflict_index > 50:
        candidates.append(_candidate(PresetKey.RIVALRY_ERUPTION, 30))
    return candidates


def _rivalry(s: BandChemistryState) -> list[DramaCandidate]:
    candidates = [
        _candidate(PresetKey.RIVALRY_ERUPTION, 70),
        _candidate(PresetKey.JEALOUSY_INCIDENT, 40),
    ]
    if s.conflict_index > 60:
        candidates.append(_candidate(PresetKey.MEMBER_THREAT_LEAVE, 25))
    return candidates


def _creative_disagreement(s: BandChemistryState) -> list[DramaCandidate]:
    candidates = [
        _candidate(PresetKey.CREATIVE_CLASH, 60),
        _candidate(PresetKey.GENRE_DISAGREEMENT, 40),
        _candidate(PresetKey.SONGWRITING_DISPUTE, 30),
    ]
    # An aligned band can turn a disagreement into growth
    if s.creative_alignment > 60:
        candidates.append(_candidate(PresetKey.CREATIVE_BREAKTHROUGH, 15))
    return candidates


def _public_scandal(s: BandChemistryState) -> list[DramaCandidate]:
    return [
        _candidate(PresetKey.PUBLIC_SCANDAL, 80),
        _candidate(PresetKey.MEDIA_FALLOUT, 60),
        _candidate(PresetKey.FAN_BACKLASH, 50),
    ]


def _weekly_check(s: BandChemistryState) -> list[DramaCandidate]:
    """Passive drama driven purely by the current state."""
    candidates = []
    if s.conflict_index > 60:
        candidates.append(_candidate(PresetKey.MEMBER_THREAT_LEAVE, s.conflict_index / 5))
    if s.romantic_tension > 50:
        candidates.append(_candidate(PresetKey.ROMANTIC_TENSION_RISE, s.romantic_tension / 4))
    if s.creative_alignment < 30:
        candidates.append(_candidate(PresetKey.CREATIVE_CLASH, 15))
    if s.chemistry_level > 75 and s.conflict_index < 20:
        candidates.append(_candidate(PresetKey.UNITY_MOMENT, 10))
    return candidates


def _gig_outcome(s: BandChemistryState) -> list[DramaCandidate]:
    candidates = []
    if s.conflict_index > 40:
        candidates.append(_candidate(PresetKey.RIVALRY_ERUPTION, 15))
    if s.romantic_tension > 60:
        candidates.append(_candidate(PresetKey.JEALOUSY_INCIDENT, 20))
    # Good gigs can heal
    if s.chemistry_level > 60:
        candidates.append(_candidate(PresetKey.UNITY_MOMENT, 12))
    return candidates


def _songwriting_session(s: BandChemistryState) -> list[DramaCandidate]:
    candidates = []
    if s.creative_alignment < 40:
        candidates.append(_candidate(PresetKey.SONGWRITING_DISPUTE, 25))
    if s.creative_alignment > 70:
        candidates.append(_candidate(PresetKey.CREATIVE_BREAKTHROUGH, 20))
    return candidates


TRIGGER_HANDLERS: dict[TriggerSource, Handler] = {
    TriggerSource.ROMANTIC_BREAKUP: _romantic_breakup,
    TriggerSource.RIVALRY: _rivalry,
    TriggerSource.CREATIVE_DISAGREEMENT: _creative_disagreement,
    TriggerSource.PUBLIC_SCANDAL: _public_scandal,
    TriggerSource.WEEKLY_CHECK: _weekly_check,
    TriggerSource.GIG_OUTCOME: _gig_outcome,
    TriggerSource.SONGWRITING_SESSION: _songwriting_session,
}

_unhandled = set(TriggerSource) - set(TRIGGER_HANDLERS)
if _unhandled:
    raise RuntimeError(f"Trigger sources without a handler: {sorted(s.value for s in _unhandled)}")


def parse_trigger_source(source: Any) -> TriggerSource | None:
    """Return the TriggerSource for a tag, or None if it isn't one."""
    if isinstance(source, TriggerSource):
        return source
    try:
        return TriggerSource(source)
    except ValueError:
        return None


def evaluate_triggers(state: Any, source: TriggerSource | str) -> list[DramaCandidate]:
    """Determine which drama events could fire for this state and trigger source.

    Deterministic. Unknown sources yield an empty list rather than an error;
    reporting them is the caller's job.
    """
    trigger = parse_trigger_source(source)
    if trigger is None:
        return []
    return TRIGGER_HANDLERS[trigger](BandChemistryState.coerce(state))
