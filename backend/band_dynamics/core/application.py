"""Preset application - applies fired drama presets to a chemistry state.

Presets apply one at a time in roll order, clamping after each. Near the
[0, 100] edges this makes the result order-dependent; that is the intended
behavior and must not be replaced with a sum-then-clamp.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel

from band_dynamics.core.presets import (
    DramaEventPreset,
    DramaSeverity,
    PresetCatalog,
    preset_catalog,
)
from band_dynamics.core.state import BandChemistryState

# Public presets at these severities get picked up by the press.
MEDIA_SEVERITIES = {DramaSeverity.MAJOR, DramaSeverity.CRITICAL}


class AppliedDrama(BaseModel):
    """The outcome of one preset firing, ready to be stored as a history row."""
    preset: DramaEventPreset
    state_before: BandChemistryState
    state_after: BandChemistryState

    @property
    def requested_deltas(self) -> dict[str, int]:
        return self.preset.deltas

    @property
    def media_coverage(self) -> bool:
        return self.preset.is_public and self.preset.severity in MEDIA_SEVERITIES


def apply_preset(
    state: Any,
    preset_key: str,
    catalog: PresetCatalog | None = None,
) -> AppliedDrama:
    """Apply a single preset's deltas and clamp.

    Raises UnknownPresetError if the key is not in the catalog.
    """
    if catalog is None:
        catalog = preset_catalog
    preset = catalog.get(preset_key)
    before = BandChemistryState.coerce(state)
    after = before.shifted(
        chemistry=preset.chemistry_change,
        tension=preset.romantic_tension_change,
        alignment=preset.creative_alignment_change,
        conflict=preset.conflict_index_change,
    )
    return AppliedDrama(preset=preset, state_before=before, state_after=after)


def apply_presets(
    state: Any,
    preset_keys: Iterable[str],
    catalog: PresetCatalog | None = None,
) -> tuple[BandChemistryState, list[AppliedDrama]]:
    """Apply presets sequentially in the given order.

    Returns the final state and one AppliedDrama per preset. Keys are all
    resolved before anything is applied, so an unknown key leaves no
    partial result behind.
    """
    if catalog is None:
        catalog = preset_catalog
    keys = list(preset_keys)
    for key in keys:
        catalog.get(key)

    current = BandChemistryState.coerce(state)
    applied = []
    for key in keys:
        result = apply_preset(current, key, catalog)
        applied.append(result)
        current = result.state_after
    return current, applied
