"""Band relationship dynamics engine.

Pure functions over a four-axis chemistry state (chemistry, romantic
tension, creative alignment, conflict): gameplay modifiers, drama trigger
evaluation, event rolling, preset application and weekly drift.
"""

from band_dynamics.core.application import AppliedDrama, apply_preset, apply_presets
from band_dynamics.core.drift import weekly_drift
from band_dynamics.core.errors import (
    BandDynamicsError,
    BandNotFoundError,
    CatalogError,
    ConcurrentUpdateError,
    UnknownPresetError,
)
from band_dynamics.core.modifiers import ChemistryModifiers, compute_modifiers
from band_dynamics.core.presets import (
    DramaEventPreset,
    DramaSeverity,
    DramaType,
    PresetCategory,
    PresetKey,
    preset_catalog,
)
from band_dynamics.core.roller import roll_events
from band_dynamics.core.state import BandChemistryState
from band_dynamics.core.triggers import DramaCandidate, TriggerSource, evaluate_triggers

__all__ = [
    # State
    "BandChemistryState",
    # Catalog
    "DramaEventPreset",
    "DramaSeverity",
    "DramaType",
    "PresetCategory",
    "PresetKey",
    "preset_catalog",
    # Engine
    "ChemistryModifiers",
    "compute_modifiers",
    "DramaCandidate",
    "TriggerSource",
    "evaluate_triggers",
    "roll_events",
    "weekly_drift",
    "AppliedDrama",
    "apply_preset",
    "apply_presets",
    # Errors
    "BandDynamicsError",
    "BandNotFoundError",
    "CatalogError",
    "ConcurrentUpdateError",
    "UnknownPresetError",
]
