"""Drama preset catalog - loads the static drama event table from YAML.

The catalog is read-only at runtime. Balance changes are edits to
data/drama_presets.yaml; the loader validates the file against the
PresetKey enum so the trigger evaluator can never propose a key the
catalog does not define.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from types import MappingProxyType

import yaml
from pydantic import BaseModel, ValidationError

from band_dynamics.config import settings
from band_dynamics.core.errors import CatalogError, UnknownPresetError

logger = logging.getLogger(__name__)

DATA_FILE = Path(__file__).parent.parent / "data" / "drama_presets.yaml"


class PresetKey(str, Enum):
    ROMANTIC_BREAKUP = "romantic_breakup"
    ROMANTIC_TENSION_RISE = "romantic_tension_rise"
    AFFAIR_SCANDAL = "affair_scandal"
    CREATIVE_CLASH = "creative_clash"
    GENRE_DISAGREEMENT = "genre_disagreement"
    SONGWRITING_DISPUTE = "songwriting_dispute"
    RIVALRY_ERUPTION = "rivalry_eruption"
    JEALOUSY_INCIDENT = "jealousy_incident"
    LEADERSHIP_CHALLENGE = "leadership_challenge"
    PUBLIC_SCANDAL = "public_scandal"
    MEDIA_FALLOUT = "media_fallout"
    FAN_BACKLASH = "fan_backlash"
    MEMBER_THREAT_LEAVE = "member_threat_leave"
    MEMBER_ULTIMATUM = "member_ultimatum"
    INTERVENTION = "intervention"
    RECONCILIATION = "reconciliation"
    CREATIVE_BREAKTHROUGH = "creative_breakthrough"
    UNITY_MOMENT = "unity_moment"


class DramaType(str, Enum):
    ROMANTIC_BREAKUP = "romantic_breakup"
    ROMANTIC_TENSION = "romantic_tension"
    AFFAIR_SCANDAL = "affair_scandal"
    CREATIVE_CLASH = "creative_clash"
    GENRE_DISAGREEMENT = "genre_disagreement"
    SONGWRITING_DISPUTE = "songwriting_dispute"
    RIVALRY_ERUPTION = "rivalry_eruption"
    JEALOUSY_INCIDENT = "jealousy_incident"
    LEADERSHIP_CHALLENGE = "leadership_challenge"
    PUBLIC_SCANDAL = "public_scandal"
    MEDIA_FALLOUT = "media_fallout"
    FAN_BACKLASH = "fan_backlash"
    MEMBER_THREAT_LEAVE = "member_threat_leave"
    MEMBER_ULTIMATUM = "member_ultimatum"
    INTERVENTION = "intervention"
    RECONCILIATION = "reconciliation"
    CREATIVE_BREAKTHROUGH = "creative_breakthrough"
    UNITY_MOMENT = "unity_moment"


class DramaSeverity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"
    CRITICAL = "critical"


class PresetCategory(str, Enum):
    ROMANTIC = "romantic"
    CREATIVE = "creative"
    RIVALRY = "rivalry"
    PUBLIC = "public"
    ESCALATION = "escalation"
    POSITIVE = "positive"


class DramaEventPreset(BaseModel):
    """One immutable catalog entry."""
    key: PresetKey
    type: DramaType
    category: PresetCategory
    label: str
    severity: DramaSeverity
    chemistry_change: int
    romantic_tension_change: int
    creative_alignment_change: int
    conflict_index_change: int
    member_leave_risk: int  # added to each member's leave risk, negative heals
    is_public: bool = False
    description: str = ""

    model_config = {"frozen": True}

    @property
    def deltas(self) -> dict[str, int]:
        """Deltas keyed by the state axis they apply to."""
        return {
            "chemistry_level": self.chemistry_change,
            "romantic_tension": self.romantic_tension_change,
            "creative_alignment": self.creative_alignment_change,
            "conflict_index": self.conflict_index_change,
        }


class PresetCatalog:
    """Lazily loaded, cached, read-only preset lookup."""

    def __init__(self, path: Path | None = None):
        self.path = path or DATA_FILE
        self._presets: Mapping[str, DramaEventPreset] | None = None

    def load(self) -> Mapping[str, DramaEventPreset]:
        """Load and validate the catalog file. Cached after the first call."""
        if self._presets is not None:
            return self._presets

        if not self.path.exists():
            raise CatalogError(f"Preset catalog not found: {self.path}")

        with open(self.path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        entries = raw.get("presets")
        if not isinstance(entries, dict):
            raise CatalogError(f"{self.path}: expected a 'presets' mapping")

        known = {k.value for k in PresetKey}
        unknown = sorted(set(entries) - known)
        if unknown:
            raise CatalogError(f"{self.path}: unknown preset keys {unknown}")
        missing = sorted(known - set(entries))
        if missing:
            raise CatalogError(f"{self.path}: missing preset keys {missing}")

        presets = {}
        for key, data in entries.items():
            try:
                presets[key] = DramaEventPreset(key=key, **data)
            except (TypeError, ValidationError) as e:
                raise CatalogError(f"{self.path}: invalid preset {key!r}: {e}") from e

        self._presets = MappingProxyType(presets)
        logger.debug("Loaded %d drama presets from %s", len(presets), self.path)
        return self._presets

    def get(self, key: str) -> DramaEventPreset:
        """Look up a preset. Raises UnknownPresetError for keys not in the catalog."""
        key = key.value if isinstance(key, PresetKey) else key
        try:
            return self.load()[key]
        except KeyError:
            raise UnknownPresetError(key) from None

    def all(self) -> Mapping[str, DramaEventPreset]:
        return self.load()

    def keys(self) -> list[str]:
        return list(self.load())

    def by_category(self, category: PresetCategory | str) -> list[DramaEventPreset]:
        category = PresetCategory(category)
        return [p for p in self.load().values() if p.category == category]

    def __contains__(self, key: object) -> bool:
        if isinstance(key, PresetKey):
            key = key.value
        return key in self.load()

    def __len__(self) -> int:
        return len(self.load())


preset_catalog = PresetCatalog(settings.PRESET_CATALOG_PATH)
