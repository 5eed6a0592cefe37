"""Drama-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from band_dynamics.core.presets import DramaSeverity, DramaType, PresetCategory, PresetKey
from band_dynamics.core.state import BandChemistryState
from band_dynamics.core.triggers import TriggerSource


class TriggerRequest(BaseModel):
    source: TriggerSource
    instigator_member_id: str | None = None
    target_member_id: str | None = None
    max_events: int | None = Field(default=None, ge=0, le=10)  # None = configured default


class CandidateOut(BaseModel):
    preset_key: str
    probability: float


class DramaEventOut(BaseModel):
    id: int
    band_id: int
    preset_key: str
    drama_type: str
    severity: str
    chemistry_change: int
    romantic_tension_change: int
    creative_alignment_change: int
    conflict_index_change: int
    instigator_member_id: str | None
    target_member_id: str | None
    member_leave_risk: int
    resolved: bool
    resolution_type: str | None
    resolved_at: datetime | None
    description: str | None
    public_knowledge: bool
    media_coverage: bool
    metadata: dict = Field(validation_alias="event_metadata")
    created_at: datetime

    model_config = {"from_attributes": True}


class TriggerResponse(BaseModel):
    source: TriggerSource
    candidates: list[CandidateOut]
    fired: list[DramaEventOut]
    chemistry: BandChemistryState


class ApplyPresetRequest(BaseModel):
    """Manual preset application, for admin corrections."""
    preset_key: str
    instigator_member_id: str | None = None
    target_member_id: str | None = None
    description: str | None = None


class PresetOut(BaseModel):
    key: PresetKey
    type: DramaType
    category: PresetCategory
    label: str
    severity: DramaSeverity
    chemistry_change: int
    romantic_tension_change: int
    creative_alignment_change: int
    conflict_index_change: int
    member_leave_risk: int
    is_public: bool
    description: str

    model_config = {"from_attributes": True}
