"""Band-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from band_dynamics.core.modifiers import ChemistryModifiers
from band_dynamics.core.state import BandChemistryState


class BandCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    # Optional starting axes; out-of-range values are clamped, not rejected
    chemistry_level: int | None = None
    romantic_tension: int | None = None
    creative_alignment: int | None = None
    conflict_index: int | None = None


class BandState(BaseModel):
    id: int
    name: str
    chemistry: BandChemistryState
    modifiers: ChemistryModifiers
    version: int
    created_at: datetime
    updated_at: datetime


class WeeklyDriftResponse(BaseModel):
    changes: dict[str, int]  # only the axes that moved
    chemistry: BandChemistryState
