"""Preset endpoints - read-only access to the drama preset catalog."""

from fastapi import APIRouter, HTTPException

from band_dynamics.core.errors import UnknownPresetError
from band_dynamics.core.presets import PresetCategory, preset_catalog
from band_dynamics.schemas.drama import PresetOut

router = APIRouter()


@router.get("/", response_model=list[PresetOut])
async def list_presets(category: PresetCategory | None = None):
    """List catalog entries, optionally filtered by category."""
    if category is not None:
        presets = preset_catalog.by_category(category)
    else:
        presets = list(preset_catalog.all().values())
    return [PresetOut.model_validate(p) for p in presets]


@router.get("/{preset_key}", response_model=PresetOut)
async def get_preset(preset_key: str):
    try:
        preset = preset_catalog.get(preset_key)
    except UnknownPresetError:
        raise HTTPException(status_code=404, detail="Preset not found")
    return PresetOut.model_validate(preset)
