"""Band endpoints - chemistry state, drama triggers, weekly drift, drama history."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from band_dynamics.core.errors import BandNotFoundError, ConcurrentUpdateError, UnknownPresetError
from band_dynamics.core.modifiers import ChemistryModifiers
from band_dynamics.db.database import get_db
from band_dynamics.models.band import Band
from band_dynamics.schemas.band import BandCreate, BandState, WeeklyDriftResponse
from band_dynamics.schemas.drama import (
    ApplyPresetRequest,
    CandidateOut,
    DramaEventOut,
    TriggerRequest,
    TriggerResponse,
)
from band_dynamics.services.chemistry_service import chemistry_service

router = APIRouter()


async def _get_band_or_404(band_id: int, db: AsyncSession) -> Band:
    """Fetch a band by ID or raise 404."""
    try:
        return await chemistry_service.get_band(db, band_id)
    except BandNotFoundError:
        raise HTTPException(status_code=404, detail="Band not found")


def _band_to_response(band: Band) -> BandState:
    """Convert ORM model to response schema with computed modifiers."""
    return BandState(
        id=band.id,
        name=band.name,
        chemistry=band.chemistry_state,
        modifiers=chemistry_service.get_modifiers(band),
        version=band.version,
        created_at=band.created_at,
        updated_at=band.updated_at,
    )


@router.post("/", response_model=BandState, status_code=201)
async def create_band(data: BandCreate, db: AsyncSession = Depends(get_db)):
    """Create a new band."""
    band = await chemistry_service.create_band(
        db,
        name=data.name,
        chemistry_level=data.chemistry_level,
        romantic_tension=data.romantic_tension,
        creative_alignment=data.creative_alignment,
        conflict_index=data.conflict_index,
    )
    return _band_to_response(band)


@router.get("/{band_id}", response_model=BandState)
async def get_band(band_id: int, db: AsyncSession = Depends(get_db)):
    """Get current chemistry state and derived modifiers."""
    band = await _get_band_or_404(band_id, db)
    return _band_to_response(band)


@router.get("/{band_id}/modifiers", response_model=ChemistryModifiers)
async def get_modifiers(band_id: int, db: AsyncSession = Depends(get_db)):
    """Get gameplay modifiers only (for gig, songwriting and rehearsal systems)."""
    band = await _get_band_or_404(band_id, db)
    return chemistry_service.get_modifiers(band)


@router.post("/{band_id}/triggers", response_model=TriggerResponse)
async def process_trigger(
    band_id: int, req: TriggerRequest, db: AsyncSession = Depends(get_db)
):
    """Evaluate a drama trigger, roll for events and apply whatever fires."""
    await _get_band_or_404(band_id, db)
    try:
        candidates, events, state = await chemistry_service.process_trigger(
            db, band_id, req.source,
            instigator_member_id=req.instigator_member_id,
            target_member_id=req.target_member_id,
            max_events=req.max_events,
        )
    except ConcurrentUpdateError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return TriggerResponse(
        source=req.source,
        candidates=[CandidateOut(preset_key=c.preset_key, probability=c.probability) for c in candidates],
        fired=[DramaEventOut.model_validate(e) for e in events],
        chemistry=state,
    )


@router.post("/{band_id}/drama", response_model=DramaEventOut, status_code=201)
async def apply_preset(
    band_id: int, req: ApplyPresetRequest, db: AsyncSession = Depends(get_db)
):
    """Apply a drama preset directly (admin correction)."""
    await _get_band_or_404(band_id, db)
    try:
        event, _ = await chemistry_service.apply_manual_preset(
            db, band_id, req.preset_key,
            instigator_member_id=req.instigator_member_id,
            target_member_id=req.target_member_id,
            description=req.description,
        )
    except UnknownPresetError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConcurrentUpdateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return DramaEventOut.model_validate(event)


@router.post("/{band_id}/weekly-drift", response_model=WeeklyDriftResponse)
async def apply_weekly_drift(band_id: int, db: AsyncSession = Depends(get_db)):
    """Apply one week of natural healing and decay."""
    await _get_band_or_404(band_id, db)
    try:
        changes, state = await chemistry_service.apply_weekly_drift(db, band_id)
    except ConcurrentUpdateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return WeeklyDriftResponse(changes=changes, chemistry=state)


@router.get("/{band_id}/events", response_model=list[DramaEventOut])
async def list_events(
    band_id: int,
    resolved: bool | None = None,
    limit: int = 50,
    db: AsyncSession = Depends(get_db),
):
    """Get drama history for a band, newest first."""
    await _get_band_or_404(band_id, db)
    events = await chemistry_service.list_events(db, band_id, resolved=resolved, limit=limit)
    return [DramaEventOut.model_validate(e) for e in events]
