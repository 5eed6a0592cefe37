"""Chemistry service - reads band state, runs the drama engine, persists the result.

All mutation of a band's chemistry goes through the apply-and-persist step
here. The band row is versioned, so two writers racing on the same band
cannot silently overwrite each other: the loser gets ConcurrentUpdateError.
"""

import logging
import random

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from band_dynamics.config import settings
from band_dynamics.core.application import AppliedDrama, apply_preset, apply_presets
from band_dynamics.core.drift import weekly_drift
from band_dynamics.core.errors import BandNotFoundError, ConcurrentUpdateError
from band_dynamics.core.modifiers import ChemistryModifiers, RandomSource, compute_modifiers
from band_dynamics.core.roller import roll_events
from band_dynamics.core.state import BandChemistryState
from band_dynamics.core.triggers import DramaCandidate, evaluate_triggers, parse_trigger_source
from band_dynamics.models.band import Band
from band_dynamics.models.drama_event import BandDramaEvent

logger = logging.getLogger(__name__)

MANUAL_SOURCE = "manual"


class ChemistryService:
    def __init__(self, rng: RandomSource | None = None):
        self.rng = rng or random.Random()

    @staticmethod
    async def create_band(
        db: AsyncSession,
        name: str,
        chemistry_level: int | None = None,
        romantic_tension: int | None = None,
        creative_alignment: int | None = None,
        conflict_index: int | None = None,
    ) -> Band:
        """Create a band with default (or supplied, clamped) starting chemistry."""
        state = BandChemistryState(
            chemistry_level=_default(chemistry_level, settings.DEFAULT_CHEMISTRY_LEVEL),
            romantic_tension=_default(romantic_tension, settings.DEFAULT_ROMANTIC_TENSION),
            creative_alignment=_default(creative_alignment, settings.DEFAULT_CREATIVE_ALIGNMENT),
            conflict_index=_default(conflict_index, settings.DEFAULT_CONFLICT_INDEX),
        )
        band = Band(name=name)
        band.set_chemistry_state(state)
        db.add(band)
        await db.flush()
        await db.refresh(band)
        logger.info("Created band %s (%s) with %s", band.id, name, state.model_dump())
        return band

    @staticmethod
    async def get_band(db: AsyncSession, band_id: int) -> Band:
        result = await db.execute(select(Band).where(Band.id == band_id))
        band = result.scalar_one_or_none()
        if band is None:
            raise BandNotFoundError(band_id)
        return band

    def get_modifiers(self, band: Band) -> ChemistryModifiers:
        return compute_modifiers(band.chemistry_state, rng=self.rng)

    async def process_trigger(
        self,
        db: AsyncSession,
        band_id: int,
        source: str,
        instigator_member_id: str | None = None,
        target_member_id: str | None = None,
        max_events: int | None = None,
    ) -> tuple[list[DramaCandidate], list[BandDramaEvent], BandChemistryState]:
        """Evaluate a trigger, roll for events, apply the fired ones and record them.

        Returns the candidates considered, the history rows created (in roll
        order) and the band's new state.
        """
        band = await self.get_band(db, band_id)
        state = band.chemistry_state

        if parse_trigger_source(source) is None:
            logger.warning("Unknown drama trigger source %r for band %s", source, band_id)

        candidates = evaluate_triggers(state, source)
        if max_events is None:
            max_events = settings.MAX_DRAMA_EVENTS_PER_TRIGGER
        fired_keys = roll_events(candidates, max_events=max_events, rng=self.rng)
        if not fired_keys:
            return candidates, [], state

        new_state, applied = apply_presets(state, fired_keys)
        events = [
            _build_event(
                band_id, drama, str(getattr(source, "value", source)),
                instigator_member_id, target_member_id,
            )
            for drama in applied
        ]
        await self._persist(db, band, new_state, events)

        for event in events:
            logger.info(
                "Band %s drama fired: %s (%s) via %s",
                band_id, event.preset_key, event.severity, event.event_metadata["trigger_source"],
            )
        return candidates, events, new_state

    async def apply_manual_preset(
        self,
        db: AsyncSession,
        band_id: int,
        preset_key: str,
        instigator_member_id: str | None = None,
        target_member_id: str | None = None,
        description: str | None = None,
    ) -> tuple[BandDramaEvent, BandChemistryState]:
        """Apply one preset directly, bypassing triggers and rolling.

        Raises UnknownPresetError if the key is not in the catalog.
        """
        band = await self.get_band(db, band_id)
        drama = apply_preset(band.chemistry_state, preset_key)
        event = _build_event(
            band_id, drama, MANUAL_SOURCE, instigator_member_id, target_member_id, description,
        )
        await self._persist(db, band, drama.state_after, [event])
        logger.info("Band %s drama applied manually: %s", band_id, event.preset_key)
        return event, drama.state_after

    async def apply_weekly_drift(
        self, db: AsyncSession, band_id: int
    ) -> tuple[dict[str, int], BandChemistryState]:
        """Apply one week of natural drift. Returns (changed axes, new state)."""
        band = await self.get_band(db, band_id)
        state = band.chemistry_state
        changes = weekly_drift(state)
        new_state = state.apply(changes)
        if changes:
            await self._persist(db, band, new_state, [])
        logger.debug("Band %s weekly drift: %s", band_id, changes)
        return changes, new_state

    @staticmethod
    async def list_events(
        db: AsyncSession,
        band_id: int,
        resolved: bool | None = None,
        limit: int = 50,
    ) -> list[BandDramaEvent]:
        """Drama history for a band, newest first, optionally filtered by resolution."""
        query = select(BandDramaEvent).where(BandDramaEvent.band_id == band_id)
        if resolved is not None:
            query = query.where(BandDramaEvent.resolved == resolved)
        query = query.order_by(BandDramaEvent.id.desc()).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def _persist(
        db: AsyncSession,
        band: Band,
        new_state: BandChemistryState,
        events: list[BandDramaEvent],
    ) -> None:
        # Read before flushing: a failed flush leaves the session unusable until rollback
        band_id = band.id
        band.set_chemistry_state(new_state)
        db.add_all(events)
        try:
            await db.flush()
        except StaleDataError:
            logger.warning("Stale write on band %s, discarding update", band_id)
            await db.rollback()
            raise ConcurrentUpdateError(band_id) from None
        await db.refresh(band)
        for event in events:
            await db.refresh(event)


def _default(value: int | None, fallback: int) -> int:
    return fallback if value is None else value


def _build_event(
    band_id: int,
    drama: AppliedDrama,
    source: str,
    instigator_member_id: str | None,
    target_member_id: str | None,
    description: str | None = None,
) -> BandDramaEvent:
    """History row for one applied preset, carrying the requested (unclamped) deltas."""
    preset = drama.preset
    return BandDramaEvent(
        band_id=band_id,
        preset_key=preset.key.value,
        drama_type=preset.type.value,
        severity=preset.severity.value,
        chemistry_change=preset.chemistry_change,
        romantic_tension_change=preset.romantic_tension_change,
        creative_alignment_change=preset.creative_alignment_change,
        conflict_index_change=preset.conflict_index_change,
        instigator_member_id=instigator_member_id,
        target_member_id=target_member_id,
        member_leave_risk=preset.member_leave_risk,
        resolved=False,
        description=description or preset.description,
        public_knowledge=preset.is_public,
        media_coverage=drama.media_coverage,
        event_metadata={
            "trigger_source": source,
            "state_before": drama.state_before.model_dump(),
            "state_after": drama.state_after.model_dump(),
        },
    )


chemistry_service = ChemistryService()
