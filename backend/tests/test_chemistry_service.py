"""Tests for the chemistry service - apply-and-persist against the test DB."""

import logging

import pytest
from sqlalchemy import update

from band_dynamics.core.errors import BandNotFoundError, ConcurrentUpdateError, UnknownPresetError
from band_dynamics.models.band import Band
from band_dynamics.services.chemistry_service import ChemistryService
from helpers import FixedRandom


@pytest.fixture
def firing_service():
    """Every candidate with probability > 0 fires."""
    return ChemistryService(rng=FixedRandom(0.0))


@pytest.fixture
def quiet_service():
    return ChemistryService(rng=FixedRandom(0.999999))


async def _midrange_band(db) -> Band:
    return await ChemistryService.create_band(
        db, "The Midrangers",
        chemistry_level=50, romantic_tension=50, creative_alignment=50, conflict_index=50,
    )


# ---------------------------------------------------------------------------
# Bands
# ---------------------------------------------------------------------------


async def test_create_band_defaults(db):
    band = await ChemistryService.create_band(db, "Fresh Faces")
    assert band.id is not None
    assert band.chemistry_level == 50
    assert band.romantic_tension == 0
    assert band.creative_alignment == 50
    assert band.conflict_index == 0
    assert band.version == 1
    assert band.created_at is not None


async def test_create_band_clamps_starting_values(db):
    band = await ChemistryService.create_band(db, "Overdrive", chemistry_level=150, conflict_index=-3)
    assert band.chemistry_level == 100
    assert band.conflict_index == 0


async def test_get_band_not_found(db):
    with pytest.raises(BandNotFoundError):
        await ChemistryService.get_band(db, 999)


async def test_corrupted_row_reads_clamped(db):
    band = await _midrange_band(db)
    band.conflict_index = 180
    await db.flush()
    assert band.chemistry_state.conflict_index == 100


async def test_get_modifiers(db, quiet_service):
    band = await _midrange_band(db)
    mods = quiet_service.get_modifiers(band)
    assert mods.song_quality == 0.9
    assert mods.member_leave_risk == 25


# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------


async def test_process_trigger_applies_and_records(db, firing_service):
    band = await _midrange_band(db)

    candidates, events, state = await firing_service.process_trigger(
        db, band.id, "romantic_breakup",
        instigator_member_id="m-1", target_member_id="m-2",
    )

    assert [c.preset_key for c in candidates] == ["romantic_breakup", "member_threat_leave"]
    assert [e.preset_key for e in events] == ["romantic_breakup", "member_threat_leave"]
    assert state.model_dump() == {
        "chemistry_level": 17,
        "romantic_tension": 85,
        "creative_alignment": 30,
        "conflict_index": 100,
    }

    breakup = events[0]
    assert breakup.id is not None
    assert breakup.band_id == band.id
    assert breakup.drama_type == "romantic_breakup"
    assert breakup.severity == "major"
    assert breakup.chemistry_change == -15
    assert breakup.conflict_index_change == 20
    assert breakup.member_leave_risk == 25
    assert breakup.instigator_member_id == "m-1"
    assert breakup.target_member_id == "m-2"
    assert breakup.resolved is False
    assert breakup.public_knowledge is False
    assert breakup.event_metadata["trigger_source"] == "romantic_breakup"
    assert breakup.event_metadata["state_before"]["chemistry_level"] == 50

    # Second event records the requested delta even though conflict clamped at 100
    assert events[1].conflict_index_change == 30
    assert events[1].event_metadata["state_after"]["conflict_index"] == 100

    # Band row updated in place with a new version
    assert band.conflict_index == 100
    assert band.version == 2


async def test_process_trigger_respects_cap(db, firing_service):
    band = await _midrange_band(db)
    _, events, _ = await firing_service.process_trigger(db, band.id, "public_scandal", max_events=1)
    assert [e.preset_key for e in events] == ["public_scandal"]
    assert events[0].public_knowledge is True
    assert events[0].media_coverage is True


async def test_process_trigger_nothing_fires(db, quiet_service):
    band = await _midrange_band(db)
    candidates, events, state = await quiet_service.process_trigger(db, band.id, "rivalry")
    assert len(candidates) == 2
    assert events == []
    assert state == band.chemistry_state
    assert band.version == 1


async def test_unknown_trigger_source_is_logged(db, firing_service, caplog):
    band = await _midrange_band(db)
    with caplog.at_level(logging.WARNING, logger="band_dynamics.services.chemistry_service"):
        candidates, events, _ = await firing_service.process_trigger(db, band.id, "alien_invasion")
    assert candidates == []
    assert events == []
    assert "alien_invasion" in caplog.text


async def test_process_trigger_missing_band(db, firing_service):
    with pytest.raises(BandNotFoundError):
        await firing_service.process_trigger(db, 404, "weekly_check")


# ---------------------------------------------------------------------------
# Manual application and drift
# ---------------------------------------------------------------------------


async def test_apply_manual_preset(db, quiet_service):
    band = await _midrange_band(db)
    event, state = await quiet_service.apply_manual_preset(
        db, band.id, "reconciliation", description="Talked it out after the show"
    )
    assert event.preset_key == "reconciliation"
    assert event.member_leave_risk == -15
    assert event.description == "Talked it out after the show"
    assert event.event_metadata["trigger_source"] == "manual"
    assert state.chemistry_level == 62
    assert band.chemistry_level == 62


async def test_apply_manual_unknown_preset(db, quiet_service):
    band = await _midrange_band(db)
    with pytest.raises(UnknownPresetError):
        await quiet_service.apply_manual_preset(db, band.id, "band_explodes")
    assert band.chemistry_level == 50
    assert await ChemistryService.list_events(db, band.id) == []


async def test_weekly_drift_persists(db, quiet_service):
    band = await _midrange_band(db)
    changes, state = await quiet_service.apply_weekly_drift(db, band.id)
    assert changes == {"conflict_index": 47, "romantic_tension": 48}
    assert state.conflict_index == 47
    assert band.conflict_index == 47
    assert band.version == 2


async def test_weekly_drift_settled_band_is_noop(db, quiet_service):
    band = await ChemistryService.create_band(db, "Zen Garden")
    changes, _ = await quiet_service.apply_weekly_drift(db, band.id)
    assert changes == {}
    assert band.version == 1


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


async def test_list_events_newest_first_and_filtered(db, firing_service):
    band = await _midrange_band(db)
    await firing_service.process_trigger(db, band.id, "romantic_breakup")

    events = await ChemistryService.list_events(db, band.id)
    assert [e.preset_key for e in events] == ["member_threat_leave", "romantic_breakup"]

    events[1].resolved = True
    events[1].resolution_type = "therapy"
    await db.flush()

    unresolved = await ChemistryService.list_events(db, band.id, resolved=False)
    assert [e.preset_key for e in unresolved] == ["member_threat_leave"]
    resolved = await ChemistryService.list_events(db, band.id, resolved=True)
    assert [e.preset_key for e in resolved] == ["romantic_breakup"]
    assert len(await ChemistryService.list_events(db, band.id, limit=1)) == 1


async def test_list_events_scoped_to_band(db, firing_service):
    band = await _midrange_band(db)
    other = await _midrange_band(db)
    await firing_service.process_trigger(db, band.id, "public_scandal")
    assert await ChemistryService.list_events(db, other.id) == []


# ---------------------------------------------------------------------------
# Optimistic concurrency
# ---------------------------------------------------------------------------


async def test_stale_write_raises_concurrent_update(db, firing_service):
    band = await _midrange_band(db)
    band_id = band.id
    await db.commit()

    # Another writer bumps the row behind this session's back
    await db.execute(
        update(Band.__table__)
        .where(Band.__table__.c.id == band_id)
        .values(version=Band.__table__.c.version + 1, conflict_index=10)
    )
    await db.commit()

    with pytest.raises(ConcurrentUpdateError) as exc_info:
        await firing_service.apply_manual_preset(db, band_id, "unity_moment")
    assert exc_info.value.band_id == band_id

    # The other writer's update survives
    fresh = await ChemistryService.get_band(db, band_id)
    await db.refresh(fresh)
    assert fresh.conflict_index == 10
    assert fresh.version == 2


async def test_racing_sessions_second_writer_loses(session_factory, quiet_service):
    async with session_factory() as setup:
        band = await _midrange_band(setup)
        band_id = band.id
        await setup.commit()

    async with session_factory() as a, session_factory() as b:
        # Both writers read version 1
        await ChemistryService.get_band(a, band_id)
        await ChemistryService.get_band(b, band_id)

        await quiet_service.apply_manual_preset(a, band_id, "unity_moment")
        await a.commit()

        with pytest.raises(ConcurrentUpdateError):
            await quiet_service.apply_manual_preset(b, band_id, "rivalry_eruption")

        # The loser's session is usable again and sees the winner's write
        winner = await ChemistryService.get_band(b, band_id)
        assert winner.version == 2
        assert winner.chemistry_level == 65
        assert [e.preset_key for e in await ChemistryService.list_events(b, band_id)] == ["unity_moment"]
