"""Database models package."""

from band_dynamics.models.band import Band
from band_dynamics.models.drama_event import BandDramaEvent

__all__ = ["Band", "BandDramaEvent"]
