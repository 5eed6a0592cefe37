"""Band model - stores the band's current four-axis chemistry state."""

from datetime import datetime

from sqlalchemy import String, Integer, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from band_dynamics.config import settings
from band_dynamics.core.state import BandChemistryState, AXES, clamp_axis
from band_dynamics.db.database import Base


class Band(Base):
    __tablename__ = "bands"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))

    # Chemistry axes, always in [0, 100]
    chemistry_level: Mapped[int] = mapped_column(Integer, default=settings.DEFAULT_CHEMISTRY_LEVEL)
    romantic_tension: Mapped[int] = mapped_column(Integer, default=settings.DEFAULT_ROMANTIC_TENSION)
    creative_alignment: Mapped[int] = mapped_column(Integer, default=settings.DEFAULT_CREATIVE_ALIGNMENT)
    conflict_index: Mapped[int] = mapped_column(Integer, default=settings.DEFAULT_CONFLICT_INDEX)

    # Optimistic concurrency: a write based on a stale read raises StaleDataError
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def chemistry_state(self) -> BandChemistryState:
        """Current state, clamped even if the row holds out-of-range values."""
        return BandChemistryState.coerce(self)

    def set_chemistry_state(self, state: BandChemistryState) -> None:
        for axis in AXES:
            setattr(self, axis, clamp_axis(getattr(state, axis)))
