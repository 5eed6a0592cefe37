"""Drama event model - append-only history of fired drama presets."""

from datetime import datetime

from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, JSON, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from band_dynamics.db.database import Base


class BandDramaEvent(Base):
    """One row per fired event. Never deleted, only marked resolved."""
    __tablename__ = "band_drama_events"

    id: Mapped[int] = mapped_column(primary_key=True)
    band_id: Mapped[int] = mapped_column(ForeignKey("bands.id"), index=True)

    preset_key: Mapped[str] = mapped_column(String(50))
    drama_type: Mapped[str] = mapped_column(String(50))
    severity: Mapped[str] = mapped_column(String(20))  # minor | moderate | major | critical

    # Requested deltas (before clamping), not the effective change
    chemistry_change: Mapped[int] = mapped_column(Integer, default=0)
    romantic_tension_change: Mapped[int] = mapped_column(Integer, default=0)
    creative_alignment_change: Mapped[int] = mapped_column(Integer, default=0)
    conflict_index_change: Mapped[int] = mapped_column(Integer, default=0)

    instigator_member_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    target_member_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    member_leave_risk: Mapped[int] = mapped_column(Integer, default=0)

    # Resolution is handled by a separate workflow
    resolved: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    resolution_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    public_knowledge: Mapped[bool] = mapped_column(Boolean, default=False)
    media_coverage: Mapped[bool] = mapped_column(Boolean, default=False)

    # e.g. {"trigger_source": "weekly_check", "state_before": {...}, "state_after": {...}}
    event_metadata: Mapped[dict] = mapped_column("metadata", JSON, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
