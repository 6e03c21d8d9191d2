"""Relationship models - the root entity plus its interaction and stage-change events."""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fathom.db.database import Base


class Relationship(Base):
    __tablename__ = "relationships"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    organization: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # hot / warm / cool / cold / cooling / unknown
    temperature: Mapped[str] = mapped_column(String(20), default="unknown")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Free text, e.g. "Brazilian relationship-first, formal introductions"
    cultural_approach: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_interaction_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    interactions: Mapped[list["Interaction"]] = relationship(
        back_populates="relationship", cascade="all, delete-orphan"
    )
    stage_transitions: Mapped[list["StageTransition"]] = relationship(
        back_populates="relationship", cascade="all, delete-orphan"
    )


class Interaction(Base):
    """A logged meeting. Append-only."""
    __tablename__ = "interactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    relationship_id: Mapped[int] = mapped_column(ForeignKey("relationships.id"), index=True)
    meeting_date: Mapped[date] = mapped_column(Date)
    meeting_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    cultural_context: Mapped[str | None] = mapped_column(Text, nullable=True)

    # warmer / cooler / stable; None when the meeting didn't move the needle
    temperature_change: Mapped[str | None] = mapped_column(String(20), nullable=True)
    outcome: Mapped[str | None] = mapped_column(Text, nullable=True)

    relationship: Mapped[Relationship] = relationship(back_populates="interactions")


class StageTransition(Base):
    """A move between pipeline stages. Append-only."""
    __tablename__ = "stage_transitions"

    id: Mapped[int] = mapped_column(primary_key=True)
    relationship_id: Mapped[int] = mapped_column(ForeignKey("relationships.id"), index=True)
    from_stage: Mapped[str | None] = mapped_column(String(50), nullable=True)  # None for the first
    to_stage: Mapped[str] = mapped_column(String(50))
    transition_date: Mapped[date] = mapped_column(Date)
    days_in_previous_stage: Mapped[int | None] = mapped_column(Integer, nullable=True)

    relationship: Mapped[Relationship] = relationship(back_populates="stage_transitions")
