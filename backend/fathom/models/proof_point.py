"""Proof point models - case studies and a log of how they landed in meetings."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fathom.db.database import Base


class ProofPoint(Base):
    __tablename__ = "proof_points"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str] = mapped_column(Text, default="")
    quantified_result: Mapped[str | None] = mapped_column(Text, nullable=True)  # e.g. "40% faster onboarding"
    source_client: Mapped[str | None] = mapped_column(String(200), nullable=True)
    can_name_publicly: Mapped[bool] = mapped_column(Boolean, default=False)

    # Targeting tags, e.g. ["CFO", "Program Director"]
    relevant_personas: Mapped[list] = mapped_column(JSON, default=list)
    relevant_geographies: Mapped[list] = mapped_column(JSON, default=list)
    relevant_services: Mapped[list] = mapped_column(JSON, default=list)

    usage: Mapped[list["ProofPointUsage"]] = relationship(
        back_populates="proof_point", cascade="all, delete-orphan"
    )


class ProofPointUsage(Base):
    """One time a proof point was used with a relationship. Append-only."""
    __tablename__ = "proof_point_usage"

    id: Mapped[int] = mapped_column(primary_key=True)
    proof_point_id: Mapped[int] = mapped_column(ForeignKey("proof_points.id"), index=True)
    relationship_id: Mapped[int] = mapped_column(ForeignKey("relationships.id"))
    resonated: Mapped[bool] = mapped_column(Boolean, default=False)
    reaction_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    proof_point: Mapped[ProofPoint] = relationship(back_populates="usage")
