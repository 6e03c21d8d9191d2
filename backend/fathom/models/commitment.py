"""Commitment model - promises made by us or by them."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from fathom.core.enums import CommitmentOwner
from fathom.db.database import Base


class Commitment(Base):
    __tablename__ = "commitments"

    id: Mapped[int] = mapped_column(primary_key=True)
    relationship_id: Mapped[int | None] = mapped_column(
        ForeignKey("relationships.id"), nullable=True, index=True
    )

    # Raw label as captured ("us", "ours", "360", "partner", ...); see ``side``
    owner: Mapped[str | None] = mapped_column(String(50), nullable=True)
    owner_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    description: Mapped[str] = mapped_column(Text)
    commitment_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="pending")

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    @property
    def side(self) -> CommitmentOwner | None:
        """Normalized owner; None when the label names neither side."""
        return CommitmentOwner.parse(self.owner)
