"""Introduction model - a connection brokered by (or for) a relationship."""

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from fathom.core.enums import IntroDirection
from fathom.db.database import Base


class Introduction(Base):
    __tablename__ = "introductions"

    id: Mapped[int] = mapped_column(primary_key=True)
    introducer_id: Mapped[int] = mapped_column(ForeignKey("relationships.id"), index=True)
    introduced_id: Mapped[int | None] = mapped_column(
        ForeignKey("relationships.id"), nullable=True
    )

    # Used when the introduced party isn't tracked as a relationship (yet)
    introduced_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    introduced_organization: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # Set once the introduction turned into a tracked relationship of its own
    outcome_relationship_id: Mapped[int | None] = mapped_column(
        ForeignKey("relationships.id"), nullable=True
    )

    direction: Mapped[str] = mapped_column(String(20))  # "made" or "received"
    status: Mapped[str] = mapped_column(String(30), default="pending")
    made_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    first_meeting_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    outcome: Mapped[str | None] = mapped_column(Text, nullable=True)
    value_generated: Mapped[float | None] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    @property
    def side(self) -> IntroDirection | None:
        return IntroDirection.parse(self.direction)
