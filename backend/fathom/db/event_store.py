"""Event store access - read queries over relationship records and their event logs.

Every report goes through an ``EventStore`` bound to the request's session.
Relationship reads can eager-load interactions and stage transitions in the
same request so the engines never trigger per-row lazy loads.
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fathom.core.enums import CommitmentStatus
from fathom.models import (
    Commitment,
    Introduction,
    ProofPoint,
    Relationship,
    StageTransition,
)


class EventStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    # --- Relationships -------------------------------------------------

    async def list_relationships(
        self, active_only: bool = True, with_history: bool = True
    ) -> Sequence[Relationship]:
        stmt = select(Relationship).order_by(Relationship.id)
        if active_only:
            stmt = stmt.where(Relationship.is_active.is_(True))
        if with_history:
            stmt = stmt.options(
                selectinload(Relationship.interactions),
                selectinload(Relationship.stage_transitions),
            )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_relationship(
        self, relationship_id: int, with_history: bool = True
    ) -> Relationship | None:
        """Fetch one relationship (with its event history), or None if unknown."""
        stmt = select(Relationship).where(Relationship.id == relationship_id)
        if with_history:
            stmt = stmt.options(
                selectinload(Relationship.interactions),
                selectinload(Relationship.stage_transitions),
            )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def relationships_by_ids(self, ids: Iterable[int]) -> dict[int, Relationship]:
        """Lookup table id -> relationship for the given ids (unknown ids are skipped)."""
        wanted = {i for i in ids if i is not None}
        if not wanted:
            return {}
        result = await self.db.execute(
            select(Relationship).where(Relationship.id.in_(wanted))
        )
        return {rel.id: rel for rel in result.scalars().all()}

    # --- Stage transitions ---------------------------------------------

    async def list_stage_transitions(self) -> Sequence[StageTransition]:
        """All transitions, newest first, each with its relationship loaded."""
        result = await self.db.execute(
            select(StageTransition)
            .options(selectinload(StageTransition.relationship))
            .order_by(StageTransition.transition_date.desc(), StageTransition.id.desc())
        )
        return result.scalars().all()

    # --- Commitments ---------------------------------------------------

    async def list_commitments(
        self,
        relationship_id: int | None = None,
        due_from: date | None = None,
        due_to: date | None = None,
    ) -> Sequence[Commitment]:
        stmt = select(Commitment).order_by(Commitment.due_date, Commitment.id)
        if relationship_id is not None:
            stmt = stmt.where(Commitment.relationship_id == relationship_id)
        if due_from is not None:
            stmt = stmt.where(Commitment.due_date >= due_from)
        if due_to is not None:
            stmt = stmt.where(Commitment.due_date <= due_to)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def mark_commitment_complete(self, commitment_id: int, now: datetime) -> bool:
        """Transition a pending commitment to completed in a single UPDATE.

        Returns False when no pending commitment has that id.
        """
        result = await self.db.execute(
            update(Commitment)
            .where(
                Commitment.id == commitment_id,
                Commitment.status == CommitmentStatus.PENDING.value,
            )
            .values(
                status=CommitmentStatus.COMPLETED.value,
                completed_at=now,
                updated_at=now,
            )
        )
        await self.db.flush()
        return result.rowcount > 0

    # --- Introductions -------------------------------------------------

    async def list_introductions(
        self, statuses: Iterable[str] | None = None
    ) -> Sequence[Introduction]:
        """Introductions, newest first, optionally restricted to some statuses."""
        stmt = select(Introduction).order_by(
            Introduction.created_at.desc(), Introduction.id.desc()
        )
        if statuses:
            stmt = stmt.where(Introduction.status.in_(list(statuses)))
        result = await self.db.execute(stmt)
        return result.scalars().all()

    # --- Proof points --------------------------------------------------

    async def list_proof_points(self) -> Sequence[ProofPoint]:
        result = await self.db.execute(
            select(ProofPoint)
            .options(selectinload(ProofPoint.usage))
            .order_by(ProofPoint.id)
        )
        return result.scalars().all()
