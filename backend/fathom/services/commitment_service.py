"""Commitment service - delivery metrics on both sides and the one write the engine performs."""

import logging
from datetime import date, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from fathom.core.commitments import build_commitment_metrics, split_by_side
from fathom.db.event_store import EventStore
from fathom.schemas.commitment import CommitmentMetrics, RelationshipCommitments
from fathom.services.fallback import degrades_to

log = logging.getLogger(__name__)


class CommitmentService:
    @staticmethod
    @degrades_to(CommitmentMetrics)
    async def get_commitment_metrics(
        db: AsyncSession, today: date | None = None
    ) -> CommitmentMetrics:
        commitments = await EventStore(db).list_commitments()
        return build_commitment_metrics(commitments, today or date.today())

    @staticmethod
    @degrades_to(RelationshipCommitments)
    async def get_commitments_by_relationship(
        db: AsyncSession, relationship_id: int
    ) -> RelationshipCommitments:
        commitments = await EventStore(db).list_commitments(relationship_id=relationship_id)
        return split_by_side(commitments)

    @staticmethod
    @degrades_to(lambda: False)
    async def complete_commitment(db: AsyncSession, commitment_id: int) -> bool:
        """Mark a pending commitment completed. False if it isn't pending or the write fails."""
        done = await EventStore(db).mark_commitment_complete(commitment_id, datetime.now())
        if not done:
            log.info("Commitment %s not completed: unknown id or not pending", commitment_id)
        return done


commitment_service = CommitmentService()
