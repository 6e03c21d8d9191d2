"""Commitment endpoints - delivery metrics and completion."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fathom.db.database import get_db
from fathom.schemas.commitment import (
    CommitmentMetrics,
    CompleteCommitmentResponse,
    RelationshipCommitments,
)
from fathom.services.commitment_service import commitment_service

router = APIRouter()


@router.get("/metrics", response_model=CommitmentMetrics)
async def commitment_metrics(db: AsyncSession = Depends(get_db)):
    """Completion rates on both sides plus the trust score."""
    return await commitment_service.get_commitment_metrics(db)


@router.get("/relationships/{relationship_id}", response_model=RelationshipCommitments)
async def relationship_commitments(relationship_id: int, db: AsyncSession = Depends(get_db)):
    return await commitment_service.get_commitments_by_relationship(db, relationship_id)


@router.post("/{commitment_id}/complete", response_model=CompleteCommitmentResponse)
async def complete_commitment(commitment_id: int, db: AsyncSession = Depends(get_db)):
    """Mark a pending commitment completed. success is false when nothing changed."""
    success = await commitment_service.complete_commitment(db, commitment_id)
    return CompleteCommitmentResponse(success=success)
