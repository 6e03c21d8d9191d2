"""Proof point endpoints - which evidence lands, and with whom."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fathom.db.database import get_db
from fathom.schemas.proof_point import (
    ProofPointIntelligence,
    ProofPointPerformance,
    RecommendedProofPoint,
)
from fathom.services.proof_point_service import proof_point_service

router = APIRouter()


@router.get("/intelligence", response_model=ProofPointIntelligence)
async def proof_point_intelligence(db: AsyncSession = Depends(get_db)):
    return await proof_point_service.get_proof_point_intelligence(db)


@router.get("/recommended", response_model=list[RecommendedProofPoint])
async def recommended_proof_points(
    persona_type: str | None = None,
    geography: str | None = None,
    service_id: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Proof points ranked for an upcoming meeting's context."""
    return await proof_point_service.get_recommended_proof_points(
        db, persona_type=persona_type, geography=geography, service_id=service_id
    )


@router.get("/by-category", response_model=dict[str, list[ProofPointPerformance]])
async def proof_points_by_category(db: AsyncSession = Depends(get_db)):
    return await proof_point_service.get_proof_points_by_category(db)


@router.get("/personas/{persona}", response_model=list[ProofPointPerformance])
async def proof_points_for_persona(persona: str, db: AsyncSession = Depends(get_db)):
    return await proof_point_service.get_best_proof_points_for_persona(db, persona)
