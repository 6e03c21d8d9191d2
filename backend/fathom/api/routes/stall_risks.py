"""Stall risk endpoints - relationships overstaying their pipeline stage."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fathom.db.database import get_db
from fathom.schemas.stall_risk import StallRisk, StallRiskSummary
from fathom.services.stall_risk_service import stall_risk_service

router = APIRouter()


@router.get("/", response_model=list[StallRisk])
async def list_stall_risks(db: AsyncSession = Depends(get_db)):
    """Stalled relationships, highest risk first."""
    return await stall_risk_service.get_stall_risks(db)


@router.get("/summary", response_model=StallRiskSummary)
async def stall_risk_summary(db: AsyncSession = Depends(get_db)):
    return await stall_risk_service.get_stall_risk_summary(db)
