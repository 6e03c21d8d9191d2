"""Introduction endpoints - the referral network and its payoff."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from fathom.db.database import get_db
from fathom.schemas.introduction import (
    IntroducerStats,
    IntroductionNetwork,
    IntroductionRecord,
    NetworkROI,
)
from fathom.services.introduction_service import introduction_service

router = APIRouter()


@router.get("/network", response_model=IntroductionNetwork)
async def introduction_network(db: AsyncSession = Depends(get_db)):
    return await introduction_service.get_introduction_network(db)


@router.get("/pending", response_model=list[IntroductionRecord])
async def pending_introductions(db: AsyncSession = Depends(get_db)):
    return await introduction_service.get_pending_introductions(db)


@router.get("/roi", response_model=NetworkROI)
async def network_roi(db: AsyncSession = Depends(get_db)):
    return await introduction_service.get_network_roi(db)


@router.get("/introducers/{relationship_id}", response_model=IntroducerStats)
async def introducer_stats(relationship_id: int, db: AsyncSession = Depends(get_db)):
    stats = await introduction_service.get_introducer_stats(db, relationship_id)
    if stats is None:
        raise HTTPException(status_code=404, detail="Introducer not found")
    return stats
