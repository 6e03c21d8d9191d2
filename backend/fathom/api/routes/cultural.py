"""Cultural intelligence endpoints - regional patterns and meeting prep."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from fathom.db.database import get_db
from fathom.schemas.cultural import CulturalPattern, CulturalPrep, RelationshipCulturalContext
from fathom.services.cultural_service import cultural_service

router = APIRouter()


@router.get("/patterns", response_model=dict[str, CulturalPattern])
async def cultural_patterns(db: AsyncSession = Depends(get_db)):
    """Patterns per inferred geography."""
    return await cultural_service.get_cultural_patterns(db)


@router.get("/distribution", response_model=dict[str, int])
async def geography_distribution(db: AsyncSession = Depends(get_db)):
    return await cultural_service.get_geography_distribution(db)


@router.get("/relationships/{relationship_id}", response_model=RelationshipCulturalContext)
async def relationship_cultural_context(relationship_id: int, db: AsyncSession = Depends(get_db)):
    context = await cultural_service.get_relationship_cultural_context(db, relationship_id)
    if context is None:
        raise HTTPException(status_code=404, detail="Relationship not found")
    return context


@router.get("/relationships/{relationship_id}/prep", response_model=CulturalPrep)
async def cultural_prep(relationship_id: int, db: AsyncSession = Depends(get_db)):
    return await cultural_service.get_cultural_prep_for_meeting(db, relationship_id)
