"""Momentum endpoints - which way relationship temperature is trending."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from fathom.db.database import get_db
from fathom.schemas.momentum import TemperatureVelocity, TemperatureVelocityDashboard
from fathom.services.momentum_service import momentum_service

router = APIRouter()


@router.get("/", response_model=dict[int, TemperatureVelocity])
async def all_velocities(db: AsyncSession = Depends(get_db)):
    """Velocity for every active relationship, keyed by relationship id."""
    return await momentum_service.get_all_temperature_velocities(db)


@router.get("/dashboard", response_model=TemperatureVelocityDashboard)
async def velocity_dashboard(db: AsyncSession = Depends(get_db)):
    return await momentum_service.get_temperature_velocity_dashboard(db)


@router.get("/relationships/{relationship_id}", response_model=TemperatureVelocity)
async def relationship_velocity(relationship_id: int, db: AsyncSession = Depends(get_db)):
    velocity = await momentum_service.get_temperature_velocity(db, relationship_id)
    if velocity is None:
        raise HTTPException(status_code=404, detail="Relationship not found")
    return velocity
