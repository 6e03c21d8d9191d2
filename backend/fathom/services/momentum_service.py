"""Momentum service - temperature trends for one relationship or the whole active book."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from fathom.config import settings
from fathom.core.momentum import analyze_relationship, build_velocity_dashboard
from fathom.db.event_store import EventStore
from fathom.schemas.momentum import TemperatureVelocity, TemperatureVelocityDashboard
from fathom.services.fallback import degrades_to

log = logging.getLogger(__name__)


class MomentumService:
    @staticmethod
    @degrades_to(lambda: None)
    async def get_temperature_velocity(
        db: AsyncSession, relationship_id: int
    ) -> TemperatureVelocity | None:
        """Momentum over the last five changes.

        None if the relationship doesn't exist, and also on store failure; the
        two are told apart in the log.
        """
        rel = await EventStore(db).get_relationship(relationship_id)
        if rel is None:
            log.info("Relationship %s not found", relationship_id)
            return None
        return analyze_relationship(rel, settings.DETAIL_MOMENTUM_WINDOW)

    @staticmethod
    @degrades_to(dict)
    async def get_all_temperature_velocities(
        db: AsyncSession,
    ) -> dict[int, TemperatureVelocity]:
        relationships = await EventStore(db).list_relationships(active_only=True)
        return {
            rel.id: analyze_relationship(rel, settings.DETAIL_MOMENTUM_WINDOW)
            for rel in relationships
        }

    @staticmethod
    @degrades_to(TemperatureVelocityDashboard)
    async def get_temperature_velocity_dashboard(
        db: AsyncSession,
    ) -> TemperatureVelocityDashboard:
        relationships = await EventStore(db).list_relationships(active_only=True)
        return build_velocity_dashboard(relationships, settings.DASHBOARD_MOMENTUM_WINDOW)


momentum_service = MomentumService()
