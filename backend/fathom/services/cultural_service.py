"""Cultural intelligence service - regional patterns and per-relationship meeting prep."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from fathom.core.cultural import (
    build_patterns,
    build_prep,
    geography_distribution,
    relationship_context,
)
from fathom.db.event_store import EventStore
from fathom.schemas.cultural import CulturalPattern, CulturalPrep, RelationshipCulturalContext
from fathom.services.fallback import degrades_to
from fathom.services.rules_service import rules_service

log = logging.getLogger(__name__)


class CulturalService:
    @staticmethod
    @degrades_to(dict)
    async def get_cultural_patterns(db: AsyncSession) -> dict[str, CulturalPattern]:
        """Geography -> pattern, over active relationships."""
        relationships = await EventStore(db).list_relationships(active_only=True)
        return build_patterns(
            relationships,
            rules_service.geography_rules(),
            rules_service.communication_rules(),
        )

    @staticmethod
    @degrades_to(lambda: None)
    async def get_relationship_cultural_context(
        db: AsyncSession, relationship_id: int
    ) -> RelationshipCulturalContext | None:
        """None for an unknown id, and also on store failure (logged as a store error)."""
        rel = await EventStore(db).get_relationship(relationship_id)
        if rel is None:
            log.info("Relationship %s not found", relationship_id)
            return None
        return relationship_context(rel, rules_service.geography_rules())

    @staticmethod
    async def get_cultural_prep_for_meeting(
        db: AsyncSession, relationship_id: int
    ) -> CulturalPrep:
        """Prep notes for a meeting; a blank Global prep when the relationship is unknown."""
        context = await CulturalService.get_relationship_cultural_context(db, relationship_id)
        if context is None:
            return CulturalPrep()
        patterns = await CulturalService.get_cultural_patterns(db)
        return build_prep(context, patterns)

    @staticmethod
    async def get_geography_distribution(db: AsyncSession) -> dict[str, int]:
        patterns = await CulturalService.get_cultural_patterns(db)
        return geography_distribution(patterns)


cultural_service = CulturalService()
