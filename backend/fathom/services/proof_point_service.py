"""Proof point service - resonance tracking and meeting-prep recommendations."""

from sqlalchemy.ext.asyncio import AsyncSession

from fathom.core.proof_points import (
    best_for_persona,
    build_intelligence,
    recommend,
    usage_relationship_ids,
)
from fathom.db.event_store import EventStore
from fathom.schemas.proof_point import (
    ProofPointIntelligence,
    ProofPointPerformance,
    RecommendedProofPoint,
)
from fathom.services.fallback import degrades_to


class ProofPointService:
    @staticmethod
    @degrades_to(ProofPointIntelligence)
    async def get_proof_point_intelligence(db: AsyncSession) -> ProofPointIntelligence:
        store = EventStore(db)
        proof_points = await store.list_proof_points()
        if not proof_points:
            return ProofPointIntelligence()
        lookup = await store.relationships_by_ids(usage_relationship_ids(proof_points))
        return build_intelligence(proof_points, lookup)

    @staticmethod
    async def get_recommended_proof_points(
        db: AsyncSession,
        persona_type: str | None = None,
        geography: str | None = None,
        service_id: str | None = None,
    ) -> list[RecommendedProofPoint]:
        intelligence = await ProofPointService.get_proof_point_intelligence(db)
        return recommend(intelligence.proof_points, persona_type, geography, service_id)

    @staticmethod
    async def get_proof_points_by_category(
        db: AsyncSession,
    ) -> dict[str, list[ProofPointPerformance]]:
        intelligence = await ProofPointService.get_proof_point_intelligence(db)
        return intelligence.by_category

    @staticmethod
    async def get_best_proof_points_for_persona(
        db: AsyncSession, persona: str
    ) -> list[ProofPointPerformance]:
        intelligence = await ProofPointService.get_proof_point_intelligence(db)
        return best_for_persona(intelligence.proof_points, persona)


proof_point_service = ProofPointService()
