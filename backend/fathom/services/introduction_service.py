"""Introduction service - funnel, attribution and ROI of the introduction network."""

from sqlalchemy.ext.asyncio import AsyncSession

from fathom.core.constants import PENDING_INTRO_STATUSES
from fathom.core.introductions import (
    build_network,
    introduction_record,
    network_roi,
    related_ids,
)
from fathom.db.event_store import EventStore
from fathom.schemas.introduction import (
    IntroducerStats,
    IntroductionNetwork,
    IntroductionRecord,
    NetworkROI,
)
from fathom.services.fallback import degrades_to


class IntroductionService:
    @staticmethod
    @degrades_to(IntroductionNetwork)
    async def get_introduction_network(db: AsyncSession) -> IntroductionNetwork:
        store = EventStore(db)
        introductions = await store.list_introductions()
        if not introductions:
            return IntroductionNetwork()
        lookup = await store.relationships_by_ids(related_ids(introductions))
        return build_network(introductions, lookup)

    @staticmethod
    async def get_introducer_stats(
        db: AsyncSession, relationship_id: int
    ) -> IntroducerStats | None:
        """Attribution for one introducer, if they rank among the top introducers."""
        network = await IntroductionService.get_introduction_network(db)
        return next((s for s in network.top_introducers if s.id == relationship_id), None)

    @staticmethod
    @degrades_to(list)
    async def get_pending_introductions(db: AsyncSession) -> list[IntroductionRecord]:
        """Introductions still waiting on follow-up, newest first."""
        store = EventStore(db)
        introductions = await store.list_introductions(statuses=PENDING_INTRO_STATUSES)
        lookup = await store.relationships_by_ids(
            i.introduced_id for i in introductions if i.introduced_id
        )
        return [introduction_record(i, lookup) for i in introductions]

    @staticmethod
    async def get_network_roi(db: AsyncSession) -> NetworkROI:
        network = await IntroductionService.get_introduction_network(db)
        return network_roi(network)


introduction_service = IntroductionService()
