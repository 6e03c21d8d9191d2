"""Stall risk service - relationships lingering in their pipeline stage."""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from fathom.core.stall_risk import detect_stall_risks, summarize_stall_risks
from fathom.db.event_store import EventStore
from fathom.schemas.stall_risk import StallRisk, StallRiskSummary
from fathom.services.fallback import degrades_to
from fathom.services.rules_service import rules_service


class StallRiskService:
    @staticmethod
    @degrades_to(list)
    async def get_stall_risks(db: AsyncSession, today: date | None = None) -> list[StallRisk]:
        """At-risk relationships, most severe and most overdue first."""
        transitions = await EventStore(db).list_stage_transitions()
        return detect_stall_risks(transitions, rules_service.stage_rules(), today or date.today())

    @staticmethod
    @degrades_to(StallRiskSummary)
    async def get_stall_risk_summary(
        db: AsyncSession, today: date | None = None
    ) -> StallRiskSummary:
        transitions = await EventStore(db).list_stage_transitions()
        return summarize_stall_risks(transitions, rules_service.stage_rules(), today or date.today())


stall_risk_service = StallRiskService()
