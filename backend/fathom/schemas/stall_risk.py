"""Stall-risk report schemas."""

from datetime import date

from pydantic import BaseModel

from fathom.core.enums import RiskLevel


class RelationshipRef(BaseModel):
    id: int
    name: str
    organization: str
    temperature: str


class StallRisk(BaseModel):
    relationship: RelationshipRef
    current_stage: str
    days_in_stage: int
    avg_days_for_stage: int
    days_overdue: int
    risk_level: RiskLevel
    risk_factors: list[str]
    suggested_action: str
    last_interaction: date | None = None


class StageHealth(BaseModel):
    healthy: int = 0
    at_risk: int = 0


class StallRiskSummary(BaseModel):
    total_at_risk: int = 0
    high_risk: int = 0
    medium_risk: int = 0
    low_risk: int = 0
    risks: list[StallRisk] = []
    stage_health: dict[str, StageHealth] = {}
