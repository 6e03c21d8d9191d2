"""Cultural intelligence schemas."""

from pydantic import BaseModel

from fathom.core.constants import DEFAULT_GEOGRAPHY


class CulturalPattern(BaseModel):
    geography: str
    relationship_count: int = 0
    common_approaches: list[str] = []
    avg_meetings_before_proposal: float = 0
    key_insights: list[str] = []
    communication_style: list[str] = []


class RelationshipCulturalContext(BaseModel):
    relationship_id: int
    name: str
    organization: str
    geography: str
    cultural_approach: str | None = None
    cultural_insights: list[str] = []
    meeting_count: int = 0


class CulturalPrep(BaseModel):
    """Meeting prep notes: the relationship's own context merged with its region's pattern."""
    geography: str = DEFAULT_GEOGRAPHY
    approach: str | None = None
    avg_meetings_in_region: float = 0
    key_considerations: list[str] = []
    previous_cultural_notes: list[str] = []
