"""Introduction network schemas."""

from datetime import datetime

from pydantic import BaseModel


class IntroductionRecord(BaseModel):
    id: int
    direction: str
    introduced_name: str
    introduced_org: str
    status: str
    made_at: datetime | None = None
    first_meeting_at: datetime | None = None
    outcome: str | None = None
    value_generated: float | None = None


class IntroducerStats(BaseModel):
    id: int
    name: str
    organization: str
    intros_made: int = 0  # introductions this person made *to us*
    intros_received: int = 0
    meetings_generated: int = 0
    deals_generated: int = 0
    total_value_generated: float = 0
    conversion_rate: int = 0
    introductions: list[IntroductionRecord] = []


class ConversionRates(BaseModel):
    intro_to_meeting: int = 0
    meeting_to_deal: int = 0
    overall: int = 0


class IntroductionFunnel(BaseModel):
    total_intros: int = 0
    meetings_set: int = 0
    active_deals: int = 0
    total_value: float = 0
    conversion_rates: ConversionRates = ConversionRates()


class DirectionCounts(BaseModel):
    made: int = 0
    received: int = 0


class IntroductionNetwork(BaseModel):
    funnel: IntroductionFunnel = IntroductionFunnel()
    top_introducers: list[IntroducerStats] = []
    by_direction: DirectionCounts = DirectionCounts()
    recent_introductions: list[IntroductionRecord] = []
    network_value: float = 0


class NetworkROI(BaseModel):
    total_introductions_received: int = 0
    total_value_generated: float = 0
    avg_value_per_intro: int = 0
    top_introducer_name: str | None = None
    top_introducer_value: float = 0
