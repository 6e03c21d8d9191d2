"""Commitment and trust-score schemas."""

from datetime import date, datetime

from pydantic import BaseModel

from fathom.core.constants import DEFAULT_COMPLETION_RATE, DEFAULT_RECIPROCITY_BALANCE
from fathom.core.enums import ReciprocityStatus


class CommitmentOut(BaseModel):
    id: int
    relationship_id: int | None
    owner: str | None
    owner_name: str | None
    description: str
    commitment_type: str | None
    due_date: date | None
    status: str
    created_at: datetime | None
    completed_at: datetime | None
    days_overdue: int | None = None

    model_config = {"from_attributes": True}


class SideMetrics(BaseModel):
    """Delivery metrics for one side (us or them)."""
    pending: int = 0
    overdue: int = 0
    completion_rate_30d: int = DEFAULT_COMPLETION_RATE
    avg_days_to_complete: int = 0
    overdue_items: list[CommitmentOut] = []


class TrustScore(BaseModel):
    we_deliver: int = DEFAULT_COMPLETION_RATE
    they_deliver: int = DEFAULT_COMPLETION_RATE
    reciprocity_balance: float = DEFAULT_RECIPROCITY_BALANCE  # ours / theirs
    reciprocity_status: ReciprocityStatus = ReciprocityStatus.BALANCED


class CommitmentMetrics(BaseModel):
    us: SideMetrics = SideMetrics()
    them: SideMetrics = SideMetrics()
    trust_score: TrustScore = TrustScore()


class RelationshipCommitments(BaseModel):
    us: list[CommitmentOut] = []
    them: list[CommitmentOut] = []


class CompleteCommitmentResponse(BaseModel):
    success: bool
