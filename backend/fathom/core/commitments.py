"""Commitment trust scorer - who keeps their promises, and how balanced the load is."""

from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from fathom.core.constants import (
    COMPLETION_WINDOW_DAYS,
    DEFAULT_COMPLETION_RATE,
    DEFAULT_RECIPROCITY_BALANCE,
    RECIPROCITY_LOWER,
    RECIPROCITY_UPPER,
    percent,
    round_half_up,
)
from fathom.core.enums import CommitmentOwner, CommitmentStatus, ReciprocityStatus
from fathom.models import Commitment
from fathom.schemas.commitment import (
    CommitmentMetrics,
    CommitmentOut,
    RelationshipCommitments,
    SideMetrics,
    TrustScore,
)


def partition_by_owner(
    commitments: Iterable[Commitment],
) -> tuple[list[Commitment], list[Commitment]]:
    """Split into (ours, theirs); commitments with an unrecognised owner are dropped."""
    ours, theirs = [], []
    for c in commitments:
        if c.side == CommitmentOwner.US:
            ours.append(c)
        elif c.side == CommitmentOwner.THEM:
            theirs.append(c)
    return ours, theirs


def is_overdue(c: Commitment, today: date) -> bool:
    return (
        c.status == CommitmentStatus.PENDING
        and c.due_date is not None
        and c.due_date < today
    )


def completion_rate(items: Iterable[Commitment], today: date) -> int:
    """Share of items due in the trailing 30 days that got done (100 if nothing was due)."""
    window_start = today - timedelta(days=COMPLETION_WINDOW_DAYS)
    due = [c for c in items if c.due_date is not None and window_start <= c.due_date <= today]
    if not due:
        return DEFAULT_COMPLETION_RATE
    done = sum(1 for c in due if c.status == CommitmentStatus.COMPLETED)
    return percent(done, len(due))


def avg_days_to_complete(items: Iterable[Commitment]) -> int:
    durations = [
        (c.completed_at - c.created_at).total_seconds() / 86400
        for c in items
        if c.status == CommitmentStatus.COMPLETED and c.completed_at and c.created_at
    ]
    if not durations:
        return 0
    return int(round_half_up(sum(durations) / len(durations)))


def _overdue_out(c: Commitment, today: date) -> CommitmentOut:
    out = CommitmentOut.model_validate(c)
    out.days_overdue = (today - c.due_date).days
    return out


def side_metrics(items: Sequence[Commitment], today: date) -> SideMetrics:
    pending = [c for c in items if c.status == CommitmentStatus.PENDING]
    overdue = [_overdue_out(c, today) for c in pending if is_overdue(c, today)]
    overdue.sort(key=lambda o: o.days_overdue, reverse=True)
    return SideMetrics(
        pending=len(pending),
        overdue=len(overdue),
        completion_rate_30d=completion_rate(items, today),
        avg_days_to_complete=avg_days_to_complete(items),
        overdue_items=overdue,
    )


def reciprocity_balance(ours: int, theirs: int) -> float:
    """Ours / theirs to two decimals; balanced (1.0) when they have made no commitments."""
    if theirs == 0:
        return DEFAULT_RECIPROCITY_BALANCE
    return round_half_up(ours / theirs, 2)


def reciprocity_status(balance: float) -> ReciprocityStatus:
    if balance > RECIPROCITY_UPPER:
        return ReciprocityStatus.WE_OVER_COMMITTED
    if balance < RECIPROCITY_LOWER:
        return ReciprocityStatus.THEY_OVER_COMMITTED
    return ReciprocityStatus.BALANCED


def build_commitment_metrics(
    commitments: Sequence[Commitment], today: date
) -> CommitmentMetrics:
    ours, theirs = partition_by_owner(commitments)
    us = side_metrics(ours, today)
    them = side_metrics(theirs, today)
    balance = reciprocity_balance(len(ours), len(theirs))
    return CommitmentMetrics(
        us=us,
        them=them,
        trust_score=TrustScore(
            we_deliver=us.completion_rate_30d,
            they_deliver=them.completion_rate_30d,
            reciprocity_balance=balance,
            reciprocity_status=reciprocity_status(balance),
        ),
    )


def split_by_side(commitments: Iterable[Commitment]) -> RelationshipCommitments:
    ours, theirs = partition_by_owner(commitments)
    return RelationshipCommitments(
        us=[CommitmentOut.model_validate(c) for c in ours],
        them=[CommitmentOut.model_validate(c) for c in theirs],
    )
