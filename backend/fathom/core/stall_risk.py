"""Stall risk detector - flags relationships sitting too long in their current stage.

A relationship is at risk once it has spent more than 1.5x the historical
average for its stage; beyond 2x it is high risk. The ``low`` level exists in
the vocabulary (and in summary counts) but the detection rule never emits it.
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import date

from fathom.core.baseline import compute_stage_baselines, expected_stage_days
from fathom.core.constants import (
    COLD_TEMPERATURES,
    ENGAGEMENT_GAP_DAYS,
    GENERIC_SUGGESTED_ACTION,
    HIGH_RISK_THRESHOLD,
    STALL_THRESHOLD,
)
from fathom.core.enums import RiskLevel, Temperature
from fathom.models import StageTransition
from fathom.schemas.rules import StageRules
from fathom.schemas.stall_risk import RelationshipRef, StageHealth, StallRisk, StallRiskSummary


def latest_transitions(
    transitions: Iterable[StageTransition],
) -> dict[int, StageTransition]:
    """Most recent transition per relationship (ties broken by insertion id)."""
    ordered = sorted(
        transitions,
        key=lambda t: (t.transition_date, t.id or 0),
        reverse=True,
    )
    latest: dict[int, StageTransition] = {}
    for t in ordered:
        latest.setdefault(t.relationship_id, t)
    return latest


def classify_risk(days_in_stage: int, avg_days: int) -> RiskLevel | None:
    """Risk level for a stage duration, or None when within 1.5x of average."""
    if days_in_stage <= avg_days * STALL_THRESHOLD:
        return None
    if days_in_stage > avg_days * HIGH_RISK_THRESHOLD:
        return RiskLevel.HIGH
    return RiskLevel.MEDIUM


def suggested_action(stage: str, level: RiskLevel, rules: StageRules) -> str:
    return rules.actions.get(stage, {}).get(level.value, GENERIC_SUGGESTED_ACTION)


def _risk_factors(
    transition: StageTransition, days_in_stage: int, avg_days: int, today: date
) -> list[str]:
    rel = transition.relationship
    factors = []
    if days_in_stage > avg_days * HIGH_RISK_THRESHOLD:
        factors.append("Significantly exceeded expected stage duration")
    if (rel.temperature or "") in COLD_TEMPERATURES:
        factors.append("Relationship temperature is cold/cooling")
    if rel.last_interaction_date:
        days_since_contact = (today - rel.last_interaction_date).days
        if days_since_contact > ENGAGEMENT_GAP_DAYS:
            factors.append(f"No contact in {days_since_contact} days")
    return factors


def _assess(
    transition: StageTransition,
    baselines: Mapping[str, int],
    rules: StageRules,
    today: date,
) -> StallRisk | None:
    rel = transition.relationship
    stage = transition.to_stage
    days_in_stage = (today - transition.transition_date).days
    avg_days = expected_stage_days(stage, baselines, rules.default_days)

    level = classify_risk(days_in_stage, avg_days)
    if level is None:
        return None

    return StallRisk(
        relationship=RelationshipRef(
            id=rel.id,
            name=rel.name or "Unknown",
            organization=rel.organization or "",
            temperature=rel.temperature or Temperature.UNKNOWN.value,
        ),
        current_stage=stage,
        days_in_stage=days_in_stage,
        avg_days_for_stage=avg_days,
        days_overdue=days_in_stage - avg_days,
        risk_level=level,
        risk_factors=_risk_factors(transition, days_in_stage, avg_days, today),
        suggested_action=suggested_action(stage, level, rules),
        last_interaction=rel.last_interaction_date,
    )


def sort_risks(risks: Iterable[StallRisk]) -> list[StallRisk]:
    """Most severe first, then most overdue first."""
    return sorted(risks, key=lambda r: (r.risk_level.rank, -r.days_overdue))


def detect_stall_risks(
    transitions: Sequence[StageTransition], rules: StageRules, today: date
) -> list[StallRisk]:
    """At-risk relationships from the full transition history."""
    baselines = compute_stage_baselines(transitions)
    risks = []
    for transition in latest_transitions(transitions).values():
        if transition.relationship is None:
            continue
        risk = _assess(transition, baselines, rules, today)
        if risk is not None:
            risks.append(risk)
    return sort_risks(risks)


def summarize_stall_risks(
    transitions: Sequence[StageTransition], rules: StageRules, today: date
) -> StallRiskSummary:
    """Risk counts per level plus a per-stage healthy/at-risk breakdown."""
    risks = detect_stall_risks(transitions, rules, today)
    at_risk_ids = {r.relationship.id for r in risks}

    stage_health: dict[str, StageHealth] = {}
    for rel_id, transition in latest_transitions(transitions).items():
        if transition.relationship is None:
            continue
        health = stage_health.setdefault(transition.to_stage, StageHealth())
        if rel_id in at_risk_ids:
            health.at_risk += 1
        else:
            health.healthy += 1

    return StallRiskSummary(
        total_at_risk=len(risks),
        high_risk=sum(1 for r in risks if r.risk_level == RiskLevel.HIGH),
        medium_risk=sum(1 for r in risks if r.risk_level == RiskLevel.MEDIUM),
        low_risk=sum(1 for r in risks if r.risk_level == RiskLevel.LOW),
        risks=risks,
        stage_health=stage_health,
    )
