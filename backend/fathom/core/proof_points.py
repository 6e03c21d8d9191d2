"""Proof-point resonance ranker - which case studies land, and which to bring to a meeting."""

from collections.abc import Mapping, Sequence

from fathom.core.constants import (
    GEOGRAPHY_BONUS,
    PERSONA_BONUS,
    PERSONA_EFFECTIVENESS_LIMIT,
    RECENT_USAGE_LIMIT,
    RECOMMENDATION_LIMIT,
    SERVICE_BONUS,
    TOP_PERFORMER_MIN_USES,
    TOP_PERFORMERS_LIMIT,
    UNCATEGORIZED,
    percent,
)
from fathom.models import ProofPoint, Relationship
from fathom.schemas.proof_point import (
    PersonaRate,
    ProofPointIntelligence,
    ProofPointPerformance,
    RecommendedProofPoint,
    UsageEntry,
)


def performance(pp: ProofPoint, lookup: Mapping[int, Relationship]) -> ProofPointPerformance:
    usage = list(pp.usage or [])
    resonated = sum(1 for u in usage if u.resonated)

    latest = sorted(usage, key=lambda u: (u.created_at is not None, u.created_at), reverse=True)
    recent = []
    for u in latest[:RECENT_USAGE_LIMIT]:
        rel = lookup.get(u.relationship_id)
        recent.append(
            UsageEntry(
                relationship_name=(rel.name if rel else None) or "Unknown",
                date=u.created_at,
                resonated=bool(u.resonated),
                reaction_notes=u.reaction_notes,
            )
        )

    return ProofPointPerformance(
        id=pp.id,
        name=pp.name,
        category=pp.category or UNCATEGORIZED,
        description=pp.description or "",
        quantified_result=pp.quantified_result,
        source_client=pp.source_client,
        can_name_publicly=bool(pp.can_name_publicly),
        times_used=len(usage),
        times_resonated=resonated,
        resonance_rate=percent(resonated, len(usage)),
        relevant_personas=list(pp.relevant_personas or []),
        relevant_geographies=list(pp.relevant_geographies or []),
        relevant_services=list(pp.relevant_services or []),
        recent_usage=recent,
    )


def top_performers(performances: Sequence[ProofPointPerformance]) -> list[ProofPointPerformance]:
    """Best resonance among proof points used at least three times."""
    proven = [p for p in performances if p.times_used >= TOP_PERFORMER_MIN_USES]
    proven.sort(key=lambda p: p.resonance_rate, reverse=True)
    return proven[:TOP_PERFORMERS_LIMIT]


def group_by_category(
    performances: Sequence[ProofPointPerformance],
) -> dict[str, list[ProofPointPerformance]]:
    groups: dict[str, list[ProofPointPerformance]] = {}
    for p in performances:
        groups.setdefault(p.category, []).append(p)
    return groups


def persona_effectiveness(
    performances: Sequence[ProofPointPerformance],
) -> dict[str, list[PersonaRate]]:
    """Per persona, the three best-resonating proof points tagged for it."""
    by_persona: dict[str, list[PersonaRate]] = {}
    for p in performances:
        for persona in p.relevant_personas:
            by_persona.setdefault(persona, []).append(
                PersonaRate(proof_point=p.name, rate=p.resonance_rate)
            )
    return {
        persona: sorted(rates, key=lambda r: r.rate, reverse=True)[:PERSONA_EFFECTIVENESS_LIMIT]
        for persona, rates in by_persona.items()
    }


def build_intelligence(
    proof_points: Sequence[ProofPoint], lookup: Mapping[int, Relationship]
) -> ProofPointIntelligence:
    performances = [performance(pp, lookup) for pp in proof_points]
    total_used = sum(p.times_used for p in performances)
    total_resonated = sum(p.times_resonated for p in performances)
    return ProofPointIntelligence(
        total_proof_points=len(performances),
        overall_resonance_rate=percent(total_resonated, total_used),
        proof_points=performances,
        top_performers=top_performers(performances),
        by_category=group_by_category(performances),
        persona_effectiveness=persona_effectiveness(performances),
    )


def match_score(
    p: ProofPointPerformance,
    persona_type: str | None = None,
    geography: str | None = None,
    service_id: str | None = None,
) -> int:
    """Resonance rate plus a bonus for each meeting attribute the proof point is tagged for."""
    score = p.resonance_rate
    if persona_type and persona_type in p.relevant_personas:
        score += PERSONA_BONUS
    if geography and geography in p.relevant_geographies:
        score += GEOGRAPHY_BONUS
    if service_id and service_id in p.relevant_services:
        score += SERVICE_BONUS
    return score


def recommend(
    performances: Sequence[ProofPointPerformance],
    persona_type: str | None = None,
    geography: str | None = None,
    service_id: str | None = None,
) -> list[RecommendedProofPoint]:
    """Top five proof points for a meeting context.

    Only proof points matching at least one attribute qualify, so an empty
    context yields no recommendations rather than a popularity list.
    """
    scored = []
    for p in performances:
        score = match_score(p, persona_type, geography, service_id)
        if score > p.resonance_rate:
            scored.append(RecommendedProofPoint(**p.model_dump(), score=score))
    scored.sort(key=lambda r: (r.score, r.resonance_rate), reverse=True)
    return scored[:RECOMMENDATION_LIMIT]


def best_for_persona(
    performances: Sequence[ProofPointPerformance], persona: str
) -> list[ProofPointPerformance]:
    tagged = [p for p in performances if persona in p.relevant_personas]
    tagged.sort(key=lambda p: p.resonance_rate, reverse=True)
    return tagged[:RECOMMENDATION_LIMIT]


def usage_relationship_ids(proof_points: Sequence[ProofPoint]) -> set[int]:
    return {u.relationship_id for pp in proof_points for u in (pp.usage or []) if u.relationship_id}
