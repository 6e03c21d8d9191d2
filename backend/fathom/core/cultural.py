"""Cultural pattern inference - bucket relationships by region and summarize how each region works.

Geography comes from an ordered keyword rule table (first match wins) applied
to the relationship's cultural approach plus everything noted about culture
in its meetings. Inference is a pure function of that text, so running it
twice on unchanged data gives the same buckets.
"""

import re
from collections import Counter
from collections.abc import Mapping, Sequence

from fathom.core.constants import (
    COMMON_APPROACHES_LIMIT,
    CULTURAL_NOTES_LIMIT,
    DEFAULT_GEOGRAPHY,
    EXTENDED_COURTSHIP_MEETINGS,
    EXTENDED_COURTSHIP_NOTE,
    INSIGHT_MAX_LENGTH,
    INSIGHT_MIN_LENGTH,
    INSIGHTS_PER_INTERACTION,
    KEY_INSIGHTS_LIMIT,
    PROPOSAL_STAGES,
    round_half_up,
)
from fathom.models import Interaction, Relationship
from fathom.schemas.cultural import CulturalPattern, CulturalPrep, RelationshipCulturalContext
from fathom.schemas.rules import CommunicationRule, GeographyRule

SENTENCE_SPLIT = re.compile(r"[.!?]")


def _chronological(interactions: Sequence[Interaction]) -> list[Interaction]:
    return sorted(interactions, key=lambda i: (i.meeting_date, i.id or 0))


def cultural_text(rel: Relationship) -> str:
    """Lower-cased cultural approach followed by every interaction's cultural context."""
    parts = [rel.cultural_approach or ""]
    parts.extend(
        i.cultural_context for i in _chronological(rel.interactions or []) if i.cultural_context
    )
    return " ".join(parts).lower()


def infer_geography(text: str, rules: Sequence[GeographyRule]) -> str:
    for rule in rules:
        if rule.matches(text):
            return rule.label
    return DEFAULT_GEOGRAPHY


def extract_insights(context: str) -> list[str]:
    """Short sentences worth surfacing from a free-text cultural note."""
    sentences = []
    for piece in SENTENCE_SPLIT.split(context):
        sentence = piece.strip()
        if INSIGHT_MIN_LENGTH < len(sentence) < INSIGHT_MAX_LENGTH:
            sentences.append(sentence)
    return sentences[:INSIGHTS_PER_INTERACTION]


def meetings_before_proposal(rel: Relationship) -> int | None:
    """Meetings held on or before the first move into Qualified/Committed.

    None if the relationship never reached either stage.
    """
    reached = sorted(
        (t for t in rel.stage_transitions or [] if t.to_stage in PROPOSAL_STAGES),
        key=lambda t: (t.transition_date, t.id or 0),
    )
    if not reached:
        return None
    cutoff = reached[0].transition_date
    return sum(1 for i in rel.interactions or [] if i.meeting_date <= cutoff)


def communication_style(
    approaches: Sequence[str], avg_meetings: float, rules: Sequence[CommunicationRule]
) -> list[str]:
    lowered = [a.lower() for a in approaches]
    notes = [
        rule.note
        for rule in rules
        if any(rule.keyword.lower() in a for a in lowered)
    ]
    if avg_meetings > EXTENDED_COURTSHIP_MEETINGS:
        notes.append(EXTENDED_COURTSHIP_NOTE)
    return notes


def build_pattern(
    geography: str, rels: Sequence[Relationship], comm_rules: Sequence[CommunicationRule]
) -> CulturalPattern:
    counts = Counter(r.cultural_approach for r in rels if r.cultural_approach)
    common = [approach for approach, _ in counts.most_common(COMMON_APPROACHES_LIMIT)]

    insights: list[str] = []
    for rel in rels:
        for interaction in _chronological(rel.interactions or []):
            if not interaction.cultural_context:
                continue
            for sentence in extract_insights(interaction.cultural_context):
                if sentence not in insights:
                    insights.append(sentence)

    samples = [m for m in (meetings_before_proposal(r) for r in rels) if m is not None]
    avg_meetings = round_half_up(sum(samples) / len(samples), 1) if samples else 0

    return CulturalPattern(
        geography=geography,
        relationship_count=len(rels),
        common_approaches=common,
        avg_meetings_before_proposal=avg_meetings,
        key_insights=insights[:KEY_INSIGHTS_LIMIT],
        communication_style=communication_style(common, avg_meetings, comm_rules),
    )


def bucket_by_geography(
    relationships: Sequence[Relationship], geo_rules: Sequence[GeographyRule]
) -> dict[str, list[Relationship]]:
    buckets: dict[str, list[Relationship]] = {}
    for rel in relationships:
        geography = infer_geography(cultural_text(rel), geo_rules)
        buckets.setdefault(geography, []).append(rel)
    return buckets


def build_patterns(
    relationships: Sequence[Relationship],
    geo_rules: Sequence[GeographyRule],
    comm_rules: Sequence[CommunicationRule],
) -> dict[str, CulturalPattern]:
    return {
        geography: build_pattern(geography, rels, comm_rules)
        for geography, rels in bucket_by_geography(relationships, geo_rules).items()
    }


def relationship_context(
    rel: Relationship, geo_rules: Sequence[GeographyRule]
) -> RelationshipCulturalContext:
    interactions = rel.interactions or []
    newest_first = sorted(interactions, key=lambda i: (i.meeting_date, i.id or 0), reverse=True)
    notes = [i.cultural_context for i in newest_first if i.cultural_context]
    return RelationshipCulturalContext(
        relationship_id=rel.id,
        name=rel.name,
        organization=rel.organization or "",
        geography=infer_geography(cultural_text(rel), geo_rules),
        cultural_approach=rel.cultural_approach,
        cultural_insights=notes[:CULTURAL_NOTES_LIMIT],
        meeting_count=len(interactions),
    )


def build_prep(
    context: RelationshipCulturalContext | None, patterns: Mapping[str, CulturalPattern]
) -> CulturalPrep:
    """Merge a relationship's own notes with what is known about its region."""
    if context is None:
        return CulturalPrep()
    region = patterns.get(context.geography)
    return CulturalPrep(
        geography=context.geography,
        approach=context.cultural_approach,
        avg_meetings_in_region=region.avg_meetings_before_proposal if region else 0,
        key_considerations=list(region.communication_style) if region else [],
        previous_cultural_notes=context.cultural_insights,
    )


def geography_distribution(patterns: Mapping[str, CulturalPattern]) -> dict[str, int]:
    return {geography: p.relationship_count for geography, p in patterns.items()}
