"""Introduction funnel & attribution - which introductions turn into meetings, deals and value.

Names are resolved through an id -> relationship lookup table passed in by the
caller, built once per report.
"""

from collections.abc import Mapping, Sequence

from fathom.core.constants import (
    ATTRIBUTED_DEAL_OUTCOMES,
    DEAL_OUTCOMES,
    RECENT_INTRODUCTIONS_LIMIT,
    TOP_INTRODUCERS_LIMIT,
    percent,
    round_half_up,
)
from fathom.core.enums import IntroDirection
from fathom.models import Introduction, Relationship
from fathom.schemas.introduction import (
    ConversionRates,
    DirectionCounts,
    IntroducerStats,
    IntroductionFunnel,
    IntroductionNetwork,
    IntroductionRecord,
    NetworkROI,
)

RelationshipLookup = Mapping[int, Relationship]


def is_active_deal(intro: Introduction) -> bool:
    return bool(intro.outcome_relationship_id) or intro.outcome in DEAL_OUTCOMES


def is_attributed_deal(intro: Introduction) -> bool:
    return bool(intro.outcome_relationship_id) or intro.outcome in ATTRIBUTED_DEAL_OUTCOMES


def build_funnel(introductions: Sequence[Introduction]) -> IntroductionFunnel:
    total = len(introductions)
    meetings = sum(1 for i in introductions if i.first_meeting_at)
    deals = sum(1 for i in introductions if is_active_deal(i))
    return IntroductionFunnel(
        total_intros=total,
        meetings_set=meetings,
        active_deals=deals,
        total_value=sum(i.value_generated or 0 for i in introductions),
        conversion_rates=ConversionRates(
            intro_to_meeting=percent(meetings, total),
            meeting_to_deal=percent(deals, meetings),
            overall=percent(deals, total),
        ),
    )


def introduction_record(intro: Introduction, lookup: RelationshipLookup) -> IntroductionRecord:
    introduced = lookup.get(intro.introduced_id) if intro.introduced_id else None
    side = intro.side
    return IntroductionRecord(
        id=intro.id,
        direction=side.value if side else (intro.direction or ""),
        introduced_name=(introduced.name if introduced else None)
        or intro.introduced_name
        or "Unknown",
        introduced_org=(introduced.organization if introduced else None)
        or intro.introduced_organization
        or "",
        status=intro.status or "",
        made_at=intro.made_at,
        first_meeting_at=intro.first_meeting_at,
        outcome=intro.outcome,
        value_generated=intro.value_generated,
    )


def attribute_introducers(
    introductions: Sequence[Introduction], lookup: RelationshipLookup
) -> list[IntroducerStats]:
    """Roll received introductions up per introducer, highest value first."""
    stats: dict[int, IntroducerStats] = {}
    for intro in introductions:
        if intro.side != IntroDirection.RECEIVED or not intro.introducer_id:
            continue

        entry = stats.get(intro.introducer_id)
        if entry is None:
            introducer = lookup.get(intro.introducer_id)
            entry = IntroducerStats(
                id=intro.introducer_id,
                name=(introducer.name if introducer else None) or "Unknown",
                organization=(introducer.organization if introducer else None) or "",
            )
            stats[intro.introducer_id] = entry

        entry.intros_made += 1
        if intro.first_meeting_at:
            entry.meetings_generated += 1
        if is_attributed_deal(intro):
            entry.deals_generated += 1
        entry.total_value_generated += intro.value_generated or 0
        entry.introductions.append(introduction_record(intro, lookup))

    for entry in stats.values():
        entry.conversion_rate = percent(entry.deals_generated, entry.intros_made)

    return sorted(stats.values(), key=lambda s: s.total_value_generated, reverse=True)


def count_directions(introductions: Sequence[Introduction]) -> DirectionCounts:
    return DirectionCounts(
        made=sum(1 for i in introductions if i.side == IntroDirection.MADE),
        received=sum(1 for i in introductions if i.side == IntroDirection.RECEIVED),
    )


def build_network(
    introductions: Sequence[Introduction], lookup: RelationshipLookup
) -> IntroductionNetwork:
    """Full network report. ``introductions`` must already be newest first."""
    funnel = build_funnel(introductions)
    return IntroductionNetwork(
        funnel=funnel,
        top_introducers=attribute_introducers(introductions, lookup)[:TOP_INTRODUCERS_LIMIT],
        by_direction=count_directions(introductions),
        recent_introductions=[
            introduction_record(i, lookup)
            for i in introductions[:RECENT_INTRODUCTIONS_LIMIT]
        ],
        network_value=funnel.total_value,
    )


def network_roi(network: IntroductionNetwork) -> NetworkROI:
    received = network.by_direction.received
    top = network.top_introducers[0] if network.top_introducers else None
    return NetworkROI(
        total_introductions_received=received,
        total_value_generated=network.network_value,
        avg_value_per_intro=int(round_half_up(network.network_value / received)) if received else 0,
        top_introducer_name=top.name if top else None,
        top_introducer_value=top.total_value_generated if top else 0,
    )


def related_ids(introductions: Sequence[Introduction]) -> set[int]:
    """Every relationship id an introduction points at (for building the lookup)."""
    ids = set()
    for intro in introductions:
        if intro.introducer_id:
            ids.add(intro.introducer_id)
        if intro.introduced_id:
            ids.add(intro.introduced_id)
    return ids
