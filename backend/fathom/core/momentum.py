"""Temperature momentum analyzer - short-window trend in how meetings moved the temperature."""

from collections.abc import Iterable, Sequence

from fathom.core.constants import (
    MODERATE_MOMENTUM_COUNT,
    MOMENTUM_BUCKET_MIN,
    STRONG_MOMENTUM_COUNT,
)
from fathom.core.enums import Momentum, MomentumStrength, Temperature, TemperatureChange
from fathom.models import Interaction, Relationship
from fathom.schemas.momentum import (
    TemperatureChangeEntry,
    TemperatureVelocity,
    TemperatureVelocityDashboard,
    VelocityDashboardEntry,
    VelocitySummary,
)

_CHANGE_VALUES = frozenset(c.value for c in TemperatureChange)


def recent_changes(
    interactions: Iterable[Interaction], window: int
) -> list[TemperatureChangeEntry]:
    """The ``window`` most recent interactions that carry a temperature change, newest first."""
    with_change = [i for i in interactions if i.temperature_change in _CHANGE_VALUES]
    with_change.sort(key=lambda i: (i.meeting_date, i.id or 0), reverse=True)
    return [
        TemperatureChangeEntry(
            date=i.meeting_date,
            change=TemperatureChange(i.temperature_change),
            context=i.outcome or "",
        )
        for i in with_change[:window]
    ]


def leading_run(changes: Sequence[TemperatureChange]) -> int:
    """Length of the prefix equal to the first change."""
    if not changes:
        return 0
    run = 0
    for change in changes:
        if change != changes[0]:
            break
        run += 1
    return run


def classify_momentum(
    changes: Sequence[TemperatureChange],
) -> tuple[Momentum, MomentumStrength, int, int]:
    """Return (momentum, strength, winning count, consecutive direction).

    A stable result always reports a consecutive direction of 0.
    """
    warmer = sum(1 for c in changes if c == TemperatureChange.WARMER)
    cooler = sum(1 for c in changes if c == TemperatureChange.COOLER)
    consecutive = leading_run(changes)

    if warmer > cooler:
        momentum, winning = Momentum.HEATING, warmer
    elif cooler > warmer:
        momentum, winning = Momentum.COOLING, cooler
    else:
        return Momentum.STABLE, MomentumStrength.WEAK, 0, 0

    if winning >= STRONG_MOMENTUM_COUNT or consecutive >= STRONG_MOMENTUM_COUNT:
        strength = MomentumStrength.STRONG
    elif winning >= MODERATE_MOMENTUM_COUNT:
        strength = MomentumStrength.MODERATE
    else:
        strength = MomentumStrength.WEAK
    return momentum, strength, winning, consecutive


def analyze_relationship(rel: Relationship, window: int) -> TemperatureVelocity:
    entries = recent_changes(rel.interactions or [], window)
    momentum, strength, _, consecutive = classify_momentum([e.change for e in entries])
    return TemperatureVelocity(
        relationship_id=rel.id,
        current_temp=rel.temperature or Temperature.UNKNOWN.value,
        momentum=momentum,
        momentum_strength=strength,
        recent_changes=entries,
        consecutive_direction=consecutive,
    )


def build_velocity_dashboard(
    relationships: Sequence[Relationship], window: int
) -> TemperatureVelocityDashboard:
    """Split relationships into heating/cooling buckets.

    Only a winning count of at least two lands a relationship in a bucket;
    ties and single-event swings count as stable.
    """
    heating: list[VelocityDashboardEntry] = []
    cooling: list[VelocityDashboardEntry] = []
    stable = 0

    for rel in relationships:
        entries = recent_changes(rel.interactions or [], window)
        momentum, strength, winning, _ = classify_momentum([e.change for e in entries])
        if momentum == Momentum.STABLE or winning < MOMENTUM_BUCKET_MIN:
            stable += 1
            continue

        entry = VelocityDashboardEntry(
            relationship_id=rel.id,
            name=rel.name or "Unknown",
            organization=rel.organization or "",
            current_temp=rel.temperature or Temperature.UNKNOWN.value,
            momentum=momentum,
            momentum_strength=strength,
            recent_changes=entries,
        )
        (heating if momentum == Momentum.HEATING else cooling).append(entry)

    return TemperatureVelocityDashboard(
        heating=heating,
        cooling=cooling,
        summary=VelocitySummary(
            total_active=len(relationships),
            heating=len(heating),
            cooling=len(cooling),
            stable=stable,
        ),
    )
