"""Baseline calculator - historical average days spent in each pipeline stage."""

from collections import defaultdict
from collections.abc import Iterable, Mapping

from fathom.core.constants import FALLBACK_STAGE_DAYS, round_half_up
from fathom.models import StageTransition


def compute_stage_baselines(transitions: Iterable[StageTransition]) -> dict[str, int]:
    """Mean ``days_in_previous_stage`` per ``from_stage``, rounded to whole days.

    Transitions without a from-stage or without a recorded duration are not
    samples. Empty history gives an empty mapping.
    """
    durations: dict[str, list[int]] = defaultdict(list)
    for t in transitions:
        if t.from_stage and t.days_in_previous_stage:
            durations[t.from_stage].append(t.days_in_previous_stage)

    return {
        stage: int(round_half_up(sum(days) / len(days)))
        for stage, days in durations.items()
    }


def expected_stage_days(
    stage: str, baselines: Mapping[str, int], defaults: Mapping[str, int]
) -> int:
    """Historical average for a stage, else the documented default, else 21."""
    return baselines.get(stage) or defaults.get(stage) or FALLBACK_STAGE_DAYS
