"""Thresholds and fallback values used across the analytics engines.

Several engines share the convention that the absence of data is not a
failure: nothing due means 100% completion, no counterpart commitments means a
balanced ratio. Those defaults are defined here and nowhere else.
"""

import math

# Absence is not failure
DEFAULT_COMPLETION_RATE = 100
DEFAULT_RECIPROCITY_BALANCE = 1.0
FALLBACK_STAGE_DAYS = 21

# Stall risk
STALL_THRESHOLD = 1.5  # days_in_stage > avg * 1.5 => at risk
HIGH_RISK_THRESHOLD = 2.0  # days_in_stage > avg * 2 => high
ENGAGEMENT_GAP_DAYS = 14
GENERIC_SUGGESTED_ACTION = "Schedule follow-up conversation"
COLD_TEMPERATURES = frozenset({"cold", "cooling"})

# Momentum
MOMENTUM_BUCKET_MIN = 2  # winning count needed to land in heating/cooling
STRONG_MOMENTUM_COUNT = 3
MODERATE_MOMENTUM_COUNT = 2

# Commitments
COMPLETION_WINDOW_DAYS = 30
RECIPROCITY_UPPER = 1.5
RECIPROCITY_LOWER = round(1 / RECIPROCITY_UPPER, 3)  # 0.667

# Introductions
DEAL_OUTCOMES = frozenset({"active_deal", "converted"})
ATTRIBUTED_DEAL_OUTCOMES = frozenset({"converted"})
PENDING_INTRO_STATUSES = ("discussed", "requested", "pending")
TOP_INTRODUCERS_LIMIT = 10
RECENT_INTRODUCTIONS_LIMIT = 10

# Proof points
TOP_PERFORMER_MIN_USES = 3
TOP_PERFORMERS_LIMIT = 5
RECOMMENDATION_LIMIT = 5
RECENT_USAGE_LIMIT = 5
PERSONA_EFFECTIVENESS_LIMIT = 3
PERSONA_BONUS = 20
GEOGRAPHY_BONUS = 15
SERVICE_BONUS = 15
UNCATEGORIZED = "Uncategorized"

# Cultural patterns
DEFAULT_GEOGRAPHY = "Global"
PROPOSAL_STAGES = frozenset({"Qualified", "Committed"})
COMMON_APPROACHES_LIMIT = 3
KEY_INSIGHTS_LIMIT = 5
INSIGHTS_PER_INTERACTION = 2
CULTURAL_NOTES_LIMIT = 5
INSIGHT_MIN_LENGTH = 10  # exclusive
INSIGHT_MAX_LENGTH = 100  # exclusive
EXTENDED_COURTSHIP_MEETINGS = 4
EXTENDED_COURTSHIP_NOTE = "Extended relationship building"


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for non-negative values (2.5 -> 3)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def percent(part: int, whole: int) -> int:
    """Integer percentage clamped to [0, 100]; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return min(100, int(round_half_up(part / whole * 100)))
