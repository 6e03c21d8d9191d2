"""Closed vocabularies shared by the models, engines and schemas.

Free-text values captured upstream (commitment owners, introduction
directions) are mapped onto these enums with ``parse`` at the model boundary,
so the engines only ever compare enum members.
"""

from enum import StrEnum


class Temperature(StrEnum):
    HOT = "hot"
    WARM = "warm"
    COOL = "cool"
    COLD = "cold"
    COOLING = "cooling"
    UNKNOWN = "unknown"


class TemperatureChange(StrEnum):
    WARMER = "warmer"
    COOLER = "cooler"
    STABLE = "stable"


class Momentum(StrEnum):
    HEATING = "heating"
    COOLING = "cooling"
    STABLE = "stable"


class MomentumStrength(StrEnum):
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


class RiskLevel(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort key: most severe first."""
        return _RISK_RANK[self]


_RISK_RANK = {RiskLevel.HIGH: 0, RiskLevel.MEDIUM: 1, RiskLevel.LOW: 2}


class CommitmentStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"


class CommitmentOwner(StrEnum):
    US = "us"
    THEM = "them"

    @classmethod
    def parse(cls, raw: str | None) -> "CommitmentOwner | None":
        """Map a captured owner label onto a side, or None if it names neither."""
        if not raw:
            return None
        return _OWNER_ALIASES.get(raw.strip().lower())


_OWNER_ALIASES = {
    "us": CommitmentOwner.US,
    "ours": CommitmentOwner.US,
    "we": CommitmentOwner.US,
    "360": CommitmentOwner.US,
    "them": CommitmentOwner.THEM,
    "theirs": CommitmentOwner.THEM,
    "partner": CommitmentOwner.THEM,
    "client": CommitmentOwner.THEM,
}


class IntroDirection(StrEnum):
    MADE = "made"
    RECEIVED = "received"

    @classmethod
    def parse(cls, raw: str | None) -> "IntroDirection | None":
        if not raw:
            return None
        return _DIRECTION_ALIASES.get(raw.strip().lower())


_DIRECTION_ALIASES = {
    "made": IntroDirection.MADE,
    "given": IntroDirection.MADE,
    "outgoing": IntroDirection.MADE,
    "received": IntroDirection.RECEIVED,
    "incoming": IntroDirection.RECEIVED,
}


class ReciprocityStatus(StrEnum):
    WE_OVER_COMMITTED = "we_over_committed"
    THEY_OVER_COMMITTED = "they_over_committed"
    BALANCED = "balanced"
