"""Rule-table schemas - stage defaults, geography keywords, communication notes."""

import re

from pydantic import BaseModel


class StageRules(BaseModel):
    """Fallback durations and suggested actions per pipeline stage."""
    default_days: dict[str, int] = {}
    # stage -> {risk level -> action}
    actions: dict[str, dict[str, str]] = {}


class GeographyRule(BaseModel):
    label: str
    keywords: list[str]

    @property
    def pattern(self) -> re.Pattern:
        # Whole-word match so "us" in "business" or "eu" in "neutral" don't count
        alternatives = "|".join(re.escape(k.lower()) for k in self.keywords)
        return re.compile(rf"(?<![a-z0-9])(?:{alternatives})(?![a-z0-9])")

    def matches(self, text: str) -> bool:
        return bool(self.keywords) and self.pattern.search(text) is not None


class CommunicationRule(BaseModel):
    keyword: str
    note: str
