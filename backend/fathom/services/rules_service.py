"""Rules service - loads the YAML rule tables that drive the heuristic engines.

The tables live in ``data/rules`` (or ``settings.RULES_DIR``) so the order and
wording of each rule can be reviewed without reading code.
"""

import logging
from pathlib import Path

import yaml

from fathom.config import settings
from fathom.schemas.rules import CommunicationRule, GeographyRule, StageRules

log = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data" / "rules"


class RulesService:
    def __init__(self, rules_dir: Path | None = None):
        self.rules_dir = rules_dir
        self._cache: dict[str, object] = {}

    @property
    def directory(self) -> Path:
        if self.rules_dir is not None:
            return self.rules_dir
        return Path(settings.RULES_DIR) if settings.RULES_DIR else DATA_DIR

    def _load(self, name: str):
        """Load a rule file from YAML, caching the parsed content."""
        if name in self._cache:
            return self._cache[name]

        file_path = self.directory / f"{name}.yaml"
        if not file_path.exists():
            raise FileNotFoundError(f"Rule file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)

        log.debug("Loaded rule table %s from %s", name, file_path)
        self._cache[name] = raw
        return raw

    def stage_rules(self) -> StageRules:
        return StageRules(**(self._load("stages") or {}))

    def geography_rules(self) -> list[GeographyRule]:
        """Ordered geography rules; the first match wins."""
        return [GeographyRule(**rule) for rule in self._load("geography") or []]

    def communication_rules(self) -> list[CommunicationRule]:
        return [CommunicationRule(**rule) for rule in self._load("communication") or []]

    def clear(self) -> None:
        self._cache.clear()


rules_service = RulesService()
