"""Proof point intelligence schemas."""

from datetime import datetime

from pydantic import BaseModel


class UsageEntry(BaseModel):
    relationship_name: str
    date: datetime | None
    resonated: bool
    reaction_notes: str | None = None


class ProofPointPerformance(BaseModel):
    id: int
    name: str
    category: str
    description: str
    quantified_result: str | None = None
    source_client: str | None = None
    can_name_publicly: bool = False
    times_used: int = 0
    times_resonated: int = 0
    resonance_rate: int = 0
    relevant_personas: list[str] = []
    relevant_geographies: list[str] = []
    relevant_services: list[str] = []
    recent_usage: list[UsageEntry] = []


class RecommendedProofPoint(ProofPointPerformance):
    score: int  # resonance rate plus context bonuses


class PersonaRate(BaseModel):
    proof_point: str
    rate: int


class ProofPointIntelligence(BaseModel):
    total_proof_points: int = 0
    overall_resonance_rate: int = 0
    proof_points: list[ProofPointPerformance] = []
    top_performers: list[ProofPointPerformance] = []
    by_category: dict[str, list[ProofPointPerformance]] = {}
    persona_effectiveness: dict[str, list[PersonaRate]] = {}
