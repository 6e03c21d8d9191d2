"""Database models package."""

from fathom.models.relationship import Relationship, Interaction, StageTransition
from fathom.models.commitment import Commitment
from fathom.models.introduction import Introduction
from fathom.models.proof_point import ProofPoint, ProofPointUsage

__all__ = [
    "Relationship",
    "Interaction",
    "StageTransition",
    "Commitment",
    "Introduction",
    "ProofPoint",
    "ProofPointUsage",
]
