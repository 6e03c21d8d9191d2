"""Temperature momentum schemas."""

from datetime import date

from pydantic import BaseModel

from fathom.core.enums import Momentum, MomentumStrength, TemperatureChange


class TemperatureChangeEntry(BaseModel):
    date: date
    change: TemperatureChange
    context: str = ""  # outcome of the meeting that moved the temperature


class TemperatureVelocity(BaseModel):
    relationship_id: int
    current_temp: str
    momentum: Momentum = Momentum.STABLE
    momentum_strength: MomentumStrength = MomentumStrength.WEAK
    recent_changes: list[TemperatureChangeEntry] = []
    consecutive_direction: int = 0  # leading run of identical changes


class VelocityDashboardEntry(BaseModel):
    relationship_id: int
    name: str
    organization: str
    current_temp: str
    momentum: Momentum
    momentum_strength: MomentumStrength
    recent_changes: list[TemperatureChangeEntry]


class VelocitySummary(BaseModel):
    total_active: int = 0
    heating: int = 0
    cooling: int = 0
    stable: int = 0


class TemperatureVelocityDashboard(BaseModel):
    heating: list[VelocityDashboardEntry] = []
    cooling: list[VelocityDashboardEntry] = []
    summary: VelocitySummary = VelocitySummary()
