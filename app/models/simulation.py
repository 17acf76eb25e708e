from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from typing import List, Optional, Dict
from datetime import date

from app.config import DEFAULT_ITERATIONS
from app.core.dates import parse_date

# --- 1. Simulation Input ---

class SimulationParameters(BaseModel):
    """
    Immutable input bundle for one throughput simulation.
    Inverted ranges are normalised on construction (max raised to min), never rejected.
    """
    model_config = ConfigDict(frozen=True)

    # Scope: how many slices still have to be built, and how much they split
    sliceCountMin: int = Field(..., ge=0)
    sliceCountMax: int = Field(..., ge=0)
    splitFactorMin: float = Field(1.0, ge=0.0)
    splitFactorMax: float = Field(1.0, ge=0.0)

    # Throughput: historical samples win; otherwise draw from [min, max] or use min
    throughputValues: List[float] = Field(default_factory=list, description="Historical slices completed per week.")
    throughputMin: float = Field(..., description="Fallback weekly throughput (lower bound).")
    throughputMax: Optional[float] = Field(None, description="Fallback upper bound; None means use throughputMin as a constant.")

    # Pessimism applied to every simulated week
    uncertaintyFactor: float = Field(0.0, ge=0.0, le=1.0)
    risk: float = Field(0.0, description="Aggregated group risk, usually 0..1 but not capped.")
    ignoreRisk: bool = False

    startDate: date
    deadlineDate: date
    iterations: int = Field(DEFAULT_ITERATIONS, gt=0)

    @field_validator('sliceCountMax')
    @classmethod
    def clamp_slice_count_max(cls, v: int, info: ValidationInfo) -> int:
        low = info.data.get('sliceCountMin')
        return low if low is not None and v < low else v

    @field_validator('splitFactorMax')
    @classmethod
    def clamp_split_factor_max(cls, v: float, info: ValidationInfo) -> float:
        low = info.data.get('splitFactorMin')
        return low if low is not None and v < low else v

    @field_validator('throughputValues', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        return [] if v is None else v

    @field_validator('startDate', 'deadlineDate', mode='before')
    @classmethod
    def strip_time_part(cls, v):
        """Accepts plain dates, datetimes and ISO strings such as '2025-03-01T09:00:00Z'."""
        if isinstance(v, (str, date)):
            return parse_date(v)
        return v

    @property
    def effective_risk(self) -> float:
        return 0.0 if self.ignoreRisk else self.risk


# --- 2. Simulation Output ---

class SimulationResult(BaseModel):
    """Aggregated outcome of all trials. `durations` is sorted ascending."""
    probability: float = Field(..., description="Share of trials finishing on or before the deadline.")
    average: str = Field(..., description="Mean duration in days, two decimals.")
    p90: str = Field(..., description="90th percentile duration in days, two decimals.")
    averageDays: float
    p90Days: float
    expectedDate: date
    p90Date: date
    durations: List[int]
    deadlineDays: int
    completionResults: Dict[int, int] = Field(..., description="Trial count per duration in days.")
    totalSimulations: int


class CompletionRow(BaseModel):
    """One row of the completion distribution table."""
    days: int
    weeks: float
    completionDate: date
    count: int
    percentage: float
    cumulativePercentage: float
    pastDeadline: bool


# --- 3. Backlog Overview ---

class StatusBreakdown(BaseModel):
    """Slice counts by status for the backlog overview."""
    total: int
    done: int
    notDone: int
    completionRate: int = Field(..., description="Done share in whole percent.")
    byStatus: Dict[str, int] = Field(default_factory=dict)
    byDisplayStatus: Dict[str, int] = Field(default_factory=dict, description="Unknown statuses counted under 'Other'.")
