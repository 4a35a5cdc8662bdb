"""Per-period worker capacity override for a line-shift."""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from .period import PlanningPeriod
from .shift import WorkType


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class CapacityOverride(BaseModel):
    """
    Worker count a line actually needs in one shift of one period.

    At most one override exists per (line, period, work type); the optimizer
    updates an existing record in place instead of creating a second one.

    Attributes:
        line_id: Line the override applies to
        period: Planning period
        work_type: Shift the override applies to
        required_workers: Workers needed (never above default_capacity)
        default_capacity: The line's default worker capacity
        notes: Free-text note describing the saving
        created_at: Creation timestamp (UTC)
        modified_at: Last update timestamp (UTC), None if never updated
    """
    line_id: str = Field(..., description="Line identifier")
    period: PlanningPeriod = Field(..., description="Planning period")
    work_type: WorkType = Field(..., description="Shift")
    required_workers: int = Field(..., description="Workers actually needed", ge=0)
    default_capacity: int = Field(..., description="Line default capacity", gt=0)
    notes: str = Field(default="", description="Free-text note")
    created_at: datetime = Field(default_factory=utc_now, description="Created (UTC)")
    modified_at: Optional[datetime] = Field(None, description="Last modified (UTC)")

    @model_validator(mode='after')
    def validate_required_workers(self):
        """Required workers may not exceed the line's default capacity."""
        if self.required_workers > self.default_capacity:
            raise ValueError(
                f"required_workers ({self.required_workers}) must be <= "
                f"default_capacity ({self.default_capacity}) for line {self.line_id}"
            )
        return self

    @property
    def key(self) -> tuple[str, PlanningPeriod, WorkType]:
        """Upsert key: (line, period, work type)."""
        return (self.line_id, self.period, self.work_type)

    @property
    def workers_saved(self) -> int:
        """Workers freed compared with the line's default capacity."""
        return self.default_capacity - self.required_workers

    def __str__(self) -> str:
        """String representation."""
        return (
            f"{self.period} {self.line_id}/{self.work_type.value}: "
            f"{self.required_workers} of {self.default_capacity} workers"
        )
