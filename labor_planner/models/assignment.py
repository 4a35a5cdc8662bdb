"""Production assignment and unassigned demand models."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .capacity_override import utc_now
from .period import PlanningPeriod
from .shift import WorkType


class AssignmentKind(str, Enum):
    """Capacity an assignment was placed into."""
    REGULAR = "regular"
    OVERTIME = "overtime"


class ProductionAssignment(BaseModel):
    """
    A quantity of one model placed on one line.

    Regular and overtime placements share every field; ``kind`` tells them
    apart. Regular placements always carry the shift they were placed in.

    Attributes:
        assignment_id: Unique assignment identifier
        kind: REGULAR or OVERTIME
        model_name: Demand record (model) this placement serves
        period: Planning period
        line_id: Line the units are placed on
        assigned_quantity: Units placed
        planned_hours: Production hours for the units
        changeover_hours: Changeover charged for this placement
        required_workers: Head count the model needs
        allocated_workers: Workers staffed on the line-shift
        default_capacity: The line's default worker capacity
        surplus_workers: allocated_workers - required_workers
        work_type: Shift of a regular placement (None for overtime)
        created_at: Creation timestamp (UTC)
        modified_at: Last update timestamp (UTC)
    """
    model_config = ConfigDict(protected_namespaces=())

    assignment_id: str = Field(..., description="Unique assignment identifier")
    kind: AssignmentKind = Field(default=AssignmentKind.REGULAR, description="Assignment kind")
    model_name: str = Field(..., description="Model name of the demand record")
    period: PlanningPeriod = Field(..., description="Planning period")
    line_id: str = Field(..., description="Line identifier")
    assigned_quantity: int = Field(..., description="Units assigned", gt=0)
    planned_hours: float = Field(..., description="Production hours", ge=0)
    changeover_hours: float = Field(default=0.0, description="Changeover hours", ge=0)
    required_workers: int = Field(..., description="Workers the model requires", ge=0)
    allocated_workers: int = Field(..., description="Workers allocated on the line-shift", ge=0)
    default_capacity: int = Field(..., description="Line default capacity", gt=0)
    surplus_workers: int = Field(..., description="Allocated minus required workers")
    work_type: Optional[WorkType] = Field(None, description="Shift (regular placements)")
    created_at: datetime = Field(default_factory=utc_now, description="Created (UTC)")
    modified_at: Optional[datetime] = Field(None, description="Last modified (UTC)")

    @model_validator(mode='after')
    def validate_kind(self):
        """Regular placements need a shift."""
        if self.kind == AssignmentKind.REGULAR and self.work_type is None:
            raise ValueError(f"Regular assignment {self.assignment_id} requires a work_type")
        return self

    @property
    def total_hours(self) -> float:
        """Planned plus changeover hours."""
        return self.planned_hours + self.changeover_hours

    @property
    def is_overtime(self) -> bool:
        """True for overtime placements."""
        return self.kind == AssignmentKind.OVERTIME

    def __str__(self) -> str:
        """String representation."""
        shift = self.work_type.value if self.work_type else self.kind.value
        return (
            f"{self.model_name} x{self.assigned_quantity} on {self.line_id}/{shift}: "
            f"{self.planned_hours:.2f}h + {self.changeover_hours:.2f}h changeover"
        )


class UnassignedDemand(BaseModel):
    """
    Demand quantity the planner could not place.

    Not persisted; returned to the caller with the allocation result.

    Attributes:
        model_name: Model the quantity belongs to
        unassigned_quantity: Units left over
        required_hours: Labor hours for the leftover units
        required_head_count: Workers the model needs
        reason: Why the quantity was not placed
    """
    model_config = ConfigDict(protected_namespaces=())

    model_name: str = Field(..., description="Model name")
    unassigned_quantity: int = Field(..., description="Units not placed", ge=0)
    required_hours: float = Field(..., description="Hours for the leftover units", ge=0)
    required_head_count: int = Field(..., description="Workers the model needs", ge=0)
    reason: str = Field(..., description="Reason the quantity was not placed")

    def __str__(self) -> str:
        """String representation."""
        return (
            f"{self.model_name}: {self.unassigned_quantity} units "
            f"({self.required_hours:.2f}h) - {self.reason}"
        )


class DemandIssue(BaseModel):
    """
    Demand record rejected before allocation (zero quantity or unresolved model).

    Attributes:
        model_name: Model name on the record
        quantity: Quantity on the record
        reason: Why the record was rejected
        severity: Always "warning"; the rest of the run continues
    """
    model_config = ConfigDict(protected_namespaces=())

    model_name: str = Field(..., description="Model name")
    quantity: int = Field(..., description="Quantity on the rejected record")
    reason: str = Field(..., description="Rejection reason")
    severity: str = Field(default="warning", description="Issue severity")

    def __str__(self) -> str:
        """String representation."""
        return f"[{self.severity}] {self.model_name} ({self.quantity} units): {self.reason}"
