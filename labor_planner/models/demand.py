"""Model reference data and monthly production demand."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .period import PlanningPeriod


class ModelReference(BaseModel):
    """
    Reference data for a producible model.

    Reference data is replaced wholesale by the ingestion side; the planner
    only reads it.

    Attributes:
        model_name: Unique model name
        sut_seconds: Standard unit time, seconds of work per unit
        head_count: Workers a line needs to produce this model
    """
    model_config = ConfigDict(protected_namespaces=())

    model_name: str = Field(..., description="Model name", min_length=1)
    sut_seconds: float = Field(..., description="Standard unit time (seconds/unit)", gt=0)
    head_count: int = Field(..., description="Required workers", gt=0)

    @property
    def hours_per_unit(self) -> float:
        """Labor hours needed for one unit."""
        return self.sut_seconds / 3600.0

    def __str__(self) -> str:
        """String representation."""
        return f"{self.model_name} (SUT {self.sut_seconds:g}s, HC {self.head_count})"


class DemandRecord(BaseModel):
    """
    Ordered quantity of one model for one planning period.

    A record without a resolved model reference, or with zero quantity, can
    still be constructed; the allocation engine reports it as invalid demand
    instead of allocating it.

    Attributes:
        model_name: Model being ordered
        quantity: Units ordered for the period
        period: Planning period the demand belongs to
        model_reference: Resolved reference data (None if unresolved)
    """
    model_config = ConfigDict(protected_namespaces=())

    model_name: str = Field(..., description="Model name", min_length=1)
    quantity: int = Field(..., description="Ordered units", ge=0)
    period: PlanningPeriod = Field(..., description="Planning period")
    model_reference: Optional[ModelReference] = Field(
        None,
        description="Resolved model reference data"
    )

    @property
    def total_work_hours(self) -> float:
        """Total labor hours for the ordered quantity (SUT / 3600 x quantity)."""
        if self.model_reference is None:
            return 0.0
        return (self.model_reference.sut_seconds / 3600.0) * self.quantity

    @property
    def required_head_count(self) -> int:
        """Workers needed per line to produce this model (0 if unresolved)."""
        if self.model_reference is None:
            return 0
        return self.model_reference.head_count

    def __str__(self) -> str:
        """String representation."""
        return f"{self.period}: {self.quantity} units of {self.model_name} ({self.total_work_hours:.2f}h)"
