"""Production line data model."""

from pydantic import BaseModel, Field


class ProductionLine(BaseModel):
    """
    A production line with a default worker capacity.

    Attributes:
        line_id: Unique line identifier
        name: Line name (e.g., "LINE_GP_1")
        default_capacity: Workers normally staffed on the line
        is_active: Inactive lines are excluded from allocation
    """
    line_id: str = Field(..., description="Unique line identifier", min_length=1)
    name: str = Field(..., description="Line name")
    default_capacity: int = Field(..., description="Default worker capacity", gt=0)
    is_active: bool = Field(default=True, description="Whether the line can be allocated")

    def __str__(self) -> str:
        """String representation."""
        status = "active" if self.is_active else "inactive"
        return f"{self.name} ({self.line_id}) - {self.default_capacity} workers, {status}"
