"""Data models for the labor allocation planner."""

from .period import PlanningPeriod
from .shift import (
    WorkType,
    AllocationMethod,
    Deduction,
    ShiftDefinition,
    FRIDAY_PRAYER_NAME,
    PRAYER_AFFECTED_WORK_TYPES,
    MULTI_SHIFT_PRIORITY,
    NON_SHIFT_WORK_TYPES,
)
from .demand import ModelReference, DemandRecord
from .line import ProductionLine
from .capacity_override import CapacityOverride
from .assignment import (
    AssignmentKind,
    ProductionAssignment,
    UnassignedDemand,
    DemandIssue,
)

__all__ = [
    # Calendar
    "PlanningPeriod",
    # Shifts
    "WorkType",
    "AllocationMethod",
    "Deduction",
    "ShiftDefinition",
    "FRIDAY_PRAYER_NAME",
    "PRAYER_AFFECTED_WORK_TYPES",
    "MULTI_SHIFT_PRIORITY",
    "NON_SHIFT_WORK_TYPES",
    # Demand and lines
    "ModelReference",
    "DemandRecord",
    "ProductionLine",
    # Allocation results
    "CapacityOverride",
    "AssignmentKind",
    "ProductionAssignment",
    "UnassignedDemand",
    "DemandIssue",
]
