"""Reports on allocation results."""

from .plan_report import (
    ShiftUtilizationInfo,
    ShiftUtilizationSummary,
    AssignedModelInfo,
    LineUtilization,
    OptimizedLineInfo,
    WorkerOptimizationSummary,
    line_utilization,
    assignments_to_dataframe,
    line_utilization_to_dataframe,
    unassigned_to_dataframe,
)

__all__ = [
    "ShiftUtilizationInfo",
    "ShiftUtilizationSummary",
    "AssignedModelInfo",
    "LineUtilization",
    "OptimizedLineInfo",
    "WorkerOptimizationSummary",
    "line_utilization",
    "assignments_to_dataframe",
    "line_utilization_to_dataframe",
    "unassigned_to_dataframe",
]
