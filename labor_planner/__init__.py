"""Monthly labor allocation planner.

Turns per-model production demand into line and shift assignments, then
shrinks line staffing to the head count the assignments actually need.

Entry points:
    capacity_hours() - Shift capacity hours for a period and allocation method
    generate_allocation() - Greedy allocation of a period's demand
    optimize_capacities() - Worker capacity optimization of the assignments
    PlanningWorkflow - All of the above plus storage, under a per-period lock
"""

from .production import capacity_hours, generate_allocation, optimize_capacities
from .production import AllocationResult, OptimizationOutcome
from .persistence import PlanStore, PlanFile
from .workflows import PlanningConfig, PlanningWorkflow

__version__ = "1.0.0"

__all__ = [
    "capacity_hours",
    "generate_allocation",
    "optimize_capacities",
    "AllocationResult",
    "OptimizationOutcome",
    "PlanStore",
    "PlanFile",
    "PlanningConfig",
    "PlanningWorkflow",
]
