"""Capacity calculation, allocation and worker optimization.

- Net shift minutes after break deductions
- Monthly shift capacity in hours
- Greedy multi-shift / overtime allocation with changeover tracking
- Post-allocation worker capacity optimization
"""

from .shift_capacity import ShiftCapacityCalculator, TimeBlock, ShiftTimeline
from .period_capacity import PeriodCapacityCalculator, ShiftCapacityBreakdown, capacity_hours
from .changeover import ChangeoverTracker
from .allocation import (
    AllocationEngine,
    AllocationResult,
    LineShiftUtilization,
    generate_allocation,
)
from .optimizer import (
    CapacityOptimizer,
    OptimizationOutcome,
    optimization_note,
    optimize_capacities,
)

__all__ = [
    'ShiftCapacityCalculator',
    'TimeBlock',
    'ShiftTimeline',
    'PeriodCapacityCalculator',
    'ShiftCapacityBreakdown',
    'capacity_hours',
    'ChangeoverTracker',
    'AllocationEngine',
    'AllocationResult',
    'LineShiftUtilization',
    'generate_allocation',
    'CapacityOptimizer',
    'OptimizationOutcome',
    'optimization_note',
    'optimize_capacities',
]
