"""Centralized constants for capacity calculation and allocation.

Keeping these values in one module ensures the shift calculator, the
allocation engine and the validators agree on names, priorities and
tolerances.
"""

# Shift rule constants live beside WorkType in the models package
from labor_planner.models.shift import (
    FRIDAY_PRAYER_NAME,
    PRAYER_AFFECTED_WORK_TYPES,
    MULTI_SHIFT_PRIORITY,
    NON_SHIFT_WORK_TYPES,
)

# ============================================================================
# CHANGEOVER
# ============================================================================

#: Time lost when a line-shift switches to a model it is not yet producing
#: 15 minutes, expressed in hours
CHANGEOVER_TIME_HOURS = 15.0 / 60.0


# ============================================================================
# UNASSIGNED DEMAND REASONS
# ============================================================================

REASON_INSUFFICIENT_CAPACITY = "Insufficient capacity across all shifts"
REASON_REQUIRES_OVERTIME = "Requires overtime allocation - Regular capacity exceeded"


# ============================================================================
# NUMERICS
# ============================================================================

#: Slack added before flooring unit counts so 10.0 / 0.01 yields 1000, not 999
FLOAT_TOLERANCE = 1e-9

__all__ = [
    "FRIDAY_PRAYER_NAME",
    "PRAYER_AFFECTED_WORK_TYPES",
    "MULTI_SHIFT_PRIORITY",
    "NON_SHIFT_WORK_TYPES",
    "CHANGEOVER_TIME_HOURS",
    "REASON_INSUFFICIENT_CAPACITY",
    "REASON_REQUIRES_OVERTIME",
    "FLOAT_TOLERANCE",
]
