"""Error taxonomy and input validation for planning runs."""

from .errors import (
    PlanningError,
    ConfigurationMissingError,
    MisconfiguredShiftError,
    InvalidDemandError,
)
from .demand_validator import check_demand_record, split_valid_demand

__all__ = [
    "PlanningError",
    "ConfigurationMissingError",
    "MisconfiguredShiftError",
    "InvalidDemandError",
    "check_demand_record",
    "split_valid_demand",
]
