"""Persistence layer for allocation results and capacity overrides."""

from .plan_store import PlanStore, ClearedPeriod
from .plan_file import PlanFile

__all__ = [
    'PlanStore',
    'ClearedPeriod',
    'PlanFile',
]
