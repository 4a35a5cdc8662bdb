"""Planning workflow orchestration."""

from .planning_workflow import PlanningConfig, PeriodLockRegistry, PlanningWorkflow

__all__ = [
    'PlanningConfig',
    'PeriodLockRegistry',
    'PlanningWorkflow',
]
