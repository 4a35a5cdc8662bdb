"""Monthly planning workflow.

Runs the whole pipeline for one period under a per-period lock:

    1. compute_capacities() - Shift capacity hours for the allocation method
    2. allocate() - Greedy allocation of the period's demand
    3. optimize() - Shrink staffing to the observed peak per line-shift
    4. PlanFile.save() - Optional JSON plan file
    5. persist_result() - Replace the period's assignments and overrides

The store is written last, in one step, so a run that fails at any earlier
stage leaves the period's previous results in place.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from labor_planner.analysis.plan_report import WorkerOptimizationSummary
from labor_planner.models.capacity_override import CapacityOverride
from labor_planner.models.demand import DemandRecord
from labor_planner.models.line import ProductionLine
from labor_planner.models.period import PlanningPeriod
from labor_planner.models.shift import AllocationMethod, ShiftDefinition
from labor_planner.persistence.plan_file import PlanFile
from labor_planner.persistence.plan_store import PlanStore
from labor_planner.production.allocation import AllocationEngine, AllocationResult
from labor_planner.production.constants import CHANGEOVER_TIME_HOURS
from labor_planner.production.optimizer import CapacityOptimizer
from labor_planner.production.period_capacity import PeriodCapacityCalculator

logger = logging.getLogger(__name__)


@dataclass
class PlanningConfig:
    """Configuration for a planning run.

    Attributes:
        changeover_hours: Time charged when a line-shift switches model
        carry_forward_overrides: Plan with the period's previous overrides as
            line capacities instead of the line defaults
        optimize_capacities: Run the capacity optimizer after allocation
        plan_directory: Write a JSON plan file under this directory (None = don't)
    """
    changeover_hours: float = CHANGEOVER_TIME_HOURS
    carry_forward_overrides: bool = False
    optimize_capacities: bool = True
    plan_directory: Optional[Path] = None

    def __post_init__(self):
        """Validate configuration."""
        if self.changeover_hours < 0:
            raise ValueError(f"changeover_hours must be non-negative, got {self.changeover_hours}")
        if self.plan_directory is not None:
            self.plan_directory = Path(self.plan_directory)


class PeriodLockRegistry:
    """Hands out one lock per planning period.

    Runs for the same period serialize; runs for different periods proceed
    independently.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[PlanningPeriod, threading.Lock] = {}

    def lock_for(self, period: PlanningPeriod) -> threading.Lock:
        """Lock guarding a period, created on first use."""
        with self._guard:
            lock = self._locks.get(period)
            if lock is None:
                lock = threading.Lock()
                self._locks[period] = lock
            return lock


class PlanningWorkflow:
    """Orchestrates capacity calculation, allocation, optimization and storage.

    Example Usage:
        ```python
        workflow = PlanningWorkflow(store, shift_definitions)
        result = workflow.run(period, AllocationMethod.MULTI_SHIFT, demand, lines)
        print(result.worker_optimization)
        ```
    """

    def __init__(
        self,
        store: PlanStore,
        shift_definitions: Iterable[ShiftDefinition],
        config: Optional[PlanningConfig] = None,
        lock_registry: Optional[PeriodLockRegistry] = None,
    ):
        """Initialize workflow.

        Args:
            store: Period-scoped result store
            shift_definitions: One definition per work type
            config: Planning configuration (defaults if None)
            lock_registry: Shared per-period locks (new registry if None)
        """
        self.store = store
        self.config = config or PlanningConfig()
        self.capacity_calculator = PeriodCapacityCalculator(shift_definitions)
        self.engine = AllocationEngine(changeover_hours=self.config.changeover_hours)
        self.optimizer = CapacityOptimizer()
        self.locks = lock_registry or PeriodLockRegistry()

    def run(
        self,
        period: PlanningPeriod,
        method: AllocationMethod,
        demand: Iterable[DemandRecord],
        lines: Iterable[ProductionLine],
    ) -> AllocationResult:
        """Plan one period end to end.

        Args:
            period: Planning period
            method: Allocation method
            demand: Demand records for the period
            lines: Production lines

        Returns:
            AllocationResult with optimized assignments and optimization summary

        Raises:
            ConfigurationMissingError: If a shift the method needs is not defined
            MisconfiguredShiftError: If a shift's deductions exceed its duration
            OSError: If the plan file cannot be written (the store is left unchanged)
        """
        demand = list(demand)
        lines = list(lines)

        with self.locks.lock_for(period):
            logger.info(f"Planning {period} with {method.value}: {len(demand)} demand records")

            shift_capacities = self.capacity_calculator.capacities_for_method(period, method)

            prior_overrides: List[CapacityOverride] = []
            if self.config.carry_forward_overrides:
                prior_overrides = self.store.overrides_for(period)

            result = self.engine.allocate(
                period, method, demand, lines, shift_capacities, prior_overrides,
            )

            overrides = prior_overrides
            if self.config.optimize_capacities:
                outcome = self.optimizer.optimize(period, result.assignments, prior_overrides)
                result.assignments = outcome.updated_assignments
                overrides = outcome.overrides

            overrides = sorted(overrides, key=lambda o: (o.line_id, o.work_type.value))
            result.worker_optimization = WorkerOptimizationSummary.from_overrides(period, overrides)

            if self.config.plan_directory is not None:
                PlanFile.for_period(self.config.plan_directory, period, method).save(result)

            self.persist_result(result, overrides)

        logger.info(f"Planning {period} finished: {result.worker_optimization}")
        return result

    def persist_result(
        self,
        result: AllocationResult,
        overrides: Iterable[CapacityOverride],
    ) -> None:
        """Replace the period's stored records with the result's assignments and the overrides."""
        self.store.replace_period(
            result.period,
            result.assignments + result.overtime_assignments,
            overrides,
        )
