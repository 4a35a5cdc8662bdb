"""
Greedy allocation of monthly demand to production lines and shifts.

The engine places demand records largest head count first. For each record it
searches the lines that can staff the model, tightest fit first (smallest
effective capacity, then least used line-shift), and places as many whole
units as the remaining shift hours allow. Whatever cannot be placed is
reported as unassigned demand rather than raised as an error.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from labor_planner.analysis.plan_report import (
    ShiftUtilizationSummary,
    WorkerOptimizationSummary,
)
from labor_planner.models.assignment import (
    AssignmentKind,
    DemandIssue,
    ProductionAssignment,
    UnassignedDemand,
)
from labor_planner.models.capacity_override import CapacityOverride
from labor_planner.models.demand import DemandRecord
from labor_planner.models.line import ProductionLine
from labor_planner.models.period import PlanningPeriod
from labor_planner.models.shift import AllocationMethod, WorkType
from labor_planner.validation.demand_validator import split_valid_demand
from labor_planner.validation.errors import ConfigurationMissingError
from .changeover import ChangeoverTracker
from .constants import (
    CHANGEOVER_TIME_HOURS,
    FLOAT_TOLERANCE,
    REASON_INSUFFICIENT_CAPACITY,
    REASON_REQUIRES_OVERTIME,
)

logger = logging.getLogger(__name__)


@dataclass
class LineShiftUtilization:
    """
    Hours consumed on each (line, shift) during one allocation run.

    Consumed hours include changeover time.
    """
    hours: Dict[Tuple[str, WorkType], float] = field(default_factory=dict)

    def used_hours(self, line_id: str, work_type: WorkType) -> float:
        """Hours used so far on the line-shift."""
        return self.hours.get((line_id, work_type), 0.0)

    def add(self, line_id: str, work_type: WorkType, hours: float) -> None:
        """Consume hours on the line-shift."""
        key = (line_id, work_type)
        self.hours[key] = self.hours.get(key, 0.0) + hours


@dataclass
class AllocationResult:
    """
    Outcome of one allocation run for a period.

    Attributes:
        period: Planning period
        method: Allocation method used
        line_count: Number of active lines considered
        total_work_hours_per_line: Sum of shift capacities (hours per line)
        total_demand_hours: Labor hours of the valid demand
        total_capacity_hours: line_count x total_work_hours_per_line
        capacity_gap: total_capacity_hours - total_demand_hours
        shift_capacities: Capacity hours per shift
        assignments: Regular placements
        overtime_assignments: Overtime placements (currently never produced)
        unassigned: Demand quantity that could not be placed
        demand_issues: Demand records rejected before allocation
        required_overtime_hours: Hours of leftover demand in overtime mode
        actual_overtime_hours: Hours placed in overtime (always 0)
        worker_optimization: Optimizer summary, filled in by the workflow
    """
    period: PlanningPeriod
    method: AllocationMethod
    line_count: int
    total_work_hours_per_line: float
    total_demand_hours: float
    total_capacity_hours: float
    capacity_gap: float
    shift_capacities: Dict[WorkType, float]
    assignments: List[ProductionAssignment] = field(default_factory=list)
    overtime_assignments: List[ProductionAssignment] = field(default_factory=list)
    unassigned: List[UnassignedDemand] = field(default_factory=list)
    demand_issues: List[DemandIssue] = field(default_factory=list)
    required_overtime_hours: float = 0.0
    actual_overtime_hours: float = 0.0
    worker_optimization: Optional[WorkerOptimizationSummary] = None

    def is_fully_assigned(self) -> bool:
        """Check if every unit of valid demand was placed."""
        return len(self.unassigned) == 0

    def assigned_quantity_for(self, model_name: str) -> int:
        """Units of a model placed in regular and overtime assignments."""
        return sum(
            a.assigned_quantity
            for a in self.assignments + self.overtime_assignments
            if a.model_name == model_name
        )

    def unassigned_quantity_for(self, model_name: str) -> int:
        """Units of a model that could not be placed."""
        return sum(u.unassigned_quantity for u in self.unassigned if u.model_name == model_name)

    def shift_utilization(self) -> ShiftUtilizationSummary:
        """Per-shift capacity, used hours and utilization."""
        return ShiftUtilizationSummary.from_assignments(
            self.assignments,
            self.shift_capacities,
            self.line_count,
        )

    @property
    def total_planned_hours(self) -> float:
        """Production plus changeover hours of all placements."""
        return sum(a.total_hours for a in self.assignments + self.overtime_assignments)

    def __str__(self) -> str:
        status = "COMPLETE" if self.is_fully_assigned() else f"{len(self.unassigned)} UNASSIGNED"
        return (
            f"AllocationResult {self.period} ({self.method.value}): "
            f"{len(self.assignments)} assignments, {self.total_demand_hours:.2f}h demand vs "
            f"{self.total_capacity_hours:.2f}h capacity - {status}"
        )


class AllocationEngine:
    """
    Greedy allocator for one period's demand.

    MultiShift fills Shift1, then Shift2, then Shift3 for each record.
    NonShiftWithOvertime fills NonShift regular hours only and reports the
    rest as overtime requirement.

    Example:
        >>> engine = AllocationEngine()
        >>> result = engine.allocate(period, AllocationMethod.MULTI_SHIFT,
        ...                          demand, lines, shift_capacities)
        >>> result.is_fully_assigned()
    """

    def __init__(self, changeover_hours: float = CHANGEOVER_TIME_HOURS):
        """
        Initialize allocation engine.

        Args:
            changeover_hours: Time charged when a line-shift switches model
        """
        if changeover_hours < 0:
            raise ValueError(f"Changeover hours must be non-negative, got {changeover_hours}")
        self.changeover_hours = changeover_hours

    def allocate(
        self,
        period: PlanningPeriod,
        method: AllocationMethod,
        demand: Iterable[DemandRecord],
        lines: Iterable[ProductionLine],
        shift_capacities: Dict[WorkType, float],
        prior_overrides: Iterable[CapacityOverride] = (),
    ) -> AllocationResult:
        """
        Place the period's demand on lines and shifts.

        Args:
            period: Planning period
            method: Allocation method
            demand: Demand records for the period
            lines: Production lines (inactive lines are ignored)
            shift_capacities: Capacity hours per shift for the method
            prior_overrides: Capacity overrides replacing line defaults

        Returns:
            AllocationResult with assignments and unassigned demand

        Raises:
            ConfigurationMissingError: If a shift the method needs has no capacity
        """
        work_types = method.work_types
        missing = [wt.value for wt in work_types if wt not in shift_capacities]
        if missing:
            raise ConfigurationMissingError(
                f"Missing shift capacity for {method.value} allocation",
                {"period": period.key, "missing_work_types": missing},
            )

        # Step 1: Drop invalid demand, largest head count first (stable)
        valid_demand, demand_issues = split_valid_demand(demand, period)
        sorted_demand = sorted(valid_demand, key=lambda d: d.required_head_count, reverse=True)

        # Step 2: Active lines, largest default capacity first (stable)
        sorted_lines = sorted(
            (line for line in lines if line.is_active),
            key=lambda line: line.default_capacity,
            reverse=True,
        )

        capacities = {wt: shift_capacities[wt] for wt in work_types}
        hours_per_line = sum(capacities.values())
        total_capacity = len(sorted_lines) * hours_per_line
        total_demand = sum(d.total_work_hours for d in sorted_demand)

        result = AllocationResult(
            period=period,
            method=method,
            line_count=len(sorted_lines),
            total_work_hours_per_line=hours_per_line,
            total_demand_hours=total_demand,
            total_capacity_hours=total_capacity,
            capacity_gap=total_capacity - total_demand,
            shift_capacities=capacities,
            demand_issues=demand_issues,
        )

        run = _AllocationRun(
            period=period,
            lines=sorted_lines,
            shift_capacities=capacities,
            overrides=_override_lookup(period, prior_overrides),
            tracker=ChangeoverTracker(self.changeover_hours),
            result=result,
        )

        # Step 3: Place each record
        if method == AllocationMethod.MULTI_SHIFT:
            for record in sorted_demand:
                run.allocate_multi_shift(record)
        else:
            for record in sorted_demand:
                run.allocate_non_shift(record)
            result.required_overtime_hours = sum(u.required_hours for u in result.unassigned)
            result.actual_overtime_hours = 0.0

        logger.info(
            f"Allocation for {period} ({method.value}) finished: "
            f"{len(result.assignments)} assignments on {result.line_count} lines, "
            f"{len(result.unassigned)} unassigned, {len(result.demand_issues)} demand issues"
        )
        return result


def generate_allocation(
    period: PlanningPeriod,
    method: AllocationMethod,
    demand: Iterable[DemandRecord],
    lines: Iterable[ProductionLine],
    shift_capacities: Dict[WorkType, float],
    prior_overrides: Iterable[CapacityOverride] = (),
    changeover_hours: float = CHANGEOVER_TIME_HOURS,
) -> AllocationResult:
    """
    Allocate one period's demand with a fresh AllocationEngine.

    See AllocationEngine.allocate for arguments and errors.
    """
    engine = AllocationEngine(changeover_hours=changeover_hours)
    return engine.allocate(period, method, demand, lines, shift_capacities, prior_overrides)


def _override_lookup(
    period: PlanningPeriod,
    overrides: Iterable[CapacityOverride],
) -> Dict[Tuple[str, WorkType], int]:
    return {
        (o.line_id, o.work_type): o.required_workers
        for o in overrides
        if o.period == period
    }


class _AllocationRun:
    """Mutable state of one allocate() call."""

    def __init__(
        self,
        period: PlanningPeriod,
        lines: List[ProductionLine],
        shift_capacities: Dict[WorkType, float],
        overrides: Dict[Tuple[str, WorkType], int],
        tracker: ChangeoverTracker,
        result: AllocationResult,
    ):
        self.period = period
        self.lines = lines
        self.shift_capacities = shift_capacities
        self.overrides = overrides
        self.tracker = tracker
        self.result = result
        self.usage = LineShiftUtilization()
        self._sequence = 0

    def effective_capacity(self, line: ProductionLine, work_type: WorkType) -> int:
        """Override's required workers for the line-shift, else the line default."""
        return self.overrides.get((line.line_id, work_type), line.default_capacity)

    def allocate_multi_shift(self, record: DemandRecord) -> None:
        remaining = record.quantity
        hours_per_unit = record.total_work_hours / record.quantity

        for work_type in self.shift_capacities:
            if remaining <= 0:
                break
            remaining = self._fill_shift(record, remaining, hours_per_unit, work_type)

        if remaining > 0:
            self._report_unassigned(record, remaining, hours_per_unit, REASON_INSUFFICIENT_CAPACITY)

    def allocate_non_shift(self, record: DemandRecord) -> None:
        remaining = record.quantity
        hours_per_unit = record.total_work_hours / record.quantity

        remaining = self._fill_shift(
            record, remaining, hours_per_unit, WorkType.NON_SHIFT,
            require_spare_hours=True,
        )

        if remaining > 0:
            self._report_unassigned(record, remaining, hours_per_unit, REASON_REQUIRES_OVERTIME)

    def _candidates(
        self,
        record: DemandRecord,
        work_type: WorkType,
        require_spare_hours: bool,
    ) -> List[ProductionLine]:
        head_count = record.required_head_count
        capacity = self.shift_capacities[work_type]

        candidates = [
            line for line in self.lines
            if self.effective_capacity(line, work_type) >= head_count
        ]
        if require_spare_hours:
            candidates = [
                line for line in candidates
                if self.usage.used_hours(line.line_id, work_type) < capacity
            ]

        # Tightest fit first: smallest capacity, then least used
        return sorted(
            candidates,
            key=lambda line: (
                self.effective_capacity(line, work_type),
                self.usage.used_hours(line.line_id, work_type),
            ),
        )

    def _fill_shift(
        self,
        record: DemandRecord,
        remaining: int,
        hours_per_unit: float,
        work_type: WorkType,
        require_spare_hours: bool = False,
    ) -> int:
        """Place units in one shift until no candidate admits a unit."""
        capacity = self.shift_capacities[work_type]

        while remaining > 0:
            placed = 0
            for line in self._candidates(record, work_type, require_spare_hours):
                changeover = self.tracker.changeover_hours(line.line_id, work_type, record.model_name)
                available = capacity - self.usage.used_hours(line.line_id, work_type) - changeover
                if available <= 0:
                    continue

                units = min(remaining, math.floor(available / hours_per_unit + FLOAT_TOLERANCE))
                if units > 0:
                    self._place(record, line, work_type, units, hours_per_unit, changeover)
                    placed = units
                    break

            if placed == 0:
                break
            remaining -= placed

        return remaining

    def _place(
        self,
        record: DemandRecord,
        line: ProductionLine,
        work_type: WorkType,
        units: int,
        hours_per_unit: float,
        changeover: float,
    ) -> None:
        allocated = self.effective_capacity(line, work_type)
        planned = units * hours_per_unit
        self._sequence += 1

        assignment = ProductionAssignment(
            assignment_id=f"ASG-{self.period.key}-{self._sequence:05d}",
            kind=AssignmentKind.REGULAR,
            model_name=record.model_name,
            period=self.period,
            line_id=line.line_id,
            assigned_quantity=units,
            planned_hours=planned,
            changeover_hours=changeover,
            required_workers=record.required_head_count,
            allocated_workers=allocated,
            default_capacity=line.default_capacity,
            surplus_workers=allocated - record.required_head_count,
            work_type=work_type,
        )
        self.result.assignments.append(assignment)
        self.usage.add(line.line_id, work_type, planned + changeover)
        self.tracker.record(line.line_id, work_type, record.model_name)

        logger.debug(f"Placed {assignment}")

    def _report_unassigned(
        self,
        record: DemandRecord,
        remaining: int,
        hours_per_unit: float,
        reason: str,
    ) -> None:
        unassigned = UnassignedDemand(
            model_name=record.model_name,
            unassigned_quantity=remaining,
            required_hours=remaining * hours_per_unit,
            required_head_count=record.required_head_count,
            reason=reason,
        )
        self.result.unassigned.append(unassigned)
        logger.warning(f"Unassigned demand in {self.period}: {unassigned}")
