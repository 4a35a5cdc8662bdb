"""Utilization and worker optimization reports for allocation results.

Summaries are plain dataclasses with ``to_dict()`` rows so they can be exported
to pandas DataFrames for display or spreadsheet output.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import pandas as pd

from labor_planner.models.assignment import ProductionAssignment, UnassignedDemand
from labor_planner.models.capacity_override import CapacityOverride
from labor_planner.models.line import ProductionLine
from labor_planner.models.period import PlanningPeriod
from labor_planner.models.shift import WorkType


def _percent(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


@dataclass
class ShiftUtilizationInfo:
    """Usage of one shift across all lines."""
    work_type: WorkType
    capacity_hours: float
    used_hours: float
    assignment_count: int

    @property
    def utilization_percent(self) -> float:
        """Used hours as a percentage of capacity."""
        return _percent(self.used_hours, self.capacity_hours)

    def to_dict(self) -> Dict:
        """Convert to dictionary for DataFrame export."""
        return {
            'Shift': self.work_type.value,
            'Capacity Hours': round(self.capacity_hours, 2),
            'Used Hours': round(self.used_hours, 2),
            'Utilization %': round(self.utilization_percent, 1),
            'Assignments': self.assignment_count,
        }


@dataclass
class ShiftUtilizationSummary:
    """
    Per-shift utilization of an allocation result.

    Shift capacity is the per-line capacity multiplied by the line count; used
    hours include changeover.
    """
    shifts: Dict[WorkType, ShiftUtilizationInfo] = field(default_factory=dict)

    @classmethod
    def from_assignments(
        cls,
        assignments: Iterable[ProductionAssignment],
        shift_capacities: Dict[WorkType, float],
        line_count: int,
    ) -> "ShiftUtilizationSummary":
        """
        Summarize assignments per shift.

        Args:
            assignments: Regular assignments of the result
            shift_capacities: Capacity hours per line for each planned shift
            line_count: Number of lines the capacity applies to

        Returns:
            ShiftUtilizationSummary with one entry per planned shift
        """
        used: Dict[WorkType, float] = defaultdict(float)
        counts: Dict[WorkType, int] = defaultdict(int)
        for assignment in assignments:
            used[assignment.work_type] += assignment.total_hours
            counts[assignment.work_type] += 1

        return cls(shifts={
            work_type: ShiftUtilizationInfo(
                work_type=work_type,
                capacity_hours=hours * line_count,
                used_hours=used[work_type],
                assignment_count=counts[work_type],
            )
            for work_type, hours in shift_capacities.items()
        })

    @property
    def total_capacity_hours(self) -> float:
        return sum(s.capacity_hours for s in self.shifts.values())

    @property
    def total_used_hours(self) -> float:
        return sum(s.used_hours for s in self.shifts.values())

    @property
    def overall_utilization_percent(self) -> float:
        """Used hours across shifts as a percentage of total capacity."""
        return _percent(self.total_used_hours, self.total_capacity_hours)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per shift."""
        return pd.DataFrame([s.to_dict() for s in self.shifts.values()])


@dataclass
class AssignedModelInfo:
    """One placement as listed under a line."""
    model_name: str
    work_type: Optional[WorkType]
    quantity: int
    hours: float
    changeover_hours: float
    required_workers: int
    surplus_workers: int


@dataclass
class LineUtilization:
    """
    Usage of one line across the planned shifts.

    Attributes:
        line_id: Line identifier
        line_name: Line name
        capacity: Workers staffed (highest allocation on the line, else default)
        default_capacity: The line's default worker capacity
        max_hours: Capacity hours across the planned shifts
        used_hours: Planned plus changeover hours
        changeover_hours: Changeover part of used_hours
        assigned_models: Placements on the line
    """
    line_id: str
    line_name: str
    capacity: int
    default_capacity: int
    max_hours: float
    used_hours: float = 0.0
    changeover_hours: float = 0.0
    assigned_models: List[AssignedModelInfo] = field(default_factory=list)

    @property
    def available_hours(self) -> float:
        return self.max_hours - self.used_hours

    @property
    def utilization_percent(self) -> float:
        return _percent(self.used_hours, self.max_hours)

    def to_dict(self) -> Dict:
        """Convert to dictionary for DataFrame export."""
        return {
            'Line': self.line_name,
            'Capacity': self.capacity,
            'Default Capacity': self.default_capacity,
            'Max Hours': round(self.max_hours, 2),
            'Used Hours': round(self.used_hours, 2),
            'Changeover Hours': round(self.changeover_hours, 2),
            'Available Hours': round(self.available_hours, 2),
            'Utilization %': round(self.utilization_percent, 1),
            'Models': len({m.model_name for m in self.assigned_models}),
        }


def line_utilization(
    lines: Iterable[ProductionLine],
    assignments: Iterable[ProductionAssignment],
    shift_capacities: Dict[WorkType, float],
) -> List[LineUtilization]:
    """
    Build per-line utilization for the active lines.

    Args:
        lines: Production lines (inactive lines are skipped)
        assignments: Regular assignments of the result
        shift_capacities: Capacity hours per line for each planned shift

    Returns:
        LineUtilization per active line, in input order
    """
    max_hours = sum(shift_capacities.values())
    by_line: Dict[str, List[ProductionAssignment]] = defaultdict(list)
    for assignment in assignments:
        by_line[assignment.line_id].append(assignment)

    report = []
    for line in lines:
        if not line.is_active:
            continue

        placed = by_line.get(line.line_id, [])
        report.append(LineUtilization(
            line_id=line.line_id,
            line_name=line.name,
            capacity=max((a.allocated_workers for a in placed), default=line.default_capacity),
            default_capacity=line.default_capacity,
            max_hours=max_hours,
            used_hours=sum(a.total_hours for a in placed),
            changeover_hours=sum(a.changeover_hours for a in placed),
            assigned_models=[
                AssignedModelInfo(
                    model_name=a.model_name,
                    work_type=a.work_type,
                    quantity=a.assigned_quantity,
                    hours=a.planned_hours,
                    changeover_hours=a.changeover_hours,
                    required_workers=a.required_workers,
                    surplus_workers=a.surplus_workers,
                )
                for a in placed
            ],
        ))

    return report


@dataclass
class OptimizedLineInfo:
    """
    Default vs optimized staffing of one line-shift.

    Savings are always measured against the line's default capacity, so they
    can exceed the "saved" figure in notes written by a pass that started from
    an earlier override.
    """
    line_id: str
    work_type: WorkType
    default_capacity: int
    optimized_capacity: int
    notes: str = ""

    @property
    def workers_saved(self) -> int:
        """Workers freed compared with the line's default capacity."""
        return self.default_capacity - self.optimized_capacity


@dataclass
class WorkerOptimizationSummary:
    """
    Workers saved by capacity optimization for one period.

    Attributes:
        period: Planning period
        optimized_lines: One entry per capacity override
    """
    period: PlanningPeriod
    optimized_lines: List[OptimizedLineInfo] = field(default_factory=list)

    @classmethod
    def from_overrides(
        cls,
        period: PlanningPeriod,
        overrides: Iterable[CapacityOverride],
    ) -> "WorkerOptimizationSummary":
        """Summarize the overrides stored for a period."""
        return cls(
            period=period,
            optimized_lines=[
                OptimizedLineInfo(
                    line_id=o.line_id,
                    work_type=o.work_type,
                    default_capacity=o.default_capacity,
                    optimized_capacity=o.required_workers,
                    notes=o.notes,
                )
                for o in overrides
                if o.period == period
            ],
        )

    @property
    def total_default_workers(self) -> int:
        return sum(o.default_capacity for o in self.optimized_lines)

    @property
    def total_optimized_workers(self) -> int:
        return sum(o.optimized_capacity for o in self.optimized_lines)

    @property
    def total_workers_saved(self) -> int:
        return sum(o.workers_saved for o in self.optimized_lines)

    @property
    def optimization_percent(self) -> float:
        """Workers saved as a percentage of default workers."""
        return _percent(self.total_workers_saved, self.total_default_workers)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per optimized line-shift."""
        return pd.DataFrame([
            {
                'Line': o.line_id,
                'Shift': o.work_type.value,
                'Default Capacity': o.default_capacity,
                'Optimized Capacity': o.optimized_capacity,
                'Workers Saved': o.workers_saved,
                'Notes': o.notes,
            }
            for o in self.optimized_lines
        ])

    def __str__(self) -> str:
        return (
            f"WorkerOptimizationSummary {self.period}: {self.total_workers_saved} of "
            f"{self.total_default_workers} workers saved ({self.optimization_percent:.1f}%)"
        )


def assignments_to_dataframe(assignments: Iterable[ProductionAssignment]) -> pd.DataFrame:
    """Export assignments, one row per placement."""
    rows = [
        {
            'Assignment': a.assignment_id,
            'Kind': a.kind.value,
            'Model': a.model_name,
            'Line': a.line_id,
            'Shift': a.work_type.value if a.work_type else '-',
            'Quantity': a.assigned_quantity,
            'Planned Hours': round(a.planned_hours, 4),
            'Changeover Hours': round(a.changeover_hours, 4),
            'Required Workers': a.required_workers,
            'Allocated Workers': a.allocated_workers,
            'Surplus Workers': a.surplus_workers,
        }
        for a in assignments
    ]
    return pd.DataFrame(rows)


def line_utilization_to_dataframe(report: Iterable[LineUtilization]) -> pd.DataFrame:
    """Export line utilization, one row per line."""
    return pd.DataFrame([line.to_dict() for line in report])


def unassigned_to_dataframe(unassigned: Iterable[UnassignedDemand]) -> pd.DataFrame:
    """Export unassigned demand, one row per model."""
    rows = [
        {
            'Model': u.model_name,
            'Unassigned Quantity': u.unassigned_quantity,
            'Required Hours': round(u.required_hours, 2),
            'Required Head Count': u.required_head_count,
            'Reason': u.reason,
        }
        for u in unassigned
    ]
    return pd.DataFrame(rows)
