"""
Post-allocation worker capacity optimization.

After allocation every line-shift is staffed at its effective capacity. The
optimizer shrinks each line-shift to the peak head count actually required by
the models placed on it, records the result as a CapacityOverride and rewrites
the affected assignments.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from labor_planner.models.assignment import AssignmentKind, ProductionAssignment
from labor_planner.models.capacity_override import CapacityOverride, utc_now
from labor_planner.models.period import PlanningPeriod
from labor_planner.models.shift import WorkType

logger = logging.getLogger(__name__)


@dataclass
class OptimizationOutcome:
    """
    Result of one optimizer pass.

    Attributes:
        overrides: All capacity overrides for the period after the pass
        updated_assignments: Assignments after rewriting, in input order
        changed: True if any override or assignment was modified
    """
    overrides: List[CapacityOverride] = field(default_factory=list)
    updated_assignments: List[ProductionAssignment] = field(default_factory=list)
    changed: bool = False

    @property
    def total_workers_saved(self) -> int:
        """Workers freed across all overrides."""
        return sum(o.workers_saved for o in self.overrides)

    def __str__(self) -> str:
        return (
            f"OptimizationOutcome: {len(self.overrides)} overrides, "
            f"{self.total_workers_saved} workers saved, changed={self.changed}"
        )


def optimization_note(work_type: WorkType, peak: int, saved: int) -> str:
    """
    Note stored on an override written by the optimizer.

    `saved` counts workers freed by this pass (allocated before the pass minus
    the peak). It differs from CapacityOverride.workers_saved, which is measured
    against the line's default capacity, when the run started from a carried
    forward override.
    """
    return f"Shift {work_type.value} optimized: {peak} workers (saved {saved})"


class CapacityOptimizer:
    """
    Shrinks allocated headcount to the observed peak per line-shift.

    The pass is monotone (allocated workers never grow) and idempotent:
    running it again on its own output changes nothing.

    Example:
        >>> outcome = CapacityOptimizer().optimize(period, result.assignments)
        >>> for override in outcome.overrides:
        ...     print(override.notes)
    """

    def optimize(
        self,
        period: PlanningPeriod,
        assignments: Iterable[ProductionAssignment],
        existing_overrides: Iterable[CapacityOverride] = (),
    ) -> OptimizationOutcome:
        """
        Optimize worker capacity for one period.

        Only regular assignments of the period take part. Overtime
        placements and assignments of other periods are returned unchanged.

        Args:
            period: Planning period
            assignments: Assignments produced by the allocation engine
            existing_overrides: Overrides already stored for the period

        Returns:
            OptimizationOutcome with the period's overrides and rewritten assignments
        """
        updated = [a.model_copy() for a in assignments]

        overrides: Dict[Tuple[str, WorkType], CapacityOverride] = {
            (o.line_id, o.work_type): o.model_copy()
            for o in existing_overrides
            if o.period == period
        }

        # Step 1: Group regular assignments by line-shift
        groups: Dict[Tuple[str, WorkType], List[int]] = {}
        for index, assignment in enumerate(updated):
            if assignment.kind != AssignmentKind.REGULAR or assignment.period != period:
                continue
            groups.setdefault((assignment.line_id, assignment.work_type), []).append(index)

        changed = False

        for (line_id, work_type), indices in groups.items():
            members = [updated[i] for i in indices]

            # Step 2: Fold to the peak requirement
            peak = max(a.required_workers for a in members)
            current = members[0].allocated_workers

            if current <= peak:
                continue

            # Step 3: Upsert the override
            saved = current - peak
            note = optimization_note(work_type, peak, saved)
            self._upsert(overrides, period, line_id, work_type, peak, members[0].default_capacity, note)

            # Step 4: Rewrite the line-shift's assignments
            now = utc_now()
            for i in indices:
                updated[i] = updated[i].model_copy(update={
                    "allocated_workers": peak,
                    "surplus_workers": peak - updated[i].required_workers,
                    "modified_at": now,
                })

            changed = True
            logger.info(f"{period} {line_id}: {note}")

        return OptimizationOutcome(
            overrides=list(overrides.values()),
            updated_assignments=updated,
            changed=changed,
        )

    @staticmethod
    def _upsert(
        overrides: Dict[Tuple[str, WorkType], CapacityOverride],
        period: PlanningPeriod,
        line_id: str,
        work_type: WorkType,
        peak: int,
        default_capacity: int,
        note: str,
    ) -> None:
        key = (line_id, work_type)
        existing = overrides.get(key)

        if existing is None:
            overrides[key] = CapacityOverride(
                line_id=line_id,
                period=period,
                work_type=work_type,
                required_workers=peak,
                default_capacity=default_capacity,
                notes=note,
            )
        else:
            overrides[key] = existing.model_copy(update={
                "required_workers": peak,
                "notes": note,
                "modified_at": utc_now(),
            })


def optimize_capacities(
    period: PlanningPeriod,
    assignments: Iterable[ProductionAssignment],
    existing_overrides: Iterable[CapacityOverride] = (),
) -> OptimizationOutcome:
    """Run one CapacityOptimizer pass. See CapacityOptimizer.optimize."""
    return CapacityOptimizer().optimize(period, assignments, existing_overrides)
