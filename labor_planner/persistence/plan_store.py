"""In-memory store for allocation results, scoped by planning period.

Re-running a period is a destructive replace: replace_period drops the
period's regular assignments, overtime assignments and capacity overrides and
writes the new results under one lock. Other periods are never touched.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from labor_planner.models.assignment import AssignmentKind, ProductionAssignment
from labor_planner.models.capacity_override import CapacityOverride
from labor_planner.models.period import PlanningPeriod
from labor_planner.models.shift import WorkType

logger = logging.getLogger(__name__)


@dataclass
class ClearedPeriod:
    """Counts of records removed by PlanStore.clear_period."""
    period: PlanningPeriod
    assignments: int = 0
    overtime_assignments: int = 0
    overrides: int = 0

    @property
    def total(self) -> int:
        return self.assignments + self.overtime_assignments + self.overrides


class PlanStore:
    """
    Period-scoped storage for assignments and capacity overrides.

    Overrides are unique per (line, period, work type); saving an override
    with an existing key replaces the stored record.

    Example Usage:
        ```python
        store = PlanStore()
        store.replace_period(period, result.assignments, outcome.overrides)
        overrides = store.overrides_for(period)
        ```
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._assignments: Dict[PlanningPeriod, List[ProductionAssignment]] = {}
        self._overtime: Dict[PlanningPeriod, List[ProductionAssignment]] = {}
        self._overrides: Dict[PlanningPeriod, Dict[Tuple[str, WorkType], CapacityOverride]] = {}

    def clear_period(self, period: PlanningPeriod) -> ClearedPeriod:
        """
        Remove every assignment and override of a period.

        Args:
            period: Period to clear

        Returns:
            ClearedPeriod with the number of removed records
        """
        with self._lock:
            cleared = ClearedPeriod(
                period=period,
                assignments=len(self._assignments.pop(period, [])),
                overtime_assignments=len(self._overtime.pop(period, [])),
                overrides=len(self._overrides.pop(period, {})),
            )

        logger.info(
            f"Cleared {period}: {cleared.assignments} assignments, "
            f"{cleared.overtime_assignments} overtime assignments, {cleared.overrides} overrides"
        )
        return cleared

    def save_assignments(
        self,
        period: PlanningPeriod,
        assignments: Iterable[ProductionAssignment],
    ) -> int:
        """
        Store assignments of a period, routing each by its kind.

        Args:
            period: Period the assignments belong to
            assignments: Regular and/or overtime assignments

        Returns:
            Number of assignments stored

        Raises:
            ValueError: If an assignment belongs to another period
        """
        assignments = list(assignments)
        for assignment in assignments:
            if assignment.period != period:
                raise ValueError(
                    f"Assignment {assignment.assignment_id} belongs to {assignment.period}, not {period}"
                )

        with self._lock:
            for assignment in assignments:
                target = self._overtime if assignment.is_overtime else self._assignments
                target.setdefault(period, []).append(assignment)

        logger.debug(f"Stored {len(assignments)} assignments for {period}")
        return len(assignments)

    def assignments_for(
        self,
        period: PlanningPeriod,
        kind: Optional[AssignmentKind] = None,
    ) -> List[ProductionAssignment]:
        """
        Assignments of a period.

        Args:
            period: Planning period
            kind: REGULAR or OVERTIME only (None = both, regular first)

        Returns:
            Stored assignments in insertion order
        """
        with self._lock:
            regular = list(self._assignments.get(period, []))
            overtime = list(self._overtime.get(period, []))

        if kind == AssignmentKind.REGULAR:
            return regular
        if kind == AssignmentKind.OVERTIME:
            return overtime
        return regular + overtime

    def upsert_override(self, override: CapacityOverride) -> CapacityOverride:
        """Insert an override or replace the one with the same key."""
        with self._lock:
            period_overrides = self._overrides.setdefault(override.period, {})
            period_overrides[(override.line_id, override.work_type)] = override
        return override

    def save_overrides(
        self,
        period: PlanningPeriod,
        overrides: Iterable[CapacityOverride],
    ) -> int:
        """
        Upsert overrides of a period.

        Returns:
            Number of overrides written

        Raises:
            ValueError: If an override belongs to another period
        """
        count = 0
        for override in overrides:
            if override.period != period:
                raise ValueError(
                    f"Override for {override.line_id} belongs to {override.period}, not {period}"
                )
            self.upsert_override(override)
            count += 1

        logger.info(f"Upserted {count} capacity overrides for {period}")
        return count

    def replace_period(
        self,
        period: PlanningPeriod,
        assignments: Iterable[ProductionAssignment],
        overrides: Iterable[CapacityOverride],
    ) -> ClearedPeriod:
        """
        Swap a period's stored records for new ones in a single step.

        Every record is checked before the store changes, so a rejected
        record leaves the period's previous contents in place.

        Args:
            period: Period to replace
            assignments: New regular and/or overtime assignments
            overrides: New capacity overrides

        Returns:
            ClearedPeriod with the number of records that were replaced

        Raises:
            ValueError: If a record belongs to another period
        """
        assignments = list(assignments)
        overrides = list(overrides)
        for record in assignments + overrides:
            if record.period != period:
                raise ValueError(f"Record {record!r} belongs to {record.period}, not {period}")

        with self._lock:
            cleared = self.clear_period(period)
            self.save_assignments(period, assignments)
            self.save_overrides(period, overrides)
        return cleared

    def get_override(
        self,
        line_id: str,
        period: PlanningPeriod,
        work_type: WorkType,
    ) -> Optional[CapacityOverride]:
        """Look up the override for a line-shift, None if absent."""
        with self._lock:
            return self._overrides.get(period, {}).get((line_id, work_type))

    def overrides_for(self, period: PlanningPeriod) -> List[CapacityOverride]:
        """Overrides of a period, ordered by line and work type."""
        with self._lock:
            overrides = list(self._overrides.get(period, {}).values())
        return sorted(overrides, key=lambda o: (o.line_id, o.work_type.value))

    def periods(self) -> List[PlanningPeriod]:
        """Periods that hold any stored record."""
        with self._lock:
            keys = set(self._assignments) | set(self._overtime) | set(self._overrides)
        return sorted(keys, key=lambda p: (p.year, p.month))
