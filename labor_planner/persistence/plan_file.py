"""Plan file serialization and deserialization.

Converts AllocationResult objects to/from JSON for storage on the file system.
Pydantic records are written with ``model_dump(mode="json")`` and read back
with ``model_validate``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from labor_planner.analysis.plan_report import OptimizedLineInfo, WorkerOptimizationSummary
from labor_planner.models.assignment import DemandIssue, ProductionAssignment, UnassignedDemand
from labor_planner.models.period import PlanningPeriod
from labor_planner.models.shift import AllocationMethod, WorkType
from labor_planner.production.allocation import AllocationResult

logger = logging.getLogger(__name__)

#: Bumped when the file layout changes incompatibly
PLAN_FILE_VERSION = 1


class PlanFile:
    """Handles saving and loading of one allocation result.

    File Format:
        {
            "version": 1,
            "period": {"month": 9, "year": 2025},
            "method": "MultiShift",
            "line_count": 2,
            "shift_capacities": {"Shift1": 158.5, ...},
            "assignments": [...],
            "unassigned": [...],
            "worker_optimization": {...} or null,
            ...
        }

    Example Usage:
        ```python
        plan_file = PlanFile.for_period("plans", period, AllocationMethod.MULTI_SHIFT)
        plan_file.save(result)
        loaded = plan_file.load()
        ```
    """

    def __init__(self, file_path: Path | str):
        """Initialize PlanFile.

        Args:
            file_path: Path to JSON file for save/load operations
        """
        self.file_path = Path(file_path)

    @classmethod
    def for_period(
        cls,
        directory: Path | str,
        period: PlanningPeriod,
        method: AllocationMethod,
    ) -> "PlanFile":
        """Plan file at ``{directory}/{year}/{YYYY-MM}_{method}.json``."""
        path = Path(directory) / f"{period.year:04d}" / f"{period.key}_{method.value}.json"
        return cls(path)

    def save(self, result: AllocationResult) -> Path:
        """Save an AllocationResult to the JSON file.

        Args:
            result: AllocationResult to save

        Returns:
            Path the result was written to

        Raises:
            OSError: If the file cannot be written
        """
        logger.info(f"Saving plan for {result.period} to {self.file_path}")

        self.file_path.parent.mkdir(parents=True, exist_ok=True)

        data = self._result_to_dict(result)
        with open(self.file_path, 'w') as f:
            json.dump(data, f, indent=2)

        logger.info(f"Saved plan with {len(result.assignments)} assignments")
        return self.file_path

    def load(self) -> AllocationResult:
        """Load an AllocationResult from the JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file format is not supported
        """
        logger.info(f"Loading plan from {self.file_path}")

        if not self.file_path.exists():
            raise FileNotFoundError(f"Plan file not found: {self.file_path}")

        with open(self.file_path, 'r') as f:
            data = json.load(f)

        version = data.get("version")
        if version != PLAN_FILE_VERSION:
            raise ValueError(f"Unsupported plan file version {version!r} in {self.file_path}")

        result = self._dict_to_result(data)
        logger.info(f"Loaded plan for {result.period} ({result.method.value})")
        return result

    def exists(self) -> bool:
        """Check if the plan file exists."""
        return self.file_path.exists()

    def _result_to_dict(self, result: AllocationResult) -> Dict[str, Any]:
        summary = result.worker_optimization
        return {
            "version": PLAN_FILE_VERSION,
            "period": result.period.model_dump(mode="json"),
            "method": result.method.value,
            "line_count": result.line_count,
            "total_work_hours_per_line": result.total_work_hours_per_line,
            "total_demand_hours": result.total_demand_hours,
            "total_capacity_hours": result.total_capacity_hours,
            "capacity_gap": result.capacity_gap,
            "shift_capacities": {wt.value: hours for wt, hours in result.shift_capacities.items()},
            "assignments": [a.model_dump(mode="json") for a in result.assignments],
            "overtime_assignments": [a.model_dump(mode="json") for a in result.overtime_assignments],
            "unassigned": [u.model_dump(mode="json") for u in result.unassigned],
            "demand_issues": [i.model_dump(mode="json") for i in result.demand_issues],
            "required_overtime_hours": result.required_overtime_hours,
            "actual_overtime_hours": result.actual_overtime_hours,
            "worker_optimization": None if summary is None else {
                "optimized_lines": [
                    {
                        "line_id": o.line_id,
                        "work_type": o.work_type.value,
                        "default_capacity": o.default_capacity,
                        "optimized_capacity": o.optimized_capacity,
                        "notes": o.notes,
                    }
                    for o in summary.optimized_lines
                ],
            },
        }

    def _dict_to_result(self, data: Dict[str, Any]) -> AllocationResult:
        period = PlanningPeriod.model_validate(data["period"])

        summary = None
        if data.get("worker_optimization") is not None:
            summary = WorkerOptimizationSummary(
                period=period,
                optimized_lines=[
                    OptimizedLineInfo(
                        line_id=o["line_id"],
                        work_type=WorkType(o["work_type"]),
                        default_capacity=o["default_capacity"],
                        optimized_capacity=o["optimized_capacity"],
                        notes=o.get("notes", ""),
                    )
                    for o in data["worker_optimization"]["optimized_lines"]
                ],
            )

        return AllocationResult(
            period=period,
            method=AllocationMethod(data["method"]),
            line_count=data["line_count"],
            total_work_hours_per_line=data["total_work_hours_per_line"],
            total_demand_hours=data["total_demand_hours"],
            total_capacity_hours=data["total_capacity_hours"],
            capacity_gap=data["capacity_gap"],
            shift_capacities={WorkType(k): v for k, v in data["shift_capacities"].items()},
            assignments=[ProductionAssignment.model_validate(a) for a in data["assignments"]],
            overtime_assignments=[
                ProductionAssignment.model_validate(a) for a in data.get("overtime_assignments", [])
            ],
            unassigned=[UnassignedDemand.model_validate(u) for u in data.get("unassigned", [])],
            demand_issues=[DemandIssue.model_validate(i) for i in data.get("demand_issues", [])],
            required_overtime_hours=data.get("required_overtime_hours", 0.0),
            actual_overtime_hours=data.get("actual_overtime_hours", 0.0),
            worker_optimization=summary,
        )
