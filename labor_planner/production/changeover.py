"""Model changeover tracking for line-shift allocation.

A line-shift pays the changeover time once for each model it starts producing
after it already holds another model. The first model placed on an empty
line-shift runs on the shift's setup and pays nothing.
"""

from typing import Dict, Set, Tuple

from labor_planner.models.shift import WorkType
from .constants import CHANGEOVER_TIME_HOURS


class ChangeoverTracker:
    """
    Remembers which models each (line, shift) has produced during one run.

    Changeover rules:
    - 0.0 if the line-shift holds no model yet (first placement)
    - 0.0 if the model is already produced on the line-shift
    - changeover_hours otherwise

    Example:
        >>> tracker = ChangeoverTracker()
        >>> tracker.changeover_hours("LINE_1", WorkType.SHIFT_1, "A")  # 0.0, empty
        >>> tracker.record("LINE_1", WorkType.SHIFT_1, "A")
        >>> tracker.changeover_hours("LINE_1", WorkType.SHIFT_1, "A")  # 0.0, same model
        >>> tracker.changeover_hours("LINE_1", WorkType.SHIFT_1, "B")  # 0.25
    """

    def __init__(self, changeover_hours: float = CHANGEOVER_TIME_HOURS):
        """
        Initialize changeover tracker.

        Args:
            changeover_hours: Time charged when a line-shift switches model

        Raises:
            ValueError: If changeover_hours is negative
        """
        if changeover_hours < 0:
            raise ValueError(f"Changeover hours must be non-negative, got {changeover_hours}")

        self.default_changeover_hours = changeover_hours
        self._seen: Dict[Tuple[str, WorkType], Set[str]] = {}

    def changeover_hours(self, line_id: str, work_type: WorkType, model_name: str) -> float:
        """
        Changeover to charge if the model is placed on the line-shift now.

        Args:
            line_id: Line identifier
            work_type: Shift
            model_name: Model about to be placed

        Returns:
            Changeover time in hours
        """
        seen = self._seen.get((line_id, work_type))

        # Empty line-shift - no changeover
        if not seen:
            return 0.0

        # Model already running here - no changeover
        if model_name in seen:
            return 0.0

        return self.default_changeover_hours

    def record(self, line_id: str, work_type: WorkType, model_name: str) -> None:
        """Register a placement of the model on the line-shift."""
        self._seen.setdefault((line_id, work_type), set()).add(model_name)

    def __str__(self) -> str:
        """String representation."""
        return f"ChangeoverTracker: {len(self._seen)} line-shifts"
