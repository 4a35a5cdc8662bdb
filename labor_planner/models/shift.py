"""Shift definition and break deduction data models."""

from datetime import time
from enum import Enum
from pydantic import BaseModel, Field

from labor_planner.utils.time_of_day import wrapped_duration


class WorkType(str, Enum):
    """Named schedule pattern a line can work in."""
    NON_SHIFT = "NonShift"
    SHIFT_1 = "Shift1"
    SHIFT_2 = "Shift2"
    SHIFT_3 = "Shift3"

    @property
    def is_prayer_affected(self) -> bool:
        """True if the Friday schedule of this work type includes the prayer break."""
        return self in PRAYER_AFFECTED_WORK_TYPES

    @property
    def display_title(self) -> str:
        """Display title used by shift timelines."""
        return {
            WorkType.NON_SHIFT: "NonShift (Regular Hours)",
            WorkType.SHIFT_1: "Shift 1 (Morning Shift)",
            WorkType.SHIFT_2: "Shift 2 (Afternoon Shift)",
            WorkType.SHIFT_3: "Shift 3 (Night Shift)",
        }[self]


class AllocationMethod(str, Enum):
    """How demand is spread over a line's working time."""
    NON_SHIFT_WITH_OVERTIME = "NonShiftWithOvertime"
    MULTI_SHIFT = "MultiShift"

    @property
    def work_types(self) -> tuple[WorkType, ...]:
        """Work types whose capacity the method plans with, in fill order."""
        if self == AllocationMethod.NON_SHIFT_WITH_OVERTIME:
            return NON_SHIFT_WORK_TYPES
        return MULTI_SHIFT_PRIORITY


#: Deduction name that marks the Friday prayer break (matched case-insensitively)
FRIDAY_PRAYER_NAME = "Friday Prayer"

#: Work types whose Friday schedule includes the prayer break
PRAYER_AFFECTED_WORK_TYPES = frozenset({WorkType.NON_SHIFT, WorkType.SHIFT_1})

#: Order in which multi-shift allocation fills shifts
MULTI_SHIFT_PRIORITY = (WorkType.SHIFT_1, WorkType.SHIFT_2, WorkType.SHIFT_3)

#: Work types planned in overtime mode (regular hours only)
NON_SHIFT_WORK_TYPES = (WorkType.NON_SHIFT,)


class Deduction(BaseModel):
    """
    A break that is subtracted from a shift's working time.

    Attributes:
        name: Break name (e.g., "Lunch", "Friday Prayer")
        start_time: Break start (time of day)
        end_time: Break end; earlier than start_time means it spans midnight
        is_active: Inactive deductions are ignored
        work_type: Work type this deduction applies to
    """
    name: str = Field(..., description="Deduction name", min_length=1)
    start_time: time = Field(..., description="Start time of day")
    end_time: time = Field(..., description="End time of day")
    is_active: bool = Field(default=True, description="Whether the deduction applies")
    work_type: WorkType = Field(..., description="Work type the deduction belongs to")

    @property
    def duration_minutes(self) -> int:
        """Length of the deduction in minutes."""
        return wrapped_duration(self.start_time, self.end_time)

    @property
    def is_friday_prayer(self) -> bool:
        """True if this is the Friday prayer break."""
        return self.name.strip().lower() == FRIDAY_PRAYER_NAME.lower()

    def __str__(self) -> str:
        """String representation."""
        status = "" if self.is_active else " (inactive)"
        return (
            f"{self.name} {self.start_time:%H:%M}-{self.end_time:%H:%M} "
            f"[{self.work_type.value}]{status}"
        )


class ShiftDefinition(BaseModel):
    """
    Working window for one work type together with its break deductions.

    One definition exists per work type. The end time may be earlier than the
    start time, in which case the shift runs past midnight.

    Attributes:
        work_type: Work type this definition describes
        start_time: Shift start (time of day)
        end_time: Shift end (time of day)
        deductions: Breaks owned by this shift
    """
    work_type: WorkType = Field(..., description="Work type")
    start_time: time = Field(..., description="Shift start time of day")
    end_time: time = Field(..., description="Shift end time of day")
    deductions: list[Deduction] = Field(
        default_factory=list,
        description="Break deductions owned by this shift"
    )

    @property
    def gross_minutes(self) -> int:
        """Shift length before deductions."""
        return wrapped_duration(self.start_time, self.end_time)

    @property
    def spans_midnight(self) -> bool:
        """True if the shift ends on the following day."""
        return self.end_time < self.start_time

    def add_deduction(
        self,
        name: str,
        start_time: time,
        end_time: time,
        is_active: bool = True,
    ) -> Deduction:
        """
        Attach a new deduction for this shift's work type.

        Returns:
            The created Deduction
        """
        deduction = Deduction(
            name=name,
            start_time=start_time,
            end_time=end_time,
            is_active=is_active,
            work_type=self.work_type,
        )
        self.deductions.append(deduction)
        return deduction

    def __str__(self) -> str:
        """String representation."""
        return (
            f"{self.work_type.value} {self.start_time:%H:%M}-{self.end_time:%H:%M} "
            f"({self.gross_minutes} min, {len(self.deductions)} deductions)"
        )
