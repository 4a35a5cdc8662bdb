"""Net working minutes of a shift after break deductions.

A shift's gross window is reduced by every eligible deduction. On Fridays the
prayer break applies to prayer-affected shifts only, and any other break that
overlaps the prayer window is dropped so the same minutes are not subtracted
twice.
"""

import logging
from dataclasses import dataclass, field
from datetime import time
from typing import Dict, Iterable, List, Optional, Tuple

from labor_planner.models.shift import Deduction, ShiftDefinition, WorkType
from labor_planner.utils.time_of_day import (
    minutes_since_midnight,
    offset_in_window,
    time_from_minutes,
    time_in_window,
    windows_overlap,
)
from labor_planner.validation.errors import MisconfiguredShiftError

logger = logging.getLogger(__name__)

WORK_BLOCK = "work"
DEDUCTION_BLOCK = "deduction"


@dataclass
class TimeBlock:
    """
    Contiguous stretch of a shift that is either working time or a break.

    Attributes:
        block_type: "work" or "deduction"
        name: "Work" for working time, the deduction name otherwise
        start: Block start (time of day)
        end: Block end (time of day)
        duration_minutes: Block length in minutes
    """
    block_type: str
    name: str
    start: time
    end: time
    duration_minutes: int

    def __str__(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M} {self.name} ({self.duration_minutes} min)"


@dataclass
class ShiftTimeline:
    """
    Display view of one shift for a regular day and for Friday.

    Attributes:
        work_type: Shift work type
        title: Display title
        start_time: Shift start
        end_time: Shift end
        has_friday_prayer: True if the shift is prayer-affected
        regular_blocks: Blocks for Monday to Thursday
        friday_blocks: Blocks for Friday
        regular_minutes: Net minutes for Monday to Thursday
        friday_minutes: Net minutes for Friday
    """
    work_type: WorkType
    title: str
    start_time: time
    end_time: time
    has_friday_prayer: bool
    regular_blocks: List[TimeBlock] = field(default_factory=list)
    friday_blocks: List[TimeBlock] = field(default_factory=list)
    regular_minutes: int = 0
    friday_minutes: int = 0


class ShiftCapacityCalculator:
    """
    Turns shift definitions into net working minutes per day type.

    Example:
        >>> shift = ShiftDefinition(work_type=WorkType.NON_SHIFT,
        ...                         start_time=time(8, 0), end_time=time(15, 53))
        >>> shift.add_deduction("Lunch", time(12, 0), time(12, 30))
        >>> ShiftCapacityCalculator().net_minutes(shift, is_friday=False)
        443
    """

    def is_deduction_eligible(
        self,
        deduction: Deduction,
        shift: ShiftDefinition,
        is_friday: bool,
    ) -> bool:
        """
        Check whether a deduction reduces this shift on the given day type.

        Rules:
        - inactive deductions never apply
        - the deduction's work type must match the shift's
        - the Friday prayer break applies only on Fridays and only to
          prayer-affected work types
        - the deduction must start inside the shift window [start, end)

        Args:
            deduction: Deduction to check
            shift: Shift being evaluated
            is_friday: True when evaluating a Friday

        Returns:
            True if the deduction is eligible
        """
        if not deduction.is_active:
            return False

        if deduction.work_type != shift.work_type:
            return False

        if deduction.is_friday_prayer:
            if not is_friday or not shift.work_type.is_prayer_affected:
                return False

        return time_in_window(deduction.start_time, shift.start_time, shift.end_time)

    def effective_deductions(
        self,
        shift: ShiftDefinition,
        is_friday: bool,
    ) -> List[Deduction]:
        """
        Deductions subtracted from the shift, ordered from the shift start.

        Args:
            shift: Shift being evaluated
            is_friday: True when evaluating a Friday

        Returns:
            Eligible deductions with prayer-overlapping breaks removed
        """
        eligible = [
            d for d in shift.deductions
            if self.is_deduction_eligible(d, shift, is_friday)
        ]

        friday_prayer = self._find_friday_prayer(eligible)
        if friday_prayer is not None:
            eligible = [
                d for d in eligible
                if d is friday_prayer or not windows_overlap(
                    d.start_time, d.end_time,
                    friday_prayer.start_time, friday_prayer.end_time,
                )
            ]

        eligible.sort(key=lambda d: offset_in_window(d.start_time, shift.start_time))
        return eligible

    def deduction_minutes(self, shift: ShiftDefinition, is_friday: bool) -> int:
        """Total minutes deducted from the shift on the given day type."""
        return sum(d.duration_minutes for d in self.effective_deductions(shift, is_friday))

    def net_minutes(self, shift: ShiftDefinition, is_friday: bool) -> int:
        """
        Net working minutes for one day of the shift.

        Args:
            shift: Shift definition with deductions
            is_friday: True for Friday, False for Monday to Thursday

        Returns:
            Gross minutes minus eligible deductions

        Raises:
            MisconfiguredShiftError: If deductions exceed the gross duration
        """
        gross = shift.gross_minutes
        deducted = self.deduction_minutes(shift, is_friday)
        net = gross - deducted

        if net < 0:
            raise MisconfiguredShiftError(
                f"Deductions exceed shift duration for {shift.work_type.value}",
                {
                    "work_type": shift.work_type.value,
                    "is_friday": is_friday,
                    "gross_minutes": gross,
                    "deduction_minutes": deducted,
                },
            )

        logger.debug(
            f"{shift.work_type.value} ({'Friday' if is_friday else 'regular'}): "
            f"{gross} gross - {deducted} deducted = {net} net minutes"
        )
        return net

    def time_blocks(self, shift: ShiftDefinition, is_friday: bool) -> List[TimeBlock]:
        """
        Split the shift into contiguous work and deduction blocks.

        Blocks cover [start, end) in order. Deductions are clipped to the shift
        end and to the end of any earlier deduction they overlap. Used for
        display only; allocation relies on net_minutes().

        Args:
            shift: Shift definition with deductions
            is_friday: True for Friday, False for Monday to Thursday

        Returns:
            Ordered list of TimeBlock
        """
        base = minutes_since_midnight(shift.start_time)
        gross = shift.gross_minutes
        blocks: List[TimeBlock] = []
        cursor = 0

        for deduction in self.effective_deductions(shift, is_friday):
            ded_start = offset_in_window(deduction.start_time, shift.start_time)
            ded_end = min(ded_start + deduction.duration_minutes, gross)

            if ded_start > cursor:
                blocks.append(self._block(WORK_BLOCK, "Work", base, cursor, ded_start))
                cursor = ded_start

            if ded_end <= cursor:
                continue

            blocks.append(self._block(DEDUCTION_BLOCK, deduction.name, base, cursor, ded_end))
            cursor = ded_end

        if cursor < gross:
            blocks.append(self._block(WORK_BLOCK, "Work", base, cursor, gross))

        return blocks

    def timeline(self, shift: ShiftDefinition) -> ShiftTimeline:
        """Build the regular-day and Friday display view of a shift."""
        return ShiftTimeline(
            work_type=shift.work_type,
            title=shift.work_type.display_title,
            start_time=shift.start_time,
            end_time=shift.end_time,
            has_friday_prayer=shift.work_type.is_prayer_affected,
            regular_blocks=self.time_blocks(shift, is_friday=False),
            friday_blocks=self.time_blocks(shift, is_friday=True),
            regular_minutes=self.net_minutes(shift, is_friday=False),
            friday_minutes=self.net_minutes(shift, is_friday=True),
        )

    def work_minutes_per_shift(
        self,
        shifts: Iterable[ShiftDefinition],
    ) -> Dict[WorkType, Tuple[int, int]]:
        """
        Net minutes for every shift.

        Returns:
            Mapping of work type to (regular-day minutes, Friday minutes)
        """
        return {
            shift.work_type: (
                self.net_minutes(shift, is_friday=False),
                self.net_minutes(shift, is_friday=True),
            )
            for shift in shifts
        }

    @staticmethod
    def _find_friday_prayer(deductions: List[Deduction]) -> Optional[Deduction]:
        for deduction in deductions:
            if deduction.is_friday_prayer:
                return deduction
        return None

    @staticmethod
    def _block(block_type: str, name: str, base: int, start: int, end: int) -> TimeBlock:
        return TimeBlock(
            block_type=block_type,
            name=name,
            start=time_from_minutes(base + start),
            end=time_from_minutes(base + end),
            duration_minutes=end - start,
        )
