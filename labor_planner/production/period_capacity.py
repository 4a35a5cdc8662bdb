"""Monthly shift capacity in hours.

Capacity per shift = (Mon-Thu days x regular net minutes + Fridays x Friday
net minutes) / 60. Weekends carry no capacity.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from labor_planner.models.period import PlanningPeriod
from labor_planner.models.shift import AllocationMethod, ShiftDefinition, WorkType
from labor_planner.validation.errors import ConfigurationMissingError
from .shift_capacity import ShiftCapacityCalculator

logger = logging.getLogger(__name__)


@dataclass
class ShiftCapacityBreakdown:
    """
    How one shift's monthly capacity was derived.

    Attributes:
        work_type: Shift work type
        period: Planning period
        gross_minutes: Shift window length
        regular_deduction_minutes: Minutes deducted Monday to Thursday
        friday_deduction_minutes: Minutes deducted on Fridays
        regular_net_minutes: Net minutes Monday to Thursday
        friday_net_minutes: Net minutes on Fridays
        regular_days: Monday to Thursday dates in the period
        friday_days: Fridays in the period
    """
    work_type: WorkType
    period: PlanningPeriod
    gross_minutes: int
    regular_deduction_minutes: int
    friday_deduction_minutes: int
    regular_net_minutes: int
    friday_net_minutes: int
    regular_days: int
    friday_days: int

    @property
    def total_minutes(self) -> int:
        """Net working minutes over the whole period."""
        return (
            self.regular_days * self.regular_net_minutes
            + self.friday_days * self.friday_net_minutes
        )

    @property
    def total_hours(self) -> float:
        """Net working hours over the whole period."""
        return self.total_minutes / 60.0

    def __str__(self) -> str:
        return (
            f"{self.work_type.value} {self.period}: "
            f"{self.regular_days}d x {self.regular_net_minutes}min + "
            f"{self.friday_days}d x {self.friday_net_minutes}min = {self.total_hours:.2f}h"
        )


class PeriodCapacityCalculator:
    """
    Capacity hours per shift for a planning period.

    Example:
        >>> calc = PeriodCapacityCalculator(shift_definitions)
        >>> calc.capacities_for_method(period, AllocationMethod.MULTI_SHIFT)
        {<WorkType.SHIFT_1: 'Shift1'>: 158.5, ...}
    """

    def __init__(
        self,
        shift_definitions: Iterable[ShiftDefinition],
        shift_calculator: Optional[ShiftCapacityCalculator] = None,
    ):
        """
        Initialize period capacity calculator.

        Args:
            shift_definitions: One definition per work type
            shift_calculator: Net minutes calculator (default instance if None)

        Raises:
            ValueError: If two definitions share a work type
        """
        self.shift_calculator = shift_calculator or ShiftCapacityCalculator()
        self.shift_definitions: Dict[WorkType, ShiftDefinition] = {}

        for shift in shift_definitions:
            if shift.work_type in self.shift_definitions:
                raise ValueError(f"Duplicate shift definition for {shift.work_type.value}")
            self.shift_definitions[shift.work_type] = shift

    def get_shift(self, work_type: WorkType) -> ShiftDefinition:
        """
        Look up the definition for a work type.

        Raises:
            ConfigurationMissingError: If no definition exists
        """
        shift = self.shift_definitions.get(work_type)
        if shift is None:
            raise ConfigurationMissingError(
                f"No shift definition configured for {work_type.value}",
                {
                    "work_type": work_type.value,
                    "configured": sorted(wt.value for wt in self.shift_definitions),
                },
            )
        return shift

    def breakdown(self, period: PlanningPeriod, work_type: WorkType) -> ShiftCapacityBreakdown:
        """
        Derive the capacity of one shift step by step.

        Args:
            period: Planning period
            work_type: Shift to evaluate

        Returns:
            ShiftCapacityBreakdown with day counts and net minutes

        Raises:
            ConfigurationMissingError: If the shift is not defined
            MisconfiguredShiftError: If deductions exceed the shift
        """
        shift = self.get_shift(work_type)
        calc = self.shift_calculator

        return ShiftCapacityBreakdown(
            work_type=work_type,
            period=period,
            gross_minutes=shift.gross_minutes,
            regular_deduction_minutes=calc.deduction_minutes(shift, is_friday=False),
            friday_deduction_minutes=calc.deduction_minutes(shift, is_friday=True),
            regular_net_minutes=calc.net_minutes(shift, is_friday=False),
            friday_net_minutes=calc.net_minutes(shift, is_friday=True),
            regular_days=period.regular_days,
            friday_days=period.friday_days,
        )

    def capacity_hours(self, period: PlanningPeriod, work_type: WorkType) -> float:
        """Net working hours of one shift over the period."""
        return self.breakdown(period, work_type).total_hours

    def capacities_for_method(
        self,
        period: PlanningPeriod,
        method: AllocationMethod,
    ) -> Dict[WorkType, float]:
        """
        Capacity hours for every shift the allocation method plans with.

        NonShiftWithOvertime uses NonShift only; MultiShift uses Shift1,
        Shift2 and Shift3.

        Args:
            period: Planning period
            method: Allocation method

        Returns:
            Mapping of work type to capacity hours, in fill order

        Raises:
            ConfigurationMissingError: If a required shift is not defined
        """
        capacities = {
            work_type: self.capacity_hours(period, work_type)
            for work_type in method.work_types
        }

        summary = ", ".join(f"{wt.value}={hours:.2f}h" for wt, hours in capacities.items())
        logger.info(f"Shift capacities for {period} ({method.value}): {summary}")
        return capacities


def capacity_hours(
    period: PlanningPeriod,
    shift_definitions: Iterable[ShiftDefinition],
    method: AllocationMethod,
) -> Dict[WorkType, float]:
    """
    Capacity hours per shift for an allocation method.

    See PeriodCapacityCalculator.capacities_for_method.
    """
    return PeriodCapacityCalculator(shift_definitions).capacities_for_method(period, method)
