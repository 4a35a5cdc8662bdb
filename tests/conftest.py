"""Pytest configuration and shared fixtures."""

import pytest
from datetime import time

from labor_planner.models import (
    PlanningPeriod,
    WorkType,
    ShiftDefinition,
    ModelReference,
    DemandRecord,
    ProductionLine,
)


@pytest.fixture
def period():
    """September 2025: 18 Monday-Thursday dates and 4 Fridays."""
    return PlanningPeriod(month=9, year=2025)


@pytest.fixture
def non_shift():
    """NonShift 08:00-16:53 with lunch and a Friday prayer break that covers lunch."""
    shift = ShiftDefinition(
        work_type=WorkType.NON_SHIFT,
        start_time=time(8, 0),
        end_time=time(16, 53),
    )
    shift.add_deduction("Lunch", time(12, 0), time(12, 30))
    shift.add_deduction("Friday Prayer", time(11, 45), time(13, 0))
    return shift


@pytest.fixture
def shift_1():
    """Shift1 06:00-14:00 with a morning break and a Friday prayer break."""
    shift = ShiftDefinition(
        work_type=WorkType.SHIFT_1,
        start_time=time(6, 0),
        end_time=time(14, 0),
    )
    shift.add_deduction("Break", time(10, 0), time(10, 30))
    shift.add_deduction("Friday Prayer", time(11, 45), time(12, 45))
    return shift


@pytest.fixture
def shift_2():
    """Shift2 14:00-22:00; its Friday prayer entry never applies."""
    shift = ShiftDefinition(
        work_type=WorkType.SHIFT_2,
        start_time=time(14, 0),
        end_time=time(22, 0),
    )
    shift.add_deduction("Break", time(18, 0), time(18, 30))
    shift.add_deduction("Friday Prayer", time(18, 0), time(19, 0))
    return shift


@pytest.fixture
def shift_3():
    """Shift3 22:00-06:00 across midnight with a meal break after midnight."""
    shift = ShiftDefinition(
        work_type=WorkType.SHIFT_3,
        start_time=time(22, 0),
        end_time=time(6, 0),
    )
    shift.add_deduction("Meal", time(2, 0), time(2, 30))
    return shift


@pytest.fixture
def shift_definitions(non_shift, shift_1, shift_2, shift_3):
    """One definition per work type."""
    return [non_shift, shift_1, shift_2, shift_3]


@pytest.fixture
def ten_hour_shifts():
    """10 capacity hours in every multi-shift work type."""
    return {
        WorkType.SHIFT_1: 10.0,
        WorkType.SHIFT_2: 10.0,
        WorkType.SHIFT_3: 10.0,
    }


@pytest.fixture
def make_demand(period):
    """Factory for resolved demand records (SUT in seconds)."""
    def _make(model_name, quantity, sut_seconds=36.0, head_count=5, record_period=None):
        return DemandRecord(
            model_name=model_name,
            quantity=quantity,
            period=record_period or period,
            model_reference=ModelReference(
                model_name=model_name,
                sut_seconds=sut_seconds,
                head_count=head_count,
            ),
        )
    return _make


@pytest.fixture
def make_line():
    """Factory for production lines."""
    def _make(line_id, default_capacity, is_active=True):
        return ProductionLine(
            line_id=line_id,
            name=f"LINE_{line_id}",
            default_capacity=default_capacity,
            is_active=is_active,
        )
    return _make
