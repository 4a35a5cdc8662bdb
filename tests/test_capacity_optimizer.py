"""Tests for post-allocation worker capacity optimization."""

import pytest

from labor_planner import generate_allocation, optimize_capacities
from labor_planner.models import (
    AllocationMethod,
    AssignmentKind,
    CapacityOverride,
    ProductionAssignment,
    WorkType,
)
from labor_planner.production import CapacityOptimizer, optimization_note


@pytest.fixture
def allocated(period, make_demand, make_line, ten_hour_shifts):
    """Two models (head count 5 and 3) on one capacity-8 line, Shift1."""
    return generate_allocation(
        period, AllocationMethod.MULTI_SHIFT,
        [make_demand("A", 200, head_count=5), make_demand("B", 100, head_count=3)],
        [make_line("L8", 8)],
        ten_hour_shifts,
    )


class TestCapacityOptimizer:
    """Tests for CapacityOptimizer.optimize."""

    def test_override_created_at_peak(self, period, allocated):
        outcome = optimize_capacities(period, allocated.assignments)

        [override] = outcome.overrides
        assert override.line_id == "L8"
        assert override.work_type == WorkType.SHIFT_1
        assert override.required_workers == 5
        assert override.default_capacity == 8
        assert override.workers_saved == 3
        assert override.notes == "Shift Shift1 optimized: 5 workers (saved 3)"
        assert outcome.changed

    def test_assignments_rewritten(self, period, allocated):
        outcome = optimize_capacities(period, allocated.assignments)

        by_model = {a.model_name: a for a in outcome.updated_assignments}
        assert by_model["A"].allocated_workers == 5
        assert by_model["A"].surplus_workers == 0
        assert by_model["B"].allocated_workers == 5
        assert by_model["B"].surplus_workers == 2
        assert all(a.modified_at is not None for a in outcome.updated_assignments)

    def test_input_not_mutated(self, period, allocated):
        optimize_capacities(period, allocated.assignments)
        assert all(a.allocated_workers == 8 for a in allocated.assignments)

    def test_idempotent(self, period, allocated):
        """Test a second pass on optimized output changes nothing."""
        first = optimize_capacities(period, allocated.assignments)
        second = optimize_capacities(period, first.updated_assignments, first.overrides)

        assert not second.changed
        assert [o.required_workers for o in second.overrides] == [5]
        assert [a.allocated_workers for a in second.updated_assignments] == [
            a.allocated_workers for a in first.updated_assignments
        ]

    def test_monotone(self, period, allocated):
        """Test allocated workers never increase."""
        outcome = optimize_capacities(period, allocated.assignments)
        for before, after in zip(allocated.assignments, outcome.updated_assignments):
            assert after.allocated_workers <= before.allocated_workers
            assert after.allocated_workers >= after.required_workers

    def test_existing_override_updated_in_place(self, period, allocated):
        existing = CapacityOverride(
            line_id="L8",
            period=period,
            work_type=WorkType.SHIFT_1,
            required_workers=7,
            default_capacity=8,
        )
        outcome = optimize_capacities(period, allocated.assignments, [existing])

        [override] = outcome.overrides
        assert override.required_workers == 5
        assert override.created_at == existing.created_at
        assert override.modified_at is not None
        assert existing.required_workers == 7

    def test_other_overrides_kept(self, period, allocated):
        other = CapacityOverride(
            line_id="L9",
            period=period,
            work_type=WorkType.SHIFT_3,
            required_workers=4,
            default_capacity=6,
        )
        outcome = optimize_capacities(period, allocated.assignments, [other])

        assert {(o.line_id, o.work_type) for o in outcome.overrides} == {
            ("L9", WorkType.SHIFT_3),
            ("L8", WorkType.SHIFT_1),
        }

    def test_fully_used_line_shift_untouched(self, period, make_demand, make_line, ten_hour_shifts):
        result = generate_allocation(
            period, AllocationMethod.MULTI_SHIFT,
            [make_demand("A", 100, head_count=6)],
            [make_line("L6", 6)],
            ten_hour_shifts,
        )
        outcome = CapacityOptimizer().optimize(period, result.assignments)

        assert outcome.overrides == []
        assert not outcome.changed
        assert outcome.updated_assignments[0].modified_at is None

    def test_overtime_assignments_ignored(self, period):
        overtime = ProductionAssignment(
            assignment_id="OT-1",
            kind=AssignmentKind.OVERTIME,
            model_name="A",
            period=period,
            line_id="L8",
            assigned_quantity=10,
            planned_hours=0.1,
            required_workers=5,
            allocated_workers=8,
            default_capacity=8,
            surplus_workers=3,
        )
        outcome = optimize_capacities(period, [overtime])

        assert outcome.overrides == []
        assert outcome.updated_assignments[0].allocated_workers == 8

    def test_optimization_note(self):
        assert optimization_note(WorkType.SHIFT_2, 4, 2) == "Shift Shift2 optimized: 4 workers (saved 2)"
