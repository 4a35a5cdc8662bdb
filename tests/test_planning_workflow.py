"""Integration tests for the monthly planning workflow."""

import threading
import pytest

from labor_planner import PlanningConfig, PlanningWorkflow, PlanStore
from labor_planner.models import AllocationMethod, AssignmentKind, CapacityOverride, PlanningPeriod, WorkType
from labor_planner.persistence import PlanFile
from labor_planner.validation import ConfigurationMissingError
from labor_planner.workflows import PeriodLockRegistry


@pytest.fixture
def demand(make_demand):
    return [
        make_demand("A", 3000, head_count=5),
        make_demand("B", 2000, sut_seconds=54, head_count=3),
        make_demand("C", 400, sut_seconds=90, head_count=7),
    ]


@pytest.fixture
def lines(make_line):
    return [make_line("L6", 6), make_line("L8", 8), make_line("L10", 10)]


class TestPlanningConfig:
    """Tests for PlanningConfig."""

    def test_defaults(self):
        config = PlanningConfig()
        assert config.changeover_hours == pytest.approx(0.25)
        assert config.optimize_capacities
        assert not config.carry_forward_overrides
        assert config.plan_directory is None

    def test_negative_changeover_rejected(self):
        with pytest.raises(ValueError, match="changeover_hours"):
            PlanningConfig(changeover_hours=-0.1)

    def test_plan_directory_coerced_to_path(self, tmp_path):
        config = PlanningConfig(plan_directory=str(tmp_path))
        assert config.plan_directory == tmp_path


class TestPlanningWorkflow:
    """Tests for PlanningWorkflow.run."""

    def test_run_persists_optimized_plan(self, period, shift_definitions, demand, lines):
        store = PlanStore()
        workflow = PlanningWorkflow(store, shift_definitions)

        result = workflow.run(period, AllocationMethod.MULTI_SHIFT, demand, lines)

        assert result.is_fully_assigned()
        assert result.shift_capacities[WorkType.SHIFT_1] == pytest.approx(161.0)
        assert store.assignments_for(period) == result.assignments
        assert store.overrides_for(period)
        assert result.worker_optimization.total_workers_saved == sum(
            o.workers_saved for o in store.overrides_for(period)
        )

    def test_stored_assignments_are_optimized(self, period, shift_definitions, demand, lines):
        store = PlanStore()
        PlanningWorkflow(store, shift_definitions).run(period, AllocationMethod.MULTI_SHIFT, demand, lines)

        for override in store.overrides_for(period):
            members = [
                a for a in store.assignments_for(period)
                if a.line_id == override.line_id and a.work_type == override.work_type
            ]
            assert members
            assert max(a.required_workers for a in members) == override.required_workers
            assert all(a.allocated_workers == override.required_workers for a in members)

    def test_rerun_replaces_period(self, period, shift_definitions, demand, lines):
        store = PlanStore()
        workflow = PlanningWorkflow(store, shift_definitions)

        first = workflow.run(period, AllocationMethod.MULTI_SHIFT, demand, lines)
        second = workflow.run(period, AllocationMethod.MULTI_SHIFT, demand, lines)

        assert len(store.assignments_for(period)) == len(second.assignments) == len(first.assignments)
        assert len(store.overrides_for(period)) == len(first.worker_optimization.optimized_lines)

    def test_other_periods_untouched(self, period, shift_definitions, demand, lines):
        october = PlanningPeriod(month=10, year=2025)
        store = PlanStore()
        store.upsert_override(CapacityOverride(
            line_id="L8",
            period=october,
            work_type=WorkType.SHIFT_2,
            required_workers=4,
            default_capacity=8,
        ))

        PlanningWorkflow(store, shift_definitions).run(period, AllocationMethod.MULTI_SHIFT, demand, lines)

        assert len(store.overrides_for(october)) == 1

    def test_missing_shift_definition_leaves_store_intact(self, period, non_shift, shift_1, demand, lines):
        store = PlanStore()
        existing = CapacityOverride(
            line_id="L8",
            period=period,
            work_type=WorkType.SHIFT_1,
            required_workers=5,
            default_capacity=8,
        )
        store.upsert_override(existing)
        workflow = PlanningWorkflow(store, [non_shift, shift_1])

        with pytest.raises(ConfigurationMissingError):
            workflow.run(period, AllocationMethod.MULTI_SHIFT, demand, lines)

        assert store.overrides_for(period) == [existing]

    def test_failed_plan_file_write_leaves_store_intact(self, tmp_path, period, shift_definitions, demand, lines):
        """Test an unwritable plan directory aborts the run before the store changes."""
        store = PlanStore()
        existing = CapacityOverride(
            line_id="L8",
            period=period,
            work_type=WorkType.SHIFT_1,
            required_workers=5,
            default_capacity=8,
        )
        store.upsert_override(existing)

        # A regular file where the plan directory should be
        blocker = tmp_path / "plans"
        blocker.write_text("not a directory")
        config = PlanningConfig(plan_directory=blocker)

        with pytest.raises(OSError):
            PlanningWorkflow(store, shift_definitions, config).run(
                period, AllocationMethod.MULTI_SHIFT, demand, lines,
            )

        assert store.assignments_for(period) == []
        assert store.overrides_for(period) == [existing]

    def test_non_shift_method(self, period, shift_definitions, make_demand, lines):
        store = PlanStore()
        workflow = PlanningWorkflow(store, shift_definitions)

        # Far more than 3 lines x ~181h of NonShift capacity
        result = workflow.run(
            period,
            AllocationMethod.NON_SHIFT_WITH_OVERTIME,
            [make_demand("A", 80000, head_count=5)],
            lines,
        )

        assert set(result.shift_capacities) == {WorkType.NON_SHIFT}
        assert result.required_overtime_hours > 0
        assert result.required_overtime_hours == pytest.approx(
            sum(u.required_hours for u in result.unassigned)
        )
        assert store.assignments_for(period, AssignmentKind.OVERTIME) == []

    def test_optimizer_can_be_disabled(self, period, shift_definitions, demand, lines):
        store = PlanStore()
        config = PlanningConfig(optimize_capacities=False)

        result = PlanningWorkflow(store, shift_definitions, config).run(
            period, AllocationMethod.MULTI_SHIFT, demand, lines,
        )

        assert store.overrides_for(period) == []
        assert result.worker_optimization.total_workers_saved == 0

    def test_carry_forward_overrides(self, period, shift_definitions, demand, lines):
        store = PlanStore()
        PlanningWorkflow(store, shift_definitions).run(period, AllocationMethod.MULTI_SHIFT, demand, lines)
        previous = {(o.line_id, o.work_type): o.required_workers for o in store.overrides_for(period)}

        config = PlanningConfig(carry_forward_overrides=True)
        result = PlanningWorkflow(store, shift_definitions, config).run(
            period, AllocationMethod.MULTI_SHIFT, demand, lines,
        )

        for a in result.assignments:
            cap = previous.get((a.line_id, a.work_type))
            if cap is not None:
                assert a.allocated_workers <= cap

    def test_plan_file_written(self, tmp_path, period, shift_definitions, demand, lines):
        config = PlanningConfig(plan_directory=tmp_path)
        result = PlanningWorkflow(PlanStore(), shift_definitions, config).run(
            period, AllocationMethod.MULTI_SHIFT, demand, lines,
        )

        plan_file = PlanFile.for_period(tmp_path, period, AllocationMethod.MULTI_SHIFT)
        assert plan_file.exists()
        loaded = plan_file.load()
        assert len(loaded.assignments) == len(result.assignments)
        assert loaded.worker_optimization.total_workers_saved == result.worker_optimization.total_workers_saved


class TestPeriodLocks:
    """Tests for per-period locking."""

    def test_same_period_same_lock(self):
        registry = PeriodLockRegistry()
        assert registry.lock_for(PlanningPeriod(month=9, year=2025)) is registry.lock_for(
            PlanningPeriod(month=9, year=2025)
        )

    def test_different_periods_different_locks(self):
        registry = PeriodLockRegistry()
        assert registry.lock_for(PlanningPeriod(month=9, year=2025)) is not registry.lock_for(
            PlanningPeriod(month=10, year=2025)
        )

    def test_concurrent_runs_do_not_interleave(self, period, shift_definitions, demand, lines):
        """Test two runs of one period leave exactly one run's results."""
        store = PlanStore()
        workflow = PlanningWorkflow(store, shift_definitions)
        results = []
        errors = []

        def run():
            try:
                results.append(workflow.run(period, AllocationMethod.MULTI_SHIFT, demand, lines))
            except Exception as e:  # surfaced by the assertion below
                errors.append(e)

        threads = [threading.Thread(target=run) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(results) == 2
        assert len(store.assignments_for(period)) == len(results[0].assignments)
