"""Tests for demand record validation and the error taxonomy."""

import pytest

from labor_planner.models import DemandRecord, ModelReference, PlanningPeriod
from labor_planner.validation import (
    InvalidDemandError,
    PlanningError,
    check_demand_record,
    split_valid_demand,
)


class TestCheckDemandRecord:
    """Tests for check_demand_record."""

    def test_valid_record(self, period, make_demand):
        check_demand_record(make_demand("M1", 10), period)

    def test_zero_quantity(self, period, make_demand):
        with pytest.raises(InvalidDemandError, match="quantity must be positive"):
            check_demand_record(make_demand("M1", 0), period)

    def test_unresolved_reference(self, period):
        record = DemandRecord(model_name="M1", quantity=10, period=period)
        with pytest.raises(InvalidDemandError, match="not resolved"):
            check_demand_record(record, period)

    def test_mismatched_reference(self, period):
        record = DemandRecord(
            model_name="M1",
            quantity=10,
            period=period,
            model_reference=ModelReference(model_name="M2", sut_seconds=30, head_count=4),
        )
        with pytest.raises(InvalidDemandError) as exc_info:
            check_demand_record(record, period)
        assert exc_info.value.context["reference_model_name"] == "M2"

    def test_other_period(self, period, make_demand):
        record = make_demand("M1", 10, record_period=PlanningPeriod(month=1, year=2026))
        with pytest.raises(InvalidDemandError, match="different period"):
            check_demand_record(record, period)


class TestSplitValidDemand:
    """Tests for split_valid_demand."""

    def test_keeps_order_of_valid_records(self, period, make_demand):
        demand = [make_demand("A", 1), make_demand("BAD", 0), make_demand("B", 2)]

        valid, issues = split_valid_demand(demand, period)

        assert [r.model_name for r in valid] == ["A", "B"]
        assert [(i.model_name, i.quantity) for i in issues] == [("BAD", 0)]
        assert issues[0].reason == "Demand quantity must be positive"


class TestPlanningError:
    """Tests for error message formatting."""

    def test_context_in_message(self):
        error = PlanningError("Something failed", {"period": "2025-09"})

        assert error.message == "Something failed"
        assert "period: 2025-09" in str(error)

    def test_without_context(self):
        assert str(PlanningError("Plain")) == "Plain"
