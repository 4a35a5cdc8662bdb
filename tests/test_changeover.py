"""
Tests for line-shift changeover tracking.

This module tests:
- ChangeoverTracker rules (empty line-shift, repeated model, new model)
- Independence of line-shifts
"""

import pytest

from labor_planner.models import WorkType
from labor_planner.production import ChangeoverTracker
from labor_planner.production.constants import CHANGEOVER_TIME_HOURS


class TestChangeoverTracker:
    """Tests for ChangeoverTracker."""

    def test_default_changeover_is_fifteen_minutes(self):
        assert CHANGEOVER_TIME_HOURS == pytest.approx(0.25)
        assert ChangeoverTracker().default_changeover_hours == pytest.approx(0.25)

    def test_negative_changeover_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            ChangeoverTracker(changeover_hours=-0.5)

    def test_empty_line_shift_zero_changeover(self):
        """Test first model on a line-shift pays nothing."""
        tracker = ChangeoverTracker()
        assert tracker.changeover_hours("L1", WorkType.SHIFT_1, "A") == 0.0

    def test_same_model_zero_changeover(self):
        tracker = ChangeoverTracker()
        tracker.record("L1", WorkType.SHIFT_1, "A")

        assert tracker.changeover_hours("L1", WorkType.SHIFT_1, "A") == 0.0

    def test_new_model_pays_changeover(self):
        tracker = ChangeoverTracker()
        tracker.record("L1", WorkType.SHIFT_1, "A")

        assert tracker.changeover_hours("L1", WorkType.SHIFT_1, "B") == pytest.approx(0.25)

    def test_line_shifts_are_independent(self):
        """Test models on one shift don't affect another shift or line."""
        tracker = ChangeoverTracker()
        tracker.record("L1", WorkType.SHIFT_1, "A")

        assert tracker.changeover_hours("L1", WorkType.SHIFT_2, "B") == 0.0
        assert tracker.changeover_hours("L2", WorkType.SHIFT_1, "B") == 0.0

    def test_custom_changeover(self):
        tracker = ChangeoverTracker(changeover_hours=0.5)
        tracker.record("L1", WorkType.SHIFT_3, "A")

        assert tracker.changeover_hours("L1", WorkType.SHIFT_3, "B") == 0.5

    def test_repeated_model_stays_free(self):
        """Test a model placed again after a changeover pays nothing."""
        tracker = ChangeoverTracker()
        tracker.record("L1", WorkType.SHIFT_1, "A")
        tracker.record("L1", WorkType.SHIFT_1, "B")

        assert tracker.changeover_hours("L1", WorkType.SHIFT_1, "A") == 0.0
        assert tracker.changeover_hours("L1", WorkType.SHIFT_1, "B") == 0.0
        assert tracker.changeover_hours("L1", WorkType.SHIFT_1, "C") == pytest.approx(0.25)
