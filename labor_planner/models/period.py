"""Planning period model (one calendar month)."""

import calendar
from datetime import date as Date
from pydantic import BaseModel, ConfigDict, Field


class PlanningPeriod(BaseModel):
    """
    A calendar month that demand, assignments and overrides are scoped to.

    Periods are immutable and hashable so they can key dictionaries and
    per-period locks.

    Attributes:
        month: Calendar month (1-12)
        year: Calendar year

    Example:
        period = PlanningPeriod(month=9, year=2025)
        assert period.key == "2025-09"
        assert period.regular_days == 18
        assert period.friday_days == 4
    """
    model_config = ConfigDict(frozen=True)

    month: int = Field(..., description="Calendar month", ge=1, le=12)
    year: int = Field(..., description="Calendar year", ge=1900, le=9999)

    @property
    def key(self) -> str:
        """Stable string key, e.g. '2025-09'."""
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def month_label(self) -> str:
        """Zero-padded month as stored by the ingestion side, e.g. '09'."""
        return f"{self.month:02d}"

    @property
    def num_days(self) -> int:
        """Number of calendar days in the month."""
        return calendar.monthrange(self.year, self.month)[1]

    def dates(self) -> list[Date]:
        """All dates in the month, in order."""
        return [Date(self.year, self.month, day) for day in range(1, self.num_days + 1)]

    def count_weekdays(self, weekdays: frozenset[int] | set[int]) -> int:
        """
        Count dates whose weekday (Monday=0) is in the given set.

        Args:
            weekdays: Weekday numbers to count

        Returns:
            Number of matching dates in the month
        """
        return sum(1 for day in self.dates() if day.weekday() in weekdays)

    @property
    def regular_days(self) -> int:
        """Monday to Thursday dates in the month."""
        return self.count_weekdays({0, 1, 2, 3})

    @property
    def friday_days(self) -> int:
        """Fridays in the month."""
        return self.count_weekdays({4})

    def __str__(self) -> str:
        """String representation."""
        return self.key
