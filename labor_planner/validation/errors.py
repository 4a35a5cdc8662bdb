"""Planning error taxonomy.

Insufficient capacity is not an error: it is reported structurally as
UnassignedDemand entries on the allocation result.
"""

from typing import Optional, Dict


class PlanningError(Exception):
    """Base exception for planning errors with context."""

    def __init__(self, message: str, context: Optional[Dict] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with context."""
        msg = self.message
        if self.context:
            msg += "\n\nContext:"
            for key, value in self.context.items():
                msg += f"\n  {key}: {value}"
        return msg


class ConfigurationMissingError(PlanningError):
    """A shift definition or shift capacity required by the run does not exist.

    Fatal for the run; the caller fixes the configuration and re-runs.
    """


class MisconfiguredShiftError(ConfigurationMissingError):
    """Deductions exceed the shift's gross duration (negative net minutes)."""


class InvalidDemandError(PlanningError):
    """A demand record has non-positive quantity or an unresolved model reference.

    The engine skips the record, reports it as a warning and keeps going.
    """
