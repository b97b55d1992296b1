"""Errors raised while building benefit schedules.

Every error here is fatal for a pipeline run: the run stops and the
files for the year being processed are not written.
"""


class ScheduleError(Exception):
    """Base class for benefit-schedule pipeline errors."""


class ConfigError(ScheduleError):
    """Invalid or unreadable pipeline configuration."""


class GenerationError(ScheduleError):
    """Invalid earnings-grid parameters (dependent count, year, axis)."""


class CalculatorError(ScheduleError):
    """The external tax calculator could not be reached or failed."""


class AdapterTimeoutError(CalculatorError):
    """The external tax calculator did not answer within the timeout."""


class AdapterMismatchError(ScheduleError):
    """The calculator returned a different number of rows than submitted."""

    def __init__(self, submitted: int, received: int):
        self.submitted = submitted
        self.received = received
        super().__init__(
            f"Tax calculator returned {received:,} rows for {submitted:,} submitted"
        )


class ReshapeConflictError(ScheduleError):
    """Duplicate (year, earnings, dependent_count) keys in a long-form schedule."""

    def __init__(self, duplicates):
        self.duplicates = duplicates
        super().__init__(
            f"{len(duplicates)} duplicate (year, earnings, dependent_count) keys; "
            f"first: {duplicates[0] if duplicates else None}"
        )
