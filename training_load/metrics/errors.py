"""Error types for the analytics engine.

InsufficientDataError is a state (expected condition), not a fault: callers
render an explanatory empty state for it and should not log it as an error.
"""


class AnalyticsError(RuntimeError):
    """Base class for analytics engine errors."""


class InsufficientDataError(AnalyticsError):
    """Raised when the history is too thin to produce a meaningful TSB."""


class InvalidRangeError(AnalyticsError, ValueError):
    """Raised for an inverted date range or a non-positive window size.

    Rejected before any computation, so no partial output exists.
    """


class MalformedRecordError(AnalyticsError, ValueError):
    """Raised for a single unusable workout record.

    Aggregators catch this per record and skip it; it never fails a request.
    """

    def __init__(self, message: str, workout_id: str | None = None):
        super().__init__(message)
        self.workout_id = workout_id


class UpstreamUnavailableError(AnalyticsError):
    """Raised by a workout provider when the history source cannot be read.

    Propagated to the caller unchanged; retry is the provider's concern.
    """
