from typing import Optional


class DashboardError(Exception):
    """Base class for failures that reach the presentation layer."""

    user_message = "Unexpected dashboard error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.user_message)


class MissingDateRange(DashboardError, ValueError):
    user_message = "Please select a date range"


class FetchError(DashboardError):
    user_message = "Failed to load vehicle count data"

    def __init__(self, message: Optional[str] = None, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause
