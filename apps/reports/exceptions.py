"""
Domain exceptions for reports app.

Exception Hierarchy:
    ReportsServiceError (base)
    └── InvalidDateRangeError
"""


class ReportsServiceError(Exception):
    """Base exception for all report errors."""

    pass


class InvalidDateRangeError(ReportsServiceError):
    """
    Raised when a report range is invalid.

    Either start_date is after end_date, or the range is longer than a
    year.
    """

    pass
