"""
errors.py
---------
Exceptions raised by the filter compiler and the incident lifecycle.
Store failures are not wrapped: they stay SQLAlchemyError all the way up.
"""


class CrimeApiError(Exception):
    """Base class for errors this service raises on purpose."""


class InvalidParameterError(CrimeApiError, ValueError):
    """A query parameter or body field could not be parsed."""

    def __init__(self, param, value, reason=None):
        self.param = param
        self.value = value
        message = f"Invalid value {value!r} for parameter '{param}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class IncidentConflictError(CrimeApiError):
    """The case number is in the wrong state for the requested change."""

    def __init__(self, case_number):
        self.case_number = case_number
        super().__init__(f"{self.__class__.__name__}: case number {case_number!r}")


class IncidentExistsError(IncidentConflictError):
    """Create was asked for a case number that is already stored."""


class IncidentNotFoundError(IncidentConflictError):
    """Remove was asked for a case number that is not stored."""
