"""Org-chart exception hierarchy.

Every error carries an ``ErrorKind`` so the delivery layer can map a failure
to a response without inspecting messages.
"""

from orgchart.utils.types import EmployeeID, ErrorKind


class OrgChartError(Exception):
    """Base exception for all pipeline failures."""

    kind: ErrorKind


class InvalidEmployeeDataError(OrgChartError):
    """Raised when an import is rejected; nothing from the batch is persisted."""


class MalformedInputError(InvalidEmployeeDataError):
    """Raised for missing or mistyped cells in a tabular payload."""

    kind = ErrorKind.MALFORMED_INPUT


class ReferentialIntegrityError(InvalidEmployeeDataError):
    """Raised when a manager link cannot be resolved inside the batch."""

    kind = ErrorKind.REFERENTIAL_INTEGRITY

    def __init__(self, message: str, manager_id: EmployeeID, employee_id: EmployeeID) -> None:
        super().__init__(message)
        self.manager_id = manager_id
        self.employee_id = employee_id


class EmployeeNotFoundError(OrgChartError):
    """Raised when a requested employee is absent from the snapshot."""

    kind = ErrorKind.NOT_FOUND


class InvalidArgumentError(OrgChartError, ValueError):
    """Raised for caller errors detected before a query runs."""

    kind = ErrorKind.INVALID_ARGUMENT


class FileProcessingError(OrgChartError):
    """Raised when reading a payload or writing an export fails at the I/O level."""

    kind = ErrorKind.IO


class ConfigError(OrgChartError):
    """Raised for invalid runtime configuration."""

    kind = ErrorKind.CONFIG
