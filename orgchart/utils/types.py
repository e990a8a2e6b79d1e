"""Shared type definitions for the pipeline."""

from datetime import date
from enum import StrEnum

type EmployeeID = int
type SalaryAmount = float
type ManagerRef = int | None
type DateOfJoining = date | None
type ValidationOutcome = dict[str, bool | str | list[str]]
type DomainResult = dict[str, str | int | list[str]]


class ErrorKind(StrEnum):
    MALFORMED_INPUT = "malformed-input"
    REFERENTIAL_INTEGRITY = "referential-integrity"
    NOT_FOUND = "not-found"
    INVALID_ARGUMENT = "invalid-argument"
    IO = "io"
    CONFIG = "config"


class TabularFormat(StrEnum):
    EXCEL = "excel"
    CSV = "csv"
