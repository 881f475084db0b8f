"""Exception hierarchy shared by the generator, the service layer and the CLI."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single field-level configuration problem."""

    field: str = Field(..., description="Wire (camelCase) name of the offending field")
    message: str = Field(..., description="Human-readable explanation")


class GovgenError(Exception):
    """Base class for every error raised by govgen."""


class ConfigurationError(GovgenError):
    """Raised when a configuration payload fails validation.

    Carries the complete list of issues found; validation never stops at the
    first problem.
    """

    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        summary = "; ".join(f"{i.field}: {i.message}" for i in issues)
        super().__init__(f"Invalid configuration ({len(issues)} issue(s)): {summary}")


class UnsupportedCombinationError(GovgenError):
    """Raised when individually valid axis values cannot be combined."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class UnsupportedAxisValueError(GovgenError):
    """Raised when the variant tables have no entry for an axis value."""

    def __init__(self, axis: str, value: object) -> None:
        self.axis = axis
        self.value = value
        super().__init__(f"No variant registered for {axis}={value!r}")


class OverrideConsistencyError(GovgenError):
    """An emitted override list disagrees with the active inheritance set.

    This indicates a defect in the variant tables; it is never caught.
    """


class CalldataEncodingError(GovgenError):
    """Raised when a call argument cannot be ABI-encoded."""

    def __init__(self, parameter: str, message: str) -> None:
        self.parameter = parameter
        super().__init__(f"Parameter {parameter}: {message}")
