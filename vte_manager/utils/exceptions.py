"""
Custom Exception Hierarchy

Provides specific exception types for the error categories the assessment
engine and its sinks can raise, with structured error information.

Unknown checklist selections and failed transmissions are deliberately NOT
exceptions: the former are logged and ignored by the scorer, the latter are
reported as a TransmissionResult by the sheet sink.
"""
from typing import Optional, Dict, Any


class VTEManagerError(Exception):
    """Base exception for all VTE manager errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class InvalidInputError(VTEManagerError):
    """A value is outside its clinical range or cannot be parsed."""

    def __init__(
        self,
        message: str,
        field: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="INVALID_INPUT",
            details={"field": field, **(details or {})}
        )
        self.field = field


class ConfigurationMissingError(VTEManagerError):
    """A required setting (e.g. the sheet endpoint) is not configured."""

    def __init__(
        self,
        message: str,
        setting: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="CONFIGURATION_MISSING",
            details={"setting": setting, **(details or {})}
        )
        self.setting = setting
