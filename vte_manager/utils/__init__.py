"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, mask_identifier, setup_logging
from .exceptions import (
    VTEManagerError,
    InvalidInputError,
    ConfigurationMissingError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "mask_identifier",
    "VTEManagerError",
    "InvalidInputError",
    "ConfigurationMissingError",
]
