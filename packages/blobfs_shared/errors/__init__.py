"""Public shared error API for blobfs components."""

from . import codes
from .normalize import exception_to_error, status_to_error
from .types import ErrorCategory, ErrorDetail

__all__ = [
    "ErrorCategory",
    "ErrorDetail",
    "codes",
    "exception_to_error",
    "status_to_error",
]
