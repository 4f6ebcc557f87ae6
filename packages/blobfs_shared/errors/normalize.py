"""Exception normalization utilities for shared error contracts."""

from __future__ import annotations

from typing import Mapping

from . import codes
from .types import ErrorCategory, ErrorDetail

# Status codes worth retrying against the blob service.
_RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


def exception_to_error(exc: BaseException) -> ErrorDetail:
    """Normalize a Python exception into a shared ``ErrorDetail``.

    HTTP-style exceptions are recognized by an integer ``status_code``
    attribute, which covers ``azure.core.exceptions.HttpResponseError``
    without importing the SDK here. Everything else falls back to builtin
    exception types.
    """
    metadata = {"exception_type": type(exc).__name__}
    message = str(exc)

    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int):
        metadata["status_code"] = str(status_code)
        return status_to_error(status_code, message=message, metadata=metadata)

    if isinstance(exc, NotImplementedError):
        return _detail(
            ErrorCategory.INTERNAL,
            codes.NOT_SUPPORTED,
            message or "operation not supported",
            metadata=metadata,
        )
    if isinstance(exc, ValueError):
        return _detail(
            ErrorCategory.VALIDATION, codes.INVALID_ARGUMENT, message, metadata=metadata
        )
    if isinstance(exc, KeyError):
        return _detail(
            ErrorCategory.NOT_FOUND, codes.RESOURCE_NOT_FOUND, message, metadata=metadata
        )
    if isinstance(exc, PermissionError):
        return _detail(
            ErrorCategory.POLICY, codes.PERMISSION_DENIED, message, metadata=metadata
        )
    if isinstance(exc, TimeoutError):
        return _detail(
            ErrorCategory.DEPENDENCY,
            codes.DEPENDENCY_TIMEOUT,
            message or "dependency timeout",
            retryable=True,
            metadata=metadata,
        )
    if isinstance(exc, ConnectionError):
        return _detail(
            ErrorCategory.DEPENDENCY,
            codes.DEPENDENCY_UNAVAILABLE,
            message or "dependency unavailable",
            retryable=True,
            metadata=metadata,
        )
    return _detail(
        ErrorCategory.INTERNAL,
        codes.UNEXPECTED_EXCEPTION,
        message or "unexpected exception",
        metadata=metadata,
    )


def status_to_error(
    status_code: int,
    *,
    message: str = "",
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Map one blob service HTTP status code onto the shared error taxonomy."""
    if status_code == 404:
        category, code, fallback = (
            ErrorCategory.NOT_FOUND,
            codes.RESOURCE_NOT_FOUND,
            "blob not found",
        )
    elif status_code == 401:
        category, code, fallback = (
            ErrorCategory.POLICY,
            codes.UNAUTHENTICATED,
            "unauthenticated",
        )
    elif status_code == 403:
        category, code, fallback = (
            ErrorCategory.POLICY,
            codes.PERMISSION_DENIED,
            "permission denied",
        )
    elif status_code == 409:
        category, code, fallback = ErrorCategory.CONFLICT, codes.CONFLICT, "conflict"
    elif status_code == 412:
        category, code, fallback = (
            ErrorCategory.CONFLICT,
            codes.PRECONDITION_FAILED,
            "precondition failed",
        )
    elif status_code >= 500:
        category, code, fallback = (
            ErrorCategory.DEPENDENCY,
            codes.DEPENDENCY_FAILURE,
            "blob service failure",
        )
    elif status_code >= 400:
        category, code, fallback = (
            ErrorCategory.VALIDATION,
            codes.INVALID_ARGUMENT,
            "request rejected",
        )
    else:
        category, code, fallback = (
            ErrorCategory.INTERNAL,
            codes.UNEXPECTED_EXCEPTION,
            "unexpected status",
        )
    return _detail(
        category,
        code,
        message or fallback,
        retryable=status_code in _RETRYABLE_STATUS_CODES,
        metadata=metadata,
    )


def _detail(
    category: ErrorCategory,
    code: str,
    message: str,
    *,
    retryable: bool = False,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    return ErrorDetail(
        code=code,
        message=message,
        category=category,
        retryable=retryable,
        metadata=dict(metadata or {}),
    )
