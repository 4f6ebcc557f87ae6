"""Shared error code constants attached to normalized blob store failures."""

# Request rejected by the blob service or by local validation.
INVALID_ARGUMENT = "INVALID_ARGUMENT"

RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

# Concurrent writers and conditional requests.
CONFLICT = "CONFLICT"
PRECONDITION_FAILED = "PRECONDITION_FAILED"

# Credentials and container access policy.
PERMISSION_DENIED = "PERMISSION_DENIED"
UNAUTHENTICATED = "UNAUTHENTICATED"

# Blob service or network failures.
DEPENDENCY_FAILURE = "DEPENDENCY_FAILURE"
DEPENDENCY_TIMEOUT = "DEPENDENCY_TIMEOUT"
DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"

NOT_SUPPORTED = "NOT_SUPPORTED"
UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"
