"""Key/path helpers for mapping filesystem paths onto flat blob keys."""

from __future__ import annotations

SEPARATOR = "/"


def normalize_path_prefix(value: str | None) -> str:
    """Return a root prefix with exactly one trailing separator, or ``""``."""
    if value is None:
        return ""
    trimmed = value.strip().strip(SEPARATOR)
    if trimmed == "":
        return ""
    return f"{trimmed}{SEPARATOR}"


def apply_path_prefix(prefix: str, path: str) -> str:
    """Prefix one caller path with the normalized root prefix."""
    return f"{prefix}{path.lstrip(SEPARATOR)}"


def remove_path_prefix(prefix: str, key: str) -> str:
    """Strip the normalized root prefix from one blob key.

    Keys outside the prefix are returned unchanged.
    """
    if prefix and key.startswith(prefix):
        return key[len(prefix) :]
    return key


def as_directory_prefix(key: str) -> str:
    """Return a listing prefix that matches only keys below ``key``."""
    if key == "" or key.endswith(SEPARATOR):
        return key
    return f"{key}{SEPARATOR}"


def dirname(path: str) -> str:
    """Return the parent path of ``path``, ``""`` for top-level entries."""
    trimmed = path.strip(SEPARATOR)
    parent, separator, _ = trimmed.rpartition(SEPARATOR)
    if not separator:
        return ""
    return parent


def join(*segments: str) -> str:
    """Join non-empty path segments with the key separator."""
    return SEPARATOR.join(
        segment.strip(SEPARATOR) for segment in segments if segment.strip(SEPARATOR)
    )
