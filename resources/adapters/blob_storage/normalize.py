"""Blob property normalization into filesystem records."""

from __future__ import annotations

from datetime import datetime, timezone

from packages.blobfs_shared.blob_paths import dirname
from resources.adapters.blob_storage.adapter import FileMetadata
from resources.substrates.azure_blob.substrate import BlobProperties


def to_unix_timestamp(value: datetime) -> int:
    """Return epoch seconds for one last-modified value, treating naive as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


def normalize_blob_properties(path: str, properties: BlobProperties) -> FileMetadata:
    """Build the full file record for one unprefixed path and its properties."""
    return FileMetadata(
        path=path,
        timestamp=to_unix_timestamp(properties.last_modified),
        dirname=dirname(path),
        mimetype=properties.content_type,
        size=properties.content_length,
    )
