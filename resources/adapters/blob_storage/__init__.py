"""Blob storage filesystem adapter resource exports."""

from resources.adapters.blob_storage.adapter import (
    DirectoryEntry,
    FileMetadata,
    FilesystemAdapter,
    ListingEntry,
    RecursiveListingMode,
    VisibilityNotSupportedError,
    WriteOptions,
)
from resources.adapters.blob_storage.blob_storage_adapter import BlobStorageAdapter
from resources.adapters.blob_storage.component import MANIFEST, RESOURCE_COMPONENT_ID
from resources.adapters.blob_storage.config import (
    BlobStorageAdapterSettings,
    resolve_blob_storage_adapter_settings,
)
from resources.adapters.blob_storage.listing import emulate_directories

__all__ = [
    "MANIFEST",
    "RESOURCE_COMPONENT_ID",
    "BlobStorageAdapter",
    "BlobStorageAdapterSettings",
    "DirectoryEntry",
    "FileMetadata",
    "FilesystemAdapter",
    "ListingEntry",
    "RecursiveListingMode",
    "VisibilityNotSupportedError",
    "WriteOptions",
    "emulate_directories",
    "resolve_blob_storage_adapter_settings",
]
