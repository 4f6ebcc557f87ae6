"""Pydantic settings for the blob storage adapter component."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from packages.blobfs_shared.blob_paths import normalize_path_prefix
from packages.blobfs_shared.config import BlobfsSettings, resolve_component_settings
from resources.adapters.blob_storage.adapter import RecursiveListingMode
from resources.adapters.blob_storage.component import RESOURCE_COMPONENT_ID


class BlobStorageAdapterSettings(BaseModel):
    """Adapter runtime settings for root namespace and listing behavior."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    prefix: str = ""
    recursive_listing: RecursiveListingMode = RecursiveListingMode.IGNORE

    @field_validator("prefix", mode="before")
    @classmethod
    def _normalize_prefix(cls, value: object) -> str:
        """Normalize the root prefix to ``""`` or ``"<segments>/"``."""
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValueError("prefix must be a string")
        return normalize_path_prefix(value)


def resolve_blob_storage_adapter_settings(
    settings: BlobfsSettings,
) -> BlobStorageAdapterSettings:
    """Resolve adapter settings from ``components.adapter.blob_storage``."""
    return resolve_component_settings(
        settings=settings,
        component_id=str(RESOURCE_COMPONENT_ID),
        model=BlobStorageAdapterSettings,
    )
