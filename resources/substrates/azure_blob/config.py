"""Configuration model for the Azure blob substrate."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from packages.blobfs_shared.config import BlobfsSettings, resolve_component_settings
from resources.substrates.azure_blob.component import RESOURCE_COMPONENT_ID


class AzureBlobSettings(BaseModel):
    """Connection settings for one Azure Blob Storage container."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    container: str = ""
    connection_string: str | None = None
    account_url: str | None = None
    credential: str | None = None

    @field_validator("connection_string", "account_url", "credential")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        """Treat blank optional strings as unset."""
        if value is None:
            return None
        normalized = value.strip()
        return normalized or None

    @model_validator(mode="after")
    def _validate_fields(self) -> "AzureBlobSettings":
        """Validate container naming when one is configured."""
        container = self.container.strip()
        if container and container != container.lower():
            raise ValueError("azure_blob.container must be lowercase")
        return self

    def require_connection(self) -> None:
        """Raise when the settings cannot produce a usable client."""
        if self.container.strip() == "":
            raise ValueError("azure_blob.container is required")
        if self.connection_string is None and self.account_url is None:
            raise ValueError(
                "azure_blob.connection_string or azure_blob.account_url is required"
            )


def resolve_azure_blob_settings(settings: BlobfsSettings) -> AzureBlobSettings:
    """Resolve substrate settings from ``components.substrate.azure_blob``."""
    return resolve_component_settings(
        settings=settings,
        component_id=str(RESOURCE_COMPONENT_ID),
        model=AzureBlobSettings,
    )
