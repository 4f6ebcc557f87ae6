"""Azure container client construction helpers."""

from __future__ import annotations

from azure.storage.blob import ContainerClient

from resources.substrates.azure_blob.config import AzureBlobSettings


def create_container_client(settings: AzureBlobSettings) -> ContainerClient:
    """Construct a container client from a connection string or account URL."""
    settings.require_connection()
    if settings.connection_string is not None:
        return ContainerClient.from_connection_string(
            settings.connection_string,
            container_name=settings.container,
        )
    return ContainerClient(
        account_url=str(settings.account_url),
        container_name=settings.container,
        credential=settings.credential,
    )
