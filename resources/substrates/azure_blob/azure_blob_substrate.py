"""Concrete blob substrate implementation using azure-storage-blob."""

from __future__ import annotations

import io
from typing import Any, BinaryIO

from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from azure.storage.blob import BlobPrefix as AzureBlobPrefix
from azure.storage.blob import ContentSettings

from packages.blobfs_shared.logging import get_logger, public_api_instrumented
from resources.substrates.azure_blob.client import create_container_client
from resources.substrates.azure_blob.component import RESOURCE_COMPONENT_ID
from resources.substrates.azure_blob.config import AzureBlobSettings
from resources.substrates.azure_blob.substrate import (
    AzureBlobHealthStatus,
    BlobClient,
    BlobDownload,
    BlobItem,
    BlobListing,
    BlobPrefix,
    BlobProbe,
    BlobProperties,
    CreateBlobOptions,
    UploadResult,
)

_LOGGER = get_logger(__name__)


class AzureContainerBlobClient(BlobClient):
    """Blob client bound to one Azure Blob Storage container."""

    def __init__(self, *, settings: AzureBlobSettings) -> None:
        self._settings = settings
        self._client = create_container_client(settings)

    @property
    def container(self) -> str:
        """Return the configured container name."""
        return self._settings.container

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
    )
    def health(self) -> AzureBlobHealthStatus:
        """Return readiness based on a container existence probe."""
        try:
            exists = self._client.exists()
        except Exception as exc:  # noqa: BLE001
            return AzureBlobHealthStatus(
                ready=False,
                detail=f"azure blob probe failed: {type(exc).__name__}",
            )
        if not exists:
            return AzureBlobHealthStatus(
                ready=False,
                detail=f"container does not exist: {self.container}",
            )
        return AzureBlobHealthStatus(ready=True, detail="ok")

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("key",),
    )
    def create_or_replace_blob(
        self,
        *,
        key: str,
        content: bytes | BinaryIO,
        options: CreateBlobOptions,
    ) -> UploadResult:
        """Upload one block blob, overwriting any existing blob at ``key``."""
        blob = self._client.get_blob_client(key)
        response = blob.upload_blob(
            content,
            overwrite=True,
            content_settings=_content_settings(options),
            metadata=dict(options.metadata) or None,
        )
        return UploadResult(last_modified=response["last_modified"])

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("key",),
    )
    def get_blob(self, *, key: str) -> BlobDownload:
        """Start one download and return properties with an undrained stream."""
        downloader = self._client.download_blob(key)
        return BlobDownload(
            properties=_blob_properties(downloader.properties),
            content_stream=io.BufferedReader(_DownloaderReader(downloader)),
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("key",),
    )
    def get_blob_metadata(self, *, key: str) -> BlobProbe:
        """Probe one blob, tagging 404 as not-found and other failures as errors."""
        try:
            properties = self._client.get_blob_client(key).get_blob_properties()
        except HttpResponseError as exc:
            if isinstance(exc, ResourceNotFoundError) or exc.status_code == 404:
                return BlobProbe.not_found()
            return BlobProbe.failed(error=exc, status_code=exc.status_code)
        return BlobProbe.found(_blob_properties(properties))

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("key",),
    )
    def get_blob_properties(self, *, key: str) -> BlobProperties:
        """Fetch one blob's properties."""
        properties = self._client.get_blob_client(key).get_blob_properties()
        return _blob_properties(properties)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("key",),
    )
    def delete_blob(self, *, key: str) -> None:
        """Delete one blob."""
        self._client.delete_blob(key)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("dest_key", "src_key"),
    )
    def copy_blob(self, *, dest_key: str, src_key: str) -> None:
        """Start a server-side copy from ``src_key`` to ``dest_key``."""
        source_url = self._client.get_blob_client(src_key).url
        self._client.get_blob_client(dest_key).start_copy_from_url(source_url)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("prefix",),
    )
    def list_blobs(self, *, prefix: str, delimiter: str | None = None) -> BlobListing:
        """List blobs under ``prefix``, optionally grouped by ``delimiter``."""
        name_starts_with = prefix or None
        if delimiter is None:
            items: Any = self._client.list_blobs(name_starts_with=name_starts_with)
        else:
            items = self._client.walk_blobs(
                name_starts_with=name_starts_with,
                delimiter=delimiter,
            )

        blobs: list[BlobItem] = []
        prefixes: list[BlobPrefix] = []
        for item in items:
            if isinstance(item, AzureBlobPrefix):
                prefixes.append(BlobPrefix(name=item.name))
                continue
            blobs.append(BlobItem(name=item.name, properties=_blob_properties(item)))
        return BlobListing(blobs=tuple(blobs), prefixes=tuple(prefixes))


class _DownloaderReader(io.RawIOBase):
    """Read-only raw stream over an SDK ``StorageStreamDownloader``."""

    def __init__(self, downloader: Any) -> None:
        self._downloader = downloader

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Any) -> int:
        data = self._downloader.read(len(buffer))
        size = len(data)
        buffer[:size] = data
        return size


def _content_settings(options: CreateBlobOptions) -> ContentSettings | None:
    """Map upload options onto SDK content settings when any header is set."""
    headers = {
        "content_type": options.content_type,
        "cache_control": options.cache_control,
        "content_language": options.content_language,
        "content_encoding": options.content_encoding,
    }
    if all(value is None for value in headers.values()):
        return None
    return ContentSettings(**headers)


def _blob_properties(properties: Any) -> BlobProperties:
    """Map SDK blob properties onto the substrate contract."""
    content_settings = getattr(properties, "content_settings", None)
    return BlobProperties(
        last_modified=properties.last_modified,
        content_type=getattr(content_settings, "content_type", None),
        content_length=getattr(properties, "size", None),
    )
