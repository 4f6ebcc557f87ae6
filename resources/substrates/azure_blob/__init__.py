"""Azure blob substrate resource exports."""

from resources.substrates.azure_blob.azure_blob_substrate import (
    AzureContainerBlobClient,
)
from resources.substrates.azure_blob.component import MANIFEST, RESOURCE_COMPONENT_ID
from resources.substrates.azure_blob.config import (
    AzureBlobSettings,
    resolve_azure_blob_settings,
)
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
    ProbeOutcome,
    UploadResult,
)

__all__ = [
    "MANIFEST",
    "RESOURCE_COMPONENT_ID",
    "AzureBlobHealthStatus",
    "AzureBlobSettings",
    "AzureContainerBlobClient",
    "BlobClient",
    "BlobDownload",
    "BlobItem",
    "BlobListing",
    "BlobPrefix",
    "BlobProbe",
    "BlobProperties",
    "CreateBlobOptions",
    "ProbeOutcome",
    "UploadResult",
    "resolve_azure_blob_settings",
]
