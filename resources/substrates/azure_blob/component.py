"""Component declaration for the Azure blob substrate resource."""

from __future__ import annotations

from collections.abc import Mapping

from packages.blobfs_shared.config import BlobfsSettings
from packages.blobfs_shared.manifest import (
    ComponentId,
    ModuleRoot,
    ResourceManifest,
    register_component,
)

RESOURCE_COMPONENT_ID = ComponentId("substrate_azure_blob")

MANIFEST = register_component(
    ResourceManifest(
        id=RESOURCE_COMPONENT_ID,
        kind="substrate",
        module_roots=frozenset({ModuleRoot("resources.substrates.azure_blob")}),
    )
)


def build_component(
    *, settings: BlobfsSettings, components: Mapping[str, object]
) -> object:
    """Build concrete runtime instance for this registered resource component."""
    del components
    from resources.substrates.azure_blob.azure_blob_substrate import (
        AzureContainerBlobClient,
    )
    from resources.substrates.azure_blob.config import resolve_azure_blob_settings

    return AzureContainerBlobClient(settings=resolve_azure_blob_settings(settings))
