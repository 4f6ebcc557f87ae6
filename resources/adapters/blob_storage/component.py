"""Component declaration for the blob storage filesystem adapter resource."""

from __future__ import annotations

from collections.abc import Mapping

from packages.blobfs_shared.config import BlobfsSettings
from packages.blobfs_shared.manifest import (
    ComponentId,
    ModuleRoot,
    ResourceManifest,
    register_component,
)

RESOURCE_COMPONENT_ID = ComponentId("adapter_blob_storage")
BLOB_CLIENT_COMPONENT_ID = ComponentId("substrate_azure_blob")

MANIFEST = register_component(
    ResourceManifest(
        id=RESOURCE_COMPONENT_ID,
        kind="adapter",
        module_roots=frozenset({ModuleRoot("resources.adapters.blob_storage")}),
        depends_on=frozenset({BLOB_CLIENT_COMPONENT_ID}),
    )
)


def build_component(
    *, settings: BlobfsSettings, components: Mapping[str, object]
) -> object:
    """Build concrete runtime instance for this registered resource component."""
    from resources.adapters.blob_storage.blob_storage_adapter import (
        BlobStorageAdapter,
    )
    from resources.adapters.blob_storage.config import (
        resolve_blob_storage_adapter_settings,
    )

    client = components.get(str(BLOB_CLIENT_COMPONENT_ID))
    if client is None:
        raise KeyError(
            f"{RESOURCE_COMPONENT_ID} requires built component {BLOB_CLIENT_COMPONENT_ID}"
        )
    return BlobStorageAdapter(
        client=client,  # type: ignore[arg-type]
        settings=resolve_blob_storage_adapter_settings(settings),
    )
