"""Composition root: build registered components in dependency order."""

from __future__ import annotations

import importlib
from typing import Any, Callable, Mapping

from packages.blobfs_shared.config import BlobfsSettings, load_settings
from packages.blobfs_shared.logging import configure_logging_from_settings, get_logger
from packages.blobfs_shared.manifest import (
    ManifestRegistry,
    ResourceManifest,
    get_registry,
)

_LOGGER = get_logger(__name__)

# Component declaration modules; importing them registers their manifests.
COMPONENT_MODULES: tuple[str, ...] = (
    "resources.substrates.azure_blob.component",
    "resources.adapters.blob_storage.component",
)
FILESYSTEM_COMPONENT_ID = "adapter_blob_storage"


def import_component_modules(modules: tuple[str, ...] = COMPONENT_MODULES) -> None:
    """Import component declaration modules to trigger manifest registration."""
    for module in modules:
        importlib.import_module(module)


def build_components(
    *,
    settings: BlobfsSettings,
    registry: ManifestRegistry | None = None,
    prebuilt: Mapping[str, object] | None = None,
) -> dict[str, object]:
    """Instantiate every registered component, dependencies first.

    ``prebuilt`` instances are used as-is and their builders are skipped.
    """
    resolved_registry = registry or get_registry()
    built: dict[str, object] = dict(prebuilt or {})
    for manifest in resolved_registry.build_order():
        if str(manifest.id) in built:
            continue
        builder = _resolve_component_builder(manifest)
        built[str(manifest.id)] = builder(settings=settings, components=built)
        _LOGGER.info(
            "component instantiated",
            extra={"component_id": str(manifest.id), "kind": manifest.kind},
        )
    return built


def create_filesystem_adapter(
    *,
    settings: BlobfsSettings | None = None,
    prebuilt: Mapping[str, object] | None = None,
) -> Any:
    """Load settings, configure logging, and return the built filesystem adapter."""
    resolved = settings or load_settings()
    configure_logging_from_settings(resolved.logging)
    import_component_modules()
    components = build_components(settings=resolved, prebuilt=prebuilt)
    return components[FILESYSTEM_COMPONENT_ID]


def _resolve_component_builder(
    manifest: ResourceManifest,
) -> Callable[..., object]:
    """Load one component module and return its build callable."""
    for module_root in sorted(manifest.module_roots):
        module = importlib.import_module(f"{module_root}.component")
        builder = getattr(module, "build_component", None)
        if callable(builder):
            return builder
    raise RuntimeError(
        f"component '{manifest.id}' does not expose build_component(...) in its component module"
    )
