"""Runtime composition for blobfs components."""

from packages.blobfs_core.bootstrap import (
    build_components,
    create_filesystem_adapter,
    import_component_modules,
)

__all__ = [
    "build_components",
    "create_filesystem_adapter",
    "import_component_modules",
]
