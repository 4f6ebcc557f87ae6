"""Public API for shared blobfs configuration utilities."""

from .models import (
    DEFAULT_CONFIG_PATH,
    BlobfsSettings,
    ComponentsSettings,
    LoggingSettings,
    ObservabilitySettings,
    load_settings,
    resolve_component_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "BlobfsSettings",
    "ComponentsSettings",
    "LoggingSettings",
    "ObservabilitySettings",
    "load_settings",
    "resolve_component_settings",
]
