"""Tests for component composition and filesystem adapter bootstrap."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from packages.blobfs_core import (
    build_components,
    create_filesystem_adapter,
    import_component_modules,
)
from packages.blobfs_shared.config import BlobfsSettings
from packages.blobfs_shared.manifest import get_registry
from resources.adapters.blob_storage import BlobStorageAdapter
from resources.substrates.azure_blob import azure_blob_substrate
from resources.substrates.azure_blob.substrate import CreateBlobOptions, UploadResult


class _FakeBlobClient:
    """Minimal prebuilt blob client for composition tests."""

    container = "files"

    def __init__(self) -> None:
        self.uploads: list[str] = []

    def create_or_replace_blob(
        self, *, key: str, content: bytes, options: CreateBlobOptions
    ) -> UploadResult:
        del content, options
        self.uploads.append(key)
        return UploadResult(
            last_modified=datetime(2020, 1, 1, tzinfo=timezone.utc)
        )


def _settings() -> BlobfsSettings:
    return BlobfsSettings(
        logging={"level": "WARNING", "json_output": False},
        components={"adapter": {"blob_storage": {"prefix": "tenant"}}},
    )


def test_component_modules_register_expected_manifests() -> None:
    """Importing component modules should register both resources."""
    import_component_modules()

    ids = {str(item.id) for item in get_registry().list_components()}

    assert {"substrate_azure_blob", "adapter_blob_storage"} <= ids


def test_create_filesystem_adapter_wires_prebuilt_client() -> None:
    """Bootstrap should build the adapter over a prebuilt client with settings."""
    client = _FakeBlobClient()

    adapter = create_filesystem_adapter(
        settings=_settings(),
        prebuilt={"substrate_azure_blob": client},
    )
    adapter.write("a.txt", "x")

    assert isinstance(adapter, BlobStorageAdapter)
    assert adapter.get_client() is client
    assert adapter.get_path_prefix() == "tenant/"
    assert client.uploads == ["tenant/a.txt"]


def test_build_components_builds_substrate_before_adapter(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Without prebuilt instances the client should come from its own builder."""
    built_with: list[object] = []

    def _fake_container_client(settings: object) -> object:
        built_with.append(settings)
        return object()

    monkeypatch.setattr(
        azure_blob_substrate, "create_container_client", _fake_container_client
    )
    import_component_modules()
    settings = BlobfsSettings(
        components={
            "substrate": {
                "azure_blob": {
                    "container": "files",
                    "connection_string": "UseDevelopmentStorage=true",
                }
            }
        }
    )

    components = build_components(settings=settings)

    adapter = components["adapter_blob_storage"]
    assert isinstance(adapter, BlobStorageAdapter)
    assert adapter.get_client() is components["substrate_azure_blob"]
    assert adapter.get_container() == "files"
    assert len(built_with) == 1
