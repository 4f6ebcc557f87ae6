"""Unit tests for Azure blob substrate settings and client construction."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from packages.blobfs_shared.config import BlobfsSettings
from resources.substrates.azure_blob import client as client_module
from resources.substrates.azure_blob.config import (
    AzureBlobSettings,
    resolve_azure_blob_settings,
)


class _FakeContainerClientFactory:
    """Record container client construction arguments."""

    calls: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []

    def __init__(self, **kwargs: Any) -> None:
        type(self).calls.append(("init", (), kwargs))

    @classmethod
    def from_connection_string(cls, conn_str: str, **kwargs: Any) -> str:
        cls.calls.append(("from_connection_string", (conn_str,), kwargs))
        return "from-connection-string"


@pytest.fixture(autouse=True)
def _reset_factory_calls() -> None:
    _FakeContainerClientFactory.calls = []


def test_blank_optional_strings_become_none() -> None:
    """Whitespace-only credentials should be treated as unset."""
    settings = AzureBlobSettings(
        container="files",
        connection_string="  ",
        account_url="",
        credential=" key ",
    )

    assert settings.connection_string is None
    assert settings.account_url is None
    assert settings.credential == "key"


def test_container_name_must_be_lowercase() -> None:
    """Azure container names are lowercase only."""
    with pytest.raises(ValidationError):
        AzureBlobSettings(container="Files")


def test_require_connection_needs_container() -> None:
    """A client cannot be built without a container."""
    with pytest.raises(ValueError, match="container is required"):
        AzureBlobSettings(connection_string="x").require_connection()


def test_require_connection_needs_endpoint() -> None:
    """A client needs a connection string or account URL."""
    with pytest.raises(ValueError, match="connection_string or"):
        AzureBlobSettings(container="files").require_connection()


def test_resolves_from_component_namespace() -> None:
    """Settings should come from ``components.substrate.azure_blob``."""
    settings = BlobfsSettings(
        components={
            "substrate": {
                "azure_blob": {
                    "container": "files",
                    "account_url": "https://acct.blob.core.windows.net",
                }
            }
        }
    )

    resolved = resolve_azure_blob_settings(settings)

    assert resolved.container == "files"
    assert resolved.account_url == "https://acct.blob.core.windows.net"
    assert resolved.connection_string is None


def test_flat_component_keys_are_rejected() -> None:
    """Flat component keys should point at the grouped namespace."""
    with pytest.raises(ValidationError, match="components.substrate.azure_blob"):
        BlobfsSettings(components={"substrate_azure_blob": {"container": "files"}})


def test_connection_string_is_preferred(monkeypatch: pytest.MonkeyPatch) -> None:
    """Connection strings should win over account URLs."""
    monkeypatch.setattr(client_module, "ContainerClient", _FakeContainerClientFactory)

    result = client_module.create_container_client(
        AzureBlobSettings(
            container="files",
            connection_string="UseDevelopmentStorage=true",
            account_url="https://acct.blob.core.windows.net",
        )
    )

    assert result == "from-connection-string"
    assert _FakeContainerClientFactory.calls == [
        (
            "from_connection_string",
            ("UseDevelopmentStorage=true",),
            {"container_name": "files"},
        )
    ]


def test_account_url_uses_optional_credential(monkeypatch: pytest.MonkeyPatch) -> None:
    """Account URL construction should pass the container and credential."""
    monkeypatch.setattr(client_module, "ContainerClient", _FakeContainerClientFactory)

    client_module.create_container_client(
        AzureBlobSettings(
            container="files",
            account_url="https://acct.blob.core.windows.net",
            credential="secret",
        )
    )

    assert _FakeContainerClientFactory.calls == [
        (
            "init",
            (),
            {
                "account_url": "https://acct.blob.core.windows.net",
                "container_name": "files",
                "credential": "secret",
            },
        )
    ]


def test_invalid_settings_fail_before_client_construction(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Unusable settings should never reach the SDK."""
    monkeypatch.setattr(client_module, "ContainerClient", _FakeContainerClientFactory)

    with pytest.raises(ValueError):
        client_module.create_container_client(AzureBlobSettings())

    assert _FakeContainerClientFactory.calls == []
