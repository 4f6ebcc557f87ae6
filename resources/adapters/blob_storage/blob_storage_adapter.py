"""Filesystem adapter over a flat blob store.

Paths are prefixed with the configured root namespace before every client
call and stripped again in every returned record. Directories exist only as
a view over key prefixes: ``create_dir`` stores nothing and ``list_contents``
derives directory entries from listed keys.

Client errors are never caught, wrapped, or retried here, with one exception:
``has`` turns a not-found metadata probe into ``False``.
"""

from __future__ import annotations

from typing import BinaryIO

from packages.blobfs_shared.blob_paths import (
    apply_path_prefix,
    as_directory_prefix,
    dirname,
    remove_path_prefix,
)
from packages.blobfs_shared.logging import get_logger, public_api_instrumented
from resources.adapters.blob_storage.adapter import (
    DirectoryEntry,
    FileMetadata,
    FilesystemAdapter,
    ListingEntry,
    VisibilityNotSupportedError,
    WriteOptions,
)
from resources.adapters.blob_storage.component import RESOURCE_COMPONENT_ID
from resources.adapters.blob_storage.config import BlobStorageAdapterSettings
from resources.adapters.blob_storage.listing import emulate_directories
from resources.adapters.blob_storage.normalize import (
    normalize_blob_properties,
    to_unix_timestamp,
)
from resources.substrates.azure_blob.substrate import BlobClient, ProbeOutcome

_LOGGER = get_logger(__name__)


class BlobStorageAdapter(FilesystemAdapter):
    """Map filesystem operations onto one blob container."""

    def __init__(
        self,
        *,
        client: BlobClient,
        settings: BlobStorageAdapterSettings | None = None,
    ) -> None:
        self._client = client
        self._settings = settings or BlobStorageAdapterSettings()
        self._prefix = self._settings.prefix

    def get_client(self) -> BlobClient:
        """Return the underlying blob client."""
        return self._client

    def get_container(self) -> str:
        """Return the container name the client addresses."""
        return self._client.container

    def get_path_prefix(self) -> str:
        """Return the normalized root prefix, ``""`` when unset."""
        return self._prefix

    def apply_path_prefix(self, path: str) -> str:
        """Return the blob key for one caller path."""
        return apply_path_prefix(self._prefix, path)

    def remove_path_prefix(self, key: str) -> str:
        """Return the caller path for one blob key."""
        return remove_path_prefix(self._prefix, key)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("path",),
    )
    def write(
        self,
        path: str,
        contents: bytes | str,
        options: WriteOptions | None = None,
    ) -> FileMetadata:
        """Upload raw contents to ``path``, overwriting any existing blob."""
        return self._upload(path, contents, options)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("path",),
    )
    def write_stream(
        self,
        path: str,
        stream: BinaryIO,
        options: WriteOptions | None = None,
    ) -> FileMetadata:
        """Upload a readable stream to ``path``."""
        return self._upload(path, stream, options)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("path",),
    )
    def update(
        self,
        path: str,
        contents: bytes | str,
        options: WriteOptions | None = None,
    ) -> FileMetadata:
        """Same as ``write``; blob creation always replaces."""
        return self._upload(path, contents, options)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("path",),
    )
    def update_stream(
        self,
        path: str,
        stream: BinaryIO,
        options: WriteOptions | None = None,
    ) -> FileMetadata:
        """Same as ``write_stream``."""
        return self._upload(path, stream, options)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("path",),
    )
    def read(self, path: str, encoding: str | None = "utf-8") -> FileMetadata:
        """Download one blob and drain its content into memory.

        Text is decoded with ``encoding``; ``encoding=None`` keeps raw bytes.
        """
        key = self.apply_path_prefix(path)
        download = self._client.get_blob(key=key)
        with download.content_stream as stream:
            raw = stream.read()
        contents = raw if encoding is None else raw.decode(encoding)
        record = normalize_blob_properties(self.remove_path_prefix(key), download.properties)
        return record.model_copy(update={"contents": contents})

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("path",),
    )
    def read_stream(self, path: str) -> FileMetadata:
        """Download one blob and hand back its open stream.

        The caller owns the stream and must close it.
        """
        key = self.apply_path_prefix(path)
        download = self._client.get_blob(key=key)
        record = normalize_blob_properties(self.remove_path_prefix(key), download.properties)
        return record.model_copy(update={"stream": download.content_stream})

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("path",),
    )
    def has(self, path: str) -> bool:
        """Return whether a blob exists, re-raising any non-404 probe failure."""
        probe = self._client.get_blob_metadata(key=self.apply_path_prefix(path))
        if probe.outcome is ProbeOutcome.FOUND:
            return True
        if probe.outcome is ProbeOutcome.NOT_FOUND:
            return False
        raise probe.error

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("path",),
    )
    def delete(self, path: str) -> bool:
        """Delete one blob."""
        self._client.delete_blob(key=self.apply_path_prefix(path))
        return True

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("dirname",),
    )
    def delete_dir(self, dirname: str) -> bool:
        """Delete every blob below ``dirname``, one call per blob.

        Not atomic: the first failing delete propagates and earlier deletes
        stay done.
        """
        listing = self._client.list_blobs(prefix=self._directory_prefix(dirname))
        for blob in listing.blobs:
            self._client.delete_blob(key=blob.name)
        return True

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("dirname",),
    )
    def create_dir(
        self, dirname: str, options: WriteOptions | None = None
    ) -> DirectoryEntry:
        """Return a directory record without touching the store."""
        del options
        return DirectoryEntry(path=dirname)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("path", "newpath"),
    )
    def copy(self, path: str, newpath: str) -> bool:
        """Copy one blob server-side."""
        self._client.copy_blob(
            dest_key=self.apply_path_prefix(newpath),
            src_key=self.apply_path_prefix(path),
        )
        return True

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("path", "newpath"),
    )
    def rename(self, path: str, newpath: str) -> bool:
        """Copy one blob then delete the source.

        If the delete fails the copy is left in place under both names.
        """
        source = self.apply_path_prefix(path)
        self._client.copy_blob(dest_key=self.apply_path_prefix(newpath), src_key=source)
        self._client.delete_blob(key=source)
        return True

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("directory",),
    )
    def list_contents(
        self, directory: str = "", recursive: bool = False
    ) -> list[ListingEntry]:
        """List files and synthetic directories below ``directory``."""
        listing_prefix = self._directory_prefix(directory)
        listing = self._client.list_blobs(prefix=listing_prefix)
        return emulate_directories(
            listing,
            listing_prefix=listing_prefix,
            root_prefix=self._prefix,
            recursive=recursive,
            mode=self._settings.recursive_listing,
        )

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("path",),
    )
    def get_metadata(self, path: str) -> FileMetadata:
        """Return the normalized record for one blob."""
        return self._metadata(path)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("path",),
    )
    def get_size(self, path: str) -> FileMetadata:
        """Return the full normalized record; callers read ``size``."""
        return self._metadata(path)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("path",),
    )
    def get_mimetype(self, path: str) -> FileMetadata:
        """Return the full normalized record; callers read ``mimetype``."""
        return self._metadata(path)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=str(RESOURCE_COMPONENT_ID),
        id_fields=("path",),
    )
    def get_timestamp(self, path: str) -> FileMetadata:
        """Return the full normalized record; callers read ``timestamp``."""
        return self._metadata(path)

    def get_visibility(self, path: str) -> FileMetadata:
        """Blob containers carry no per-file visibility."""
        raise VisibilityNotSupportedError(
            f"visibility is not supported by {type(self).__name__} ({path})"
        )

    def set_visibility(self, path: str, visibility: str) -> FileMetadata:
        """Blob containers carry no per-file visibility."""
        raise VisibilityNotSupportedError(
            f"visibility is not supported by {type(self).__name__} "
            f"({path}: {visibility})"
        )

    def _upload(
        self,
        path: str,
        contents: bytes | str | BinaryIO,
        options: WriteOptions | None,
    ) -> FileMetadata:
        """Upload one payload and build the write result record."""
        key = self.apply_path_prefix(path)
        payload = contents.encode("utf-8") if isinstance(contents, str) else contents
        if isinstance(payload, bytearray):
            payload = bytes(payload)

        result = self._client.create_or_replace_blob(
            key=key,
            content=payload,
            options=(options or WriteOptions()).to_create_options(),
        )

        unprefixed = self.remove_path_prefix(key)
        record = FileMetadata(
            path=unprefixed,
            timestamp=to_unix_timestamp(result.last_modified),
            dirname=dirname(unprefixed),
        )
        if isinstance(contents, str):
            return record.model_copy(update={"contents": contents})
        if isinstance(payload, bytes):
            return record.model_copy(update={"contents": payload})
        return record

    def _metadata(self, path: str) -> FileMetadata:
        """Fetch and normalize properties for one blob."""
        key = self.apply_path_prefix(path)
        properties = self._client.get_blob_properties(key=key)
        return normalize_blob_properties(self.remove_path_prefix(key), properties)

    def _directory_prefix(self, directory: str) -> str:
        """Return the listing prefix matching keys strictly below ``directory``."""
        return as_directory_prefix(self.apply_path_prefix(directory.strip("/")))
