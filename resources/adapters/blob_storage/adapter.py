"""Filesystem-facing contract and record shapes for the blob storage adapter."""

from __future__ import annotations

from enum import Enum
from typing import Any, BinaryIO, Literal, Mapping, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field

from resources.substrates.azure_blob.substrate import BlobClient, CreateBlobOptions


class RecursiveListingMode(str, Enum):
    """How ``list_contents`` treats its ``recursive`` flag."""

    # Both flag values yield the same one-level view.
    IGNORE = "ignore"
    # ``recursive=True`` yields every nested file and intermediate directory.
    EXPAND = "expand"


class FileMetadata(BaseModel):
    """Normalized file record returned by adapter operations."""

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    path: str
    timestamp: int
    dirname: str
    type: Literal["file"] = "file"
    mimetype: str | None = None
    size: int | None = None
    contents: bytes | str | None = None
    stream: Any = None

    def to_dict(self) -> dict[str, object]:
        """Return the record with only the fields the operation produced."""
        return self.model_dump(mode="python", exclude_unset=True) | {"type": self.type}


class DirectoryEntry(BaseModel):
    """Directory record derived from key prefixes; never stored."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str
    type: Literal["dir"] = "dir"

    def to_dict(self) -> dict[str, object]:
        """Return the record as a plain mapping."""
        return {"path": self.path, "type": self.type}


ListingEntry = Union[FileMetadata, DirectoryEntry]


class WriteOptions(BaseModel):
    """Upload options forwarded one-to-one to the blob client."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    content_type: str | None = None
    cache_control: str | None = None
    metadata: Mapping[str, str] = Field(default_factory=dict)
    content_language: str | None = None
    content_encoding: str | None = None

    def to_create_options(self) -> CreateBlobOptions:
        """Map these options onto the blob client's upload options."""
        return CreateBlobOptions(
            content_type=self.content_type,
            cache_control=self.cache_control,
            metadata=dict(self.metadata),
            content_language=self.content_language,
            content_encoding=self.content_encoding,
        )


class VisibilityNotSupportedError(NotImplementedError):
    """Raised for visibility operations, which flat blob stores do not model."""


class FilesystemAdapter(Protocol):
    """Operations a generic filesystem abstraction expects from a storage adapter."""

    def write(
        self,
        path: str,
        contents: bytes | str,
        options: WriteOptions | None = None,
    ) -> FileMetadata:
        """Create or overwrite one file from raw contents."""

    def write_stream(
        self,
        path: str,
        stream: BinaryIO,
        options: WriteOptions | None = None,
    ) -> FileMetadata:
        """Create or overwrite one file from a readable stream."""

    def update(
        self,
        path: str,
        contents: bytes | str,
        options: WriteOptions | None = None,
    ) -> FileMetadata:
        """Overwrite one file from raw contents."""

    def update_stream(
        self,
        path: str,
        stream: BinaryIO,
        options: WriteOptions | None = None,
    ) -> FileMetadata:
        """Overwrite one file from a readable stream."""

    def read(self, path: str, encoding: str | None = "utf-8") -> FileMetadata:
        """Return metadata plus fully drained contents for one file.

        Contents are decoded with ``encoding``; pass ``None`` for raw bytes.
        """

    def read_stream(self, path: str) -> FileMetadata:
        """Return metadata plus an open content stream for one file."""

    def has(self, path: str) -> bool:
        """Return whether one file exists."""

    def delete(self, path: str) -> bool:
        """Delete one file."""

    def delete_dir(self, dirname: str) -> bool:
        """Delete every file below one directory."""

    def create_dir(
        self, dirname: str, options: WriteOptions | None = None
    ) -> DirectoryEntry:
        """Return a directory record for ``dirname``."""

    def copy(self, path: str, newpath: str) -> bool:
        """Copy one file."""

    def rename(self, path: str, newpath: str) -> bool:
        """Move one file."""

    def list_contents(
        self, directory: str = "", recursive: bool = False
    ) -> list[ListingEntry]:
        """List files and directories below ``directory``."""

    def get_metadata(self, path: str) -> FileMetadata:
        """Return the normalized record for one file."""

    def get_size(self, path: str) -> FileMetadata:
        """Return the normalized record for one file."""

    def get_mimetype(self, path: str) -> FileMetadata:
        """Return the normalized record for one file."""

    def get_timestamp(self, path: str) -> FileMetadata:
        """Return the normalized record for one file."""

    def get_client(self) -> BlobClient:
        """Return the underlying blob client."""
