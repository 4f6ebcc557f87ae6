"""Transport-agnostic contract for blob store operations on one container."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import BinaryIO, Mapping, Protocol

from pydantic import BaseModel, ConfigDict, Field


class BlobProperties(BaseModel):
    """Properties reported by the store for one blob."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    last_modified: datetime
    content_type: str | None = None
    content_length: int | None = None


class BlobItem(BaseModel):
    """One blob returned by a listing call."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    properties: BlobProperties


class BlobPrefix(BaseModel):
    """One virtual-folder marker returned by a delimited listing call."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str


class BlobListing(BaseModel):
    """Result of one prefix listing call."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    blobs: tuple[BlobItem, ...] = ()
    prefixes: tuple[BlobPrefix, ...] = ()


class UploadResult(BaseModel):
    """Result of one create-or-replace upload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    last_modified: datetime


class CreateBlobOptions(BaseModel):
    """Optional blob headers and metadata forwarded on upload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    content_type: str | None = None
    cache_control: str | None = None
    metadata: Mapping[str, str] = Field(default_factory=dict)
    content_language: str | None = None
    content_encoding: str | None = None


class AzureBlobHealthStatus(BaseModel):
    """Blob substrate readiness payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ready: bool
    detail: str


@dataclass(frozen=True)
class BlobDownload:
    """Blob properties plus an undrained content stream."""

    properties: BlobProperties
    content_stream: BinaryIO


class ProbeOutcome(str, Enum):
    """Tagged outcomes for one metadata-only existence probe."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class BlobProbe:
    """Tagged metadata probe result.

    ``ERROR`` carries the store's own exception so callers can re-raise it
    unchanged.
    """

    outcome: ProbeOutcome
    properties: BlobProperties | None = None
    status_code: int | None = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        if self.outcome is ProbeOutcome.ERROR and self.error is None:
            raise ValueError("an ERROR probe must carry the store exception")

    @classmethod
    def found(cls, properties: BlobProperties) -> "BlobProbe":
        return cls(outcome=ProbeOutcome.FOUND, properties=properties)

    @classmethod
    def not_found(cls) -> "BlobProbe":
        return cls(outcome=ProbeOutcome.NOT_FOUND, status_code=404)

    @classmethod
    def failed(cls, *, error: Exception, status_code: int | None) -> "BlobProbe":
        return cls(outcome=ProbeOutcome.ERROR, status_code=status_code, error=error)


class BlobClient(Protocol):
    """Protocol for flat key/value blob operations on one container."""

    @property
    def container(self) -> str:
        """Return the container this client addresses."""

    def health(self) -> AzureBlobHealthStatus:
        """Probe blob store readiness."""

    def create_or_replace_blob(
        self,
        *,
        key: str,
        content: bytes | BinaryIO,
        options: CreateBlobOptions,
    ) -> UploadResult:
        """Upload one blob, overwriting any existing blob at ``key``."""

    def get_blob(self, *, key: str) -> BlobDownload:
        """Fetch one blob's properties and content stream."""

    def get_blob_metadata(self, *, key: str) -> BlobProbe:
        """Probe one blob without fetching content."""

    def get_blob_properties(self, *, key: str) -> BlobProperties:
        """Fetch one blob's properties, raising on any store error."""

    def delete_blob(self, *, key: str) -> None:
        """Delete one blob."""

    def copy_blob(self, *, dest_key: str, src_key: str) -> None:
        """Copy one blob server-side within the container."""

    def list_blobs(self, *, prefix: str, delimiter: str | None = None) -> BlobListing:
        """List blobs whose keys start with ``prefix``."""
