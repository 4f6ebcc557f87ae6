"""Directory emulation over flat prefix listings.

Blob stores have no directories. A listing is a flat set of keys sharing a
prefix; this module turns it into file records plus synthetic directory
entries derived from the key segments below the listed directory.
"""

from __future__ import annotations

from packages.blobfs_shared.blob_paths import SEPARATOR, join, remove_path_prefix
from resources.adapters.blob_storage.adapter import (
    DirectoryEntry,
    ListingEntry,
    RecursiveListingMode,
)
from resources.adapters.blob_storage.normalize import normalize_blob_properties
from resources.substrates.azure_blob.substrate import BlobListing


def emulate_directories(
    listing: BlobListing,
    *,
    listing_prefix: str,
    root_prefix: str,
    recursive: bool = False,
    mode: RecursiveListingMode = RecursiveListingMode.IGNORE,
) -> list[ListingEntry]:
    """Convert one flat listing into ordered file and directory entries.

    ``listing_prefix`` is the full key prefix the listing was issued with and
    ``root_prefix`` is the adapter's normalized root namespace; every emitted
    path has the root prefix stripped. Directory entries are emitted once, at
    the position their first key appears. Common prefixes reported by the
    store follow all key-derived entries.
    """
    directory = remove_path_prefix(root_prefix, listing_prefix).strip(SEPARATOR)
    expand = recursive and mode is RecursiveListingMode.EXPAND

    entries: list[ListingEntry] = []
    seen_dirs: set[str] = set()

    def emit_dir(path: str) -> None:
        if path in ("", directory) or path in seen_dirs:
            return
        seen_dirs.add(path)
        entries.append(DirectoryEntry(path=path))

    for blob in listing.blobs:
        if not blob.name.startswith(listing_prefix):
            continue
        remainder = blob.name[len(listing_prefix) :]
        # Keys ending in the separator are folder markers, not files.
        marker = remainder.endswith(SEPARATOR)
        segments = [segment for segment in remainder.split(SEPARATOR) if segment]
        if not segments:
            continue

        if len(segments) == 1 and not marker:
            path = remove_path_prefix(root_prefix, blob.name)
            entries.append(normalize_blob_properties(path, blob.properties))
            continue

        if not expand:
            emit_dir(join(directory, segments[0]))
            continue

        dir_depth = len(segments) if marker else len(segments) - 1
        for depth in range(1, dir_depth + 1):
            emit_dir(join(directory, *segments[:depth]))
        if not marker:
            path = remove_path_prefix(root_prefix, blob.name)
            entries.append(normalize_blob_properties(path, blob.properties))

    for prefix in listing.prefixes:
        path = remove_path_prefix(root_prefix, prefix.name).strip(SEPARATOR)
        if path:
            emit_dir(path)

    return entries
