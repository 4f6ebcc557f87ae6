"""Unit tests for directory emulation over flat blob listings."""

from __future__ import annotations

from datetime import datetime, timezone

from resources.adapters.blob_storage.adapter import (
    DirectoryEntry,
    FileMetadata,
    RecursiveListingMode,
)
from resources.adapters.blob_storage.listing import emulate_directories
from resources.substrates.azure_blob.substrate import (
    BlobItem,
    BlobListing,
    BlobPrefix,
    BlobProperties,
)

_PROPERTIES = BlobProperties(
    last_modified=datetime(2014, 12, 2, 8, 9, 1, tzinfo=timezone.utc),
    content_type="text/plain",
    content_length=42,
)


def _listing(*names: str, prefixes: tuple[str, ...] = ()) -> BlobListing:
    return BlobListing(
        blobs=tuple(BlobItem(name=name, properties=_PROPERTIES) for name in names),
        prefixes=tuple(BlobPrefix(name=name) for name in prefixes),
    )


def _shape(entries: list) -> list[tuple[str, str]]:
    return [(entry.type, entry.path) for entry in entries]


def test_top_level_keys_become_file_records() -> None:
    """One-segment remainders should yield full file records."""
    entries = emulate_directories(
        _listing("foo.txt"), listing_prefix="", root_prefix=""
    )

    assert entries == [
        FileMetadata(
            path="foo.txt",
            timestamp=1417507741,
            dirname="",
            mimetype="text/plain",
            size=42,
        )
    ]


def test_nested_keys_collapse_to_first_segment_once() -> None:
    """Only the first segment below the listed directory is emitted."""
    entries = emulate_directories(
        _listing("a.txt", "baz/one.txt", "baz/deep/two.txt", "qux/three.txt"),
        listing_prefix="",
        root_prefix="",
    )

    assert _shape(entries) == [
        ("file", "a.txt"),
        ("dir", "baz"),
        ("dir", "qux"),
    ]


def test_subdirectory_paths_are_relative_to_root_not_listing() -> None:
    """Directory entries should carry the full unprefixed path."""
    entries = emulate_directories(
        _listing("root/docs/a.txt", "root/docs/img/b.png"),
        listing_prefix="root/docs/",
        root_prefix="root/",
    )

    assert _shape(entries) == [("file", "docs/a.txt"), ("dir", "docs/img")]
    assert entries[0].dirname == "docs"


def test_keys_outside_listing_prefix_are_skipped() -> None:
    """Stray keys and the directory marker itself should not be listed."""
    entries = emulate_directories(
        _listing("docs/", "docs-old/c.txt", "docs/a.txt"),
        listing_prefix="docs/",
        root_prefix="",
    )

    assert _shape(entries) == [("file", "docs/a.txt")]


def test_common_prefixes_follow_key_entries_without_duplicates() -> None:
    """Store prefixes should append after keys and not repeat emitted dirs."""
    entries = emulate_directories(
        _listing("foo.txt", "baz/bar.txt", prefixes=("baz/", "other/")),
        listing_prefix="",
        root_prefix="",
    )

    assert _shape(entries) == [
        ("file", "foo.txt"),
        ("dir", "baz"),
        ("dir", "other"),
    ]
    assert entries[-1] == DirectoryEntry(path="other")


def test_common_prefixes_have_root_prefix_stripped() -> None:
    """Store prefixes carry the root namespace, returned paths do not."""
    entries = emulate_directories(
        _listing(prefixes=("tenant/bar/",)),
        listing_prefix="tenant/",
        root_prefix="tenant/",
    )

    assert entries == [DirectoryEntry(path="bar")]


def test_recursive_flag_is_ignored_by_default() -> None:
    """Ignore mode should return the same one-level view for both flags."""
    listing = _listing("a/b/c.txt", "a/d.txt")

    flat = emulate_directories(listing, listing_prefix="", root_prefix="")
    recursive = emulate_directories(
        listing, listing_prefix="", root_prefix="", recursive=True
    )

    assert flat == recursive == [DirectoryEntry(path="a")]


def test_expand_mode_lists_every_intermediate_directory_and_file() -> None:
    """Expand mode should walk the whole tree when recursive is requested."""
    entries = emulate_directories(
        _listing("a/b/c.txt", "a/d.txt", "e.txt", "f/"),
        listing_prefix="",
        root_prefix="",
        recursive=True,
        mode=RecursiveListingMode.EXPAND,
    )

    assert _shape(entries) == [
        ("dir", "a"),
        ("dir", "a/b"),
        ("file", "a/b/c.txt"),
        ("file", "a/d.txt"),
        ("file", "e.txt"),
        ("dir", "f"),
    ]


def test_expand_mode_without_recursive_flag_stays_one_level() -> None:
    """Expand mode only applies when the caller asks for recursion."""
    entries = emulate_directories(
        _listing("a/b/c.txt"),
        listing_prefix="",
        root_prefix="",
        mode=RecursiveListingMode.EXPAND,
    )

    assert entries == [DirectoryEntry(path="a")]


def test_leading_separator_keys_never_emit_empty_directories() -> None:
    """A key like ``/foo.txt`` is a file at the root, not an unnamed folder."""
    entries = emulate_directories(
        _listing("/foo.txt"), listing_prefix="", root_prefix=""
    )

    assert _shape(entries) == [("file", "/foo.txt")]
    assert all(entry.path for entry in entries)


def test_doubled_separators_do_not_list_the_directory_itself() -> None:
    """Empty segments are skipped at every depth, including the listed dir."""
    one_level = emulate_directories(
        _listing("docs//a.txt", "docs/img//b.png"),
        listing_prefix="docs/",
        root_prefix="",
    )
    expanded = emulate_directories(
        _listing("a//b.txt"),
        listing_prefix="",
        root_prefix="",
        recursive=True,
        mode=RecursiveListingMode.EXPAND,
    )

    assert _shape(one_level) == [("file", "docs//a.txt"), ("dir", "docs/img")]
    assert _shape(expanded) == [("dir", "a"), ("file", "a//b.txt")]
