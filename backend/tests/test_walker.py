"""Tests for directory listing discovery."""

import pytest

from conftest import SLUG, FakeSourceHost, render_listing
from plugin_archiver.archive.types import FileEntry
from plugin_archiver.core.errors import DiscoveryError
from plugin_archiver.listing.walker import DirectoryWalker, join_path, parse_listing


def test_parse_listing_skips_parent_and_classifies() -> None:
    html = render_listing({"readme.txt": b"", "assets": {}})
    entries = parse_listing(html)
    assert [(e.name, e.is_directory) for e in entries] == [("readme.txt", False), ("assets", True)]


def test_parse_listing_ignores_traversal_names() -> None:
    html = '<li><a href="./">./</a></li><li><a href="a%2Fb">x/y</a></li><li><a href="ok.php">ok.php</a></li>'
    assert [e.name for e in parse_listing(html)] == ["ok.php"]


def test_join_path_collapses_separators() -> None:
    assert join_path("", "readme.txt") == "/readme.txt"
    assert join_path("/sub/", "a.php") == "/sub/a.php"


def test_discover_depth_first_in_listing_order(settings, source_host) -> None:
    files = DirectoryWalker(source_host, settings).discover(SLUG)
    assert files == [
        FileEntry(name="readme.txt", path="/readme.txt"),
        FileEntry(name="a.php", path="/sub/a.php"),
        FileEntry(name="b.php", path="/sub/b.php"),
    ]


def test_discover_empty_tree_returns_nothing(settings) -> None:
    assert DirectoryWalker(FakeSourceHost(SLUG, {}), settings).discover(SLUG) == []


def test_discover_unreachable_root_raises(settings) -> None:
    with pytest.raises(DiscoveryError):
        DirectoryWalker(FakeSourceHost("other", {}), settings).discover(SLUG)


def test_discover_enforces_depth_limit(settings) -> None:
    settings.max_depth = 2
    tree = {"a": {"b": {"c": {"deep.txt": b"x"}}}}
    with pytest.raises(DiscoveryError, match="depth"):
        DirectoryWalker(FakeSourceHost(SLUG, tree), settings).discover(SLUG)


def test_discover_enforces_file_limit(settings) -> None:
    settings.max_files = 2
    with pytest.raises(DiscoveryError, match="File limit"):
        DirectoryWalker(FakeSourceHost(SLUG, {"1": b"", "2": b"", "3": b""}), settings).discover(SLUG)


def test_discover_transport_error_raises(settings) -> None:
    host = FakeSourceHost(SLUG, {"readme.txt": b""}, unreachable={""})
    with pytest.raises(DiscoveryError, match="connection refused"):
        DirectoryWalker(host, settings).discover(SLUG)


def test_discover_failing_subdirectory_raises(settings) -> None:
    tree = {"readme.txt": b"", "assets": {"logo.png": b""}}
    host = FakeSourceHost(SLUG, tree, failing={"/assets"})
    with pytest.raises(DiscoveryError, match="HTTP 503"):
        DirectoryWalker(host, settings).discover(SLUG)
