"""Recursive discovery of package files from HTML directory listings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from html import unescape

import requests

from plugin_archiver.archive.types import FileEntry
from plugin_archiver.core.config import Settings
from plugin_archiver.core.errors import DiscoveryError
from plugin_archiver.core.logging import get_logger

logger = get_logger(__name__)

_ENTRY_RE = re.compile(r'<li><a href="([^"]+)">([^<]+)</a></li>')
_SEPARATORS_RE = re.compile(r"/+")
_PARENT_NAMES = {".", ".."}


@dataclass(slots=True, frozen=True)
class ListingEntry:
    name: str
    is_directory: bool


def parse_listing(html: str) -> list[ListingEntry]:
    """Extract entries from a listing page, skipping the parent-directory link."""
    entries: list[ListingEntry] = []
    for href, label in _ENTRY_RE.findall(html):
        if href == "../" or label == "..":
            continue
        name = unescape(label)
        if name.endswith("/"):
            name = name[:-1]
        if not name or name in _PARENT_NAMES or "/" in name:
            logger.warning("Ignoring listing entry %r", label)
            continue
        entries.append(ListingEntry(name=name, is_directory=href.endswith("/")))
    return entries


def join_path(current_path: str, name: str) -> str:
    return _SEPARATORS_RE.sub("/", f"{current_path}/{name}")


class DirectoryWalker:
    """Depth-first, listing-ordered walk of a package tree on the source host.

    The listing is untrusted, so recursion depth and the number of discovered
    files are both capped by settings.
    """

    def __init__(self, session: requests.Session, settings: Settings) -> None:
        self.session = session
        self.settings = settings

    def discover(self, slug: str) -> list[FileEntry]:
        files: list[FileEntry] = []
        self._walk(slug, "", 0, files)
        return files

    def _walk(self, slug: str, current_path: str, depth: int, files: list[FileEntry]) -> None:
        if depth > self.settings.max_depth:
            raise DiscoveryError(f"Directory depth limit {self.settings.max_depth} exceeded at {current_path}")
        for entry in parse_listing(self._fetch_listing(slug, current_path)):
            entry_path = join_path(current_path, entry.name)
            if entry.is_directory:
                self._walk(slug, entry_path, depth + 1, files)
                continue
            if len(files) >= self.settings.max_files:
                raise DiscoveryError(f"File limit {self.settings.max_files} exceeded for {slug}")
            files.append(FileEntry(name=entry.name, path=entry_path))

    def _fetch_listing(self, slug: str, current_path: str) -> str:
        url = self.settings.package_url(slug, current_path)
        logger.info("Scanning directory %s", url)
        try:
            response = self.session.get(url, timeout=self.settings.request_timeout)
        except requests.RequestException as exc:
            raise DiscoveryError(f"Failed to fetch listing {url}: {exc}") from exc
        if not response.ok:
            raise DiscoveryError(f"Failed to fetch listing {url}: HTTP {response.status_code}")
        return response.text


__all__ = ["DirectoryWalker", "ListingEntry", "parse_listing", "join_path"]
