"""Directory-listing discovery."""

from .walker import DirectoryWalker, ListingEntry, join_path, parse_listing

__all__ = ["DirectoryWalker", "ListingEntry", "join_path", "parse_listing"]
