"""Tests for the SQLite-backed blob store."""

from plugin_archiver.db.blob_store import BlobStore


def test_put_get_replace_delete(store: BlobStore) -> None:
    assert store.get("temp/x/chunk_0") is None
    store.put("temp/x/chunk_0", b"\x00\x01", {"content_type": "application/json"})
    blob = store.get("temp/x/chunk_0")
    assert blob.value == b"\x00\x01"
    assert blob.metadata == {"content_type": "application/json"}

    store.put("temp/x/chunk_0", b"new")
    assert store.get("temp/x/chunk_0").value == b"new"
    assert store.get("temp/x/chunk_0").metadata == {}

    assert store.delete("temp/x/chunk_0") is True
    assert store.delete("temp/x/chunk_0") is False


def test_list_keys_treats_prefix_literally(store: BlobStore) -> None:
    store.put("temp/a_b/chunk_0", b"1")
    store.put("temp/aXb/chunk_0", b"2")
    assert store.list_keys("temp/a_b/") == ["temp/a_b/chunk_0"]
    assert store.delete_many(["temp/a_b/chunk_0", "temp/aXb/chunk_0", "missing"]) == 2
