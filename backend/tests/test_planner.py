"""Tests for chunk planning."""

import pytest

from plugin_archiver.archive.planner import effective_chunk_size, plan, slice_chunk


@pytest.mark.parametrize("count", [1, 9, 10, 11, 19, 20, 21, 37, 100, 101])
def test_chunks_partition_file_list(count: int) -> None:
    files = [f"/f{i}" for i in range(count)]
    total = plan(files)
    assert total == -(-count // 10)
    rebuilt = [item for index in range(total) for item in slice_chunk(files, index, total)]
    assert rebuilt == files


def test_effective_chunk_size_uses_caller_total() -> None:
    assert effective_chunk_size(11, 2) == 6
    assert effective_chunk_size(30, 3) == 10


def test_index_past_end_is_empty() -> None:
    files = list(range(5))
    assert slice_chunk(files, 7, 1) == []


def test_invalid_arguments() -> None:
    with pytest.raises(ValueError):
        plan([], chunk_size=0)
    with pytest.raises(ValueError):
        slice_chunk([1], 0, 0)
