from __future__ import annotations

from pathlib import Path

import pytest

from store.disk import DiskState, StoreError, empty_disk, load_disk, read_disk
from store.models import Disk

FIXTURE_STORE = (
    Path(__file__).parent / "fixtures" / "mini_app" / ".functions" / "cache.json"
)


def test_read_disk_from_fixture() -> None:
    disk = read_disk(FIXTURE_STORE)

    assert disk.metadata.last_updated == 150
    assert sorted(disk.data) == ["fn-convert", "fn-divide", "fn-sum"]
    assert disk.data["fn-sum"].status == "success"
    assert disk.data["fn-sum"].code is not None
    assert disk.data["fn-divide"].error == "type mismatch"


def test_read_disk_missing_file(tmp_path: Path) -> None:
    with pytest.raises(StoreError, match="Failed to read"):
        read_disk(tmp_path / "cache.json")


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        '{"data": {"x": {"do": "a", "timestamp": 1, "status": "done"}}}',
        '{"data": {"x": {"timestamp": 1, "status": "success"}}}',
        '{"data": [], "metadata": {"lastUpdated": 1}}',
    ],
)
def test_load_disk_rejects_malformed_stores(payload: str) -> None:
    with pytest.raises(StoreError):
        load_disk(payload)


def test_load_disk_ignores_unknown_fields() -> None:
    disk = load_disk(
        '{"data": {"x": {"do": "a", "timestamp": 1, "status": "compiling",'
        ' "in": {}, "out": {}}}, "metadata": {"lastUpdated": 0, "version": 2},'
        ' "extra": true}'
    )

    assert disk.data["x"].do == "a"


def test_missing_metadata_defaults_to_zero_watermark() -> None:
    disk = load_disk('{"data": {}}')

    assert disk.metadata.last_updated == 0


def test_empty_disk() -> None:
    disk = empty_disk()

    assert disk.data == {}
    assert disk.metadata.last_updated == 0


def test_disk_state_replaces_wholesale() -> None:
    state = DiskState()
    assert state.current == empty_disk()

    first = read_disk(FIXTURE_STORE)
    state.update(first)
    assert state.current is first

    second = Disk()
    state.update(second)
    assert state.current is second
