"""Models for the on-disk snapshot store (``.functions/cache.json``)."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

STORE_DIRNAME = ".functions"
STORE_FILENAME = "cache.json"

SnapshotStatus = Literal["compiling", "success", "failure"]


class SnapshotCode(BaseModel):
    """Generated code attached to a successful build."""

    model_config = ConfigDict(extra="ignore")

    fn: str = Field(description="Source text of an async function declaration")


class Snapshot(BaseModel):
    """One recorded build attempt for a description."""

    model_config = ConfigDict(extra="ignore")

    do: str = Field(description="Description the snapshot was built from")
    timestamp: int = Field(description="Creation/update time, epoch millis")
    status: SnapshotStatus
    code: SnapshotCode | None = None
    error: str | None = None


class DiskMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    last_updated: int = Field(
        default=0,
        alias="lastUpdated",
        description="Store watermark, epoch millis",
    )


class Disk(BaseModel):
    """Full view of the snapshot store as of one read."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    data: dict[str, Snapshot] = Field(default_factory=dict)
    metadata: DiskMetadata = Field(default_factory=DiskMetadata)


__all__ = [
    "STORE_DIRNAME",
    "STORE_FILENAME",
    "Disk",
    "DiskMetadata",
    "Snapshot",
    "SnapshotCode",
    "SnapshotStatus",
]
