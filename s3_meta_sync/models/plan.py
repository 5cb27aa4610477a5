"""
Sync plan and result models
"""
from dataclasses import dataclass
from typing import FrozenSet, Tuple

from .location import Direction


@dataclass(frozen=True)
class SyncPlan:
    """
    Work needed to make a destination match its source.

    ``to_transfer`` holds uploads for an upload and downloads for a
    download. ``dirs_to_remove`` is ordered deepest-first and only ever
    populated for local destinations.
    """

    direction: Direction
    to_transfer: Tuple[str, ...] = ()
    to_delete: Tuple[str, ...] = ()
    dirs_to_remove: Tuple[str, ...] = ()

    @property
    def to_upload(self) -> FrozenSet[str]:
        return frozenset(self.to_transfer) if self.direction is Direction.UPLOAD else frozenset()

    @property
    def to_download(self) -> FrozenSet[str]:
        return frozenset(self.to_transfer) if self.direction is Direction.DOWNLOAD else frozenset()

    @property
    def is_empty(self) -> bool:
        return not (self.to_transfer or self.to_delete or self.dirs_to_remove)


@dataclass(frozen=True)
class SyncResult:
    """Counts reported after a sync completes."""

    direction: Direction
    transferred: int = 0
    deleted: int = 0
    pruned: int = 0

    @classmethod
    def from_plan(cls, plan: SyncPlan) -> "SyncResult":
        return cls(
            direction=plan.direction,
            transferred=len(plan.to_transfer),
            deleted=len(plan.to_delete),
            pruned=len(plan.dirs_to_remove),
        )

    @property
    def uploaded(self) -> int:
        return self.transferred if self.direction is Direction.UPLOAD else 0

    @property
    def downloaded(self) -> int:
        return self.transferred if self.direction is Direction.DOWNLOAD else 0

    def summary(self) -> str:
        """Human-facing one-line summary, e.g. ``Uploading: 1 Deleting: 0``."""
        verb = "Uploading" if self.direction is Direction.UPLOAD else "Downloading"
        return f"{verb}: {self.transferred} Deleting: {self.deleted}"
