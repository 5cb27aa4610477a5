"""
Diff engine: turns two snapshots into a :class:`SyncPlan`.

Files are compared by checksum only. Modification times and sizes are
never consulted, since remote listings carry no comparable local mtime.
"""
from ..exceptions import RemoteWithoutMetadata
from ..models.location import Direction
from ..models.plan import SyncPlan
from ..models.snapshot import META_FILE, NO_METADATA


class DiffEngine:
    """Computes the minimal set of transfers and deletions."""

    def plan(self, source, destination, direction):
        """
        Compare a source snapshot against a destination snapshot.

        Args:
            source: Snapshot of the side being copied from
            destination: Snapshot of the side being overwritten
            direction: Direction.UPLOAD or Direction.DOWNLOAD

        Returns:
            SyncPlan

        Raises:
            RemoteWithoutMetadata: When downloading from a remote that has
                no metadata file; proceeding would wipe the local tree
        """
        if direction is Direction.DOWNLOAD and source is NO_METADATA:
            raise RemoteWithoutMetadata(
                f"Remote has no {META_FILE}, refusing to download (this would remove all local files)"
            )
        if source is NO_METADATA:
            raise ValueError("Local source snapshot is required for an upload")
        if destination is NO_METADATA:
            destination_files = {}
            directories = frozenset()
        else:
            destination_files = destination.files
            directories = destination.directories

        source_files = source.files
        to_transfer = tuple(
            path for path, checksum in source_files.items()
            if destination_files.get(path) != checksum
        )
        to_delete = tuple(sorted(set(destination_files) - set(source_files)))

        dirs_to_remove = ()
        if direction is Direction.DOWNLOAD:
            surviving = set(destination_files) - set(to_delete) | set(to_transfer)
            dirs_to_remove = self._empty_directories(directories, surviving)

        return SyncPlan(
            direction=direction,
            to_transfer=to_transfer,
            to_delete=to_delete,
            dirs_to_remove=dirs_to_remove,
        )

    @staticmethod
    def _empty_directories(directories, surviving_files):
        """Directories that hold no file once the plan has run, deepest first."""
        occupied = set()
        for path in surviving_files:
            parts = path.split("/")[:-1]
            for depth in range(1, len(parts) + 1):
                occupied.add("/".join(parts[:depth]))

        empty = [d for d in directories if d not in occupied]
        return tuple(sorted(empty, key=lambda d: (-d.count("/"), d)))
