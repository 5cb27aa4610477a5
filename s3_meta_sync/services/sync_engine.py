"""
Sync orchestrator.

Provides :class:`Syncer`, which resolves the two locations, builds both
snapshots, plans the changes, executes them and finally writes the
refreshed metadata file. Metadata is only written once every transfer
and deletion has succeeded, so an aborted run never records a state it
did not reach; rerunning the sync picks up where it stopped.
"""
import os

from ..exceptions import ConfigurationError, RemoteWithoutMetadata, TransferFailure
from ..models.location import Direction, resolve_pair
from ..models.plan import SyncResult
from ..models.snapshot import META_FILE, NO_METADATA
from ..utils.logger import get_logger
from .diff_engine import DiffEngine
from .snapshot_builder import SnapshotBuilder
from .transfer import TransferExecutor

log = get_logger(__name__)


class Syncer:
    """Synchronizes a local folder with an S3 ``bucket:prefix``.

    Collaborators are injected so tests can swap in fakes.

    Args:
        store: Blob store client
        config: SyncConfig (only ``parallel`` is read here)
        executor: Optional TransferExecutor
        builder: Optional SnapshotBuilder
        diff_engine: Optional DiffEngine
    """

    def __init__(self, store, config=None, executor=None, builder=None, diff_engine=None):
        self.store = store
        self.config = config
        workers = config.parallel if config is not None else 1
        self.executor = executor or TransferExecutor(store, workers=workers)
        self.builder = builder or SnapshotBuilder(store)
        self.diff_engine = diff_engine or DiffEngine()

    def sync(self, source, destination):
        """Sync *source* into *destination*.

        Args:
            source: Local path or ``bucket:prefix``
            destination: Local path or ``bucket:prefix``

        Returns:
            SyncResult with transferred/deleted counts

        Raises:
            ConfigurationError: Unless exactly one side is remote
            RemoteWithoutMetadata: Downloading from a remote without metadata
            TransferFailure: A file operation failed after its retry
        """
        source_location, destination_location, direction = resolve_pair(source, destination)

        if direction is Direction.UPLOAD:
            return self._upload(source_location.path, destination_location)
        return self._download(source_location, destination_location.path)

    # ── Directions ─────────────────────────────────────────────────────

    def _upload(self, local_root, remote):
        if not os.path.isdir(local_root):
            raise ConfigurationError(f"Local source '{local_root}' is not a directory")

        local = self.builder.build_local(local_root)
        remote_snapshot = self.builder.read_remote_or_none(remote)
        if remote_snapshot is NO_METADATA:
            log.debug("Remote has no %s, uploading everything", META_FILE)

        plan = self.diff_engine.plan(local, remote_snapshot, Direction.UPLOAD)
        result = SyncResult.from_plan(plan)

        self.executor.execute(plan, local_root, remote)

        self._write_local_metadata(local_root, local)
        self.executor.upload_metadata(local_root, remote)
        return result

    def _download(self, remote, local_root):
        remote_snapshot = self.builder.read_remote_or_none(remote)
        local = self.builder.build_local(local_root)

        try:
            plan = self.diff_engine.plan(remote_snapshot, local, Direction.DOWNLOAD)
        except RemoteWithoutMetadata as e:
            existing = self.store.list(remote.bucket, remote.prefix)
            if existing:
                raise RemoteWithoutMetadata(
                    f"{e}; {remote} holds {len(existing)} object(s) not written by s3-meta-sync"
                ) from e
            raise
        result = SyncResult.from_plan(plan)

        self.executor.execute(plan, local_root, remote)

        # The snapshot read before the transfers, not a fresh copy
        self._write_local_metadata(local_root, remote_snapshot)
        return result

    def _write_local_metadata(self, local_root, snapshot):
        try:
            self.builder.write_local(local_root, snapshot)
        except OSError as e:
            raise TransferFailure(f"{META_FILE}: {e}", META_FILE) from e
