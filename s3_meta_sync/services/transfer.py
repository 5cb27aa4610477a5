"""
Transfer executor: carries out a sync plan against the blob store.

Uploads and downloads move raw bytes; nothing is decoded on the way.
Each single GET/PUT gets one immediate retry on a transient transport
error before the failure is allowed to propagate.
"""
import errno
import os
import ssl
from concurrent.futures import ThreadPoolExecutor, as_completed

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    EndpointConnectionError,
    IncompleteReadError,
    ReadTimeoutError,
    SSLError,
)

from ..exceptions import ObjectNotFound, TransferFailure
from ..models.location import Direction
from ..models.snapshot import META_FILE
from ..utils.logger import get_logger
from ..utils.persistence.file_utils import local_path, read_bytes, write_bytes

log = get_logger(__name__)

TRANSIENT_ERRORS = (
    ssl.SSLError,
    SSLError,
    ConnectionClosedError,
    EndpointConnectionError,
    IncompleteReadError,
    ReadTimeoutError,
)


def with_transient_retry(operation, *args):
    """Call *operation*, retrying exactly once on a transient error.

    There is no backoff. A second consecutive failure is raised unchanged.

    Args:
        operation: Callable performing one GET or PUT
        *args: Arguments passed through to *operation*

    Returns:
        Whatever *operation* returns
    """
    try:
        return operation(*args)
    except TRANSIENT_ERRORS as e:
        log.debug("Transient error (%s), retrying once", e)
        return operation(*args)


class TransferExecutor:
    """Performs uploads, downloads and deletions for a :class:`SyncPlan`.

    Args:
        store: Blob store (``list``/``get``/``put``/``delete``)
        workers: Number of file operations allowed to run at once
    """

    def __init__(self, store, workers=1):
        self.store = store
        self.workers = max(1, workers)

    # ── Single-object primitives ───────────────────────────────────────

    def download_content(self, bucket, key):
        return with_transient_retry(self.store.get, bucket, key)

    def upload_content(self, bucket, key, data):
        with_transient_retry(self.store.put, bucket, key, data)

    # ── Per-file operations ────────────────────────────────────────────

    def upload_file(self, root, relative_path, remote):
        log.debug("Uploading %s", relative_path)
        data = read_bytes(local_path(root, relative_path))
        self.upload_content(remote.bucket, remote.key_for(relative_path), data)

    def download_file(self, remote, relative_path, root):
        log.debug("Downloading %s", relative_path)
        data = self.download_content(remote.bucket, remote.key_for(relative_path))
        write_bytes(local_path(root, relative_path), data)

    def delete_remote_file(self, remote, relative_path):
        log.debug("Deleting %s", relative_path)
        self.store.delete(remote.bucket, remote.key_for(relative_path))

    def delete_local_file(self, root, relative_path):
        log.debug("Deleting %s", relative_path)
        os.remove(local_path(root, relative_path))

    def remove_empty_dirs(self, root, directories):
        """Remove directories under *root*, deepest first.

        Args:
            root: Local tree root
            directories: Relative directory paths, children before parents

        Returns:
            Number of directories removed
        """
        removed = 0
        for relative_dir in directories:
            path = local_path(root, relative_dir)
            try:
                os.rmdir(path)
            except FileNotFoundError:
                continue
            except OSError as e:
                if e.errno not in (errno.ENOTEMPTY, errno.EEXIST):
                    raise
                log.warning("Not removing %s: directory is not empty", relative_dir)
                continue
            log.debug("Removing empty directory %s", relative_dir)
            removed += 1
        return removed

    # ── Plan execution ─────────────────────────────────────────────────

    def execute(self, plan, local_root, remote):
        """Run every transfer and deletion in *plan*.

        Downloads clear the way first: local deletes, then pruning, then
        the downloads themselves, so a path that turned from a file into a
        directory (or back) on the remote side is not blocked by the stale
        local entry.

        Args:
            plan: SyncPlan to carry out
            local_root: Local tree root
            remote: Remote Location

        Raises:
            TransferFailure: On the first file operation that fails
        """
        if plan.direction is Direction.UPLOAD:
            jobs = [(path, self.upload_file, (local_root, path, remote)) for path in plan.to_transfer]
            jobs += [(path, self.delete_remote_file, (remote, path)) for path in plan.to_delete]
            self._run_jobs(jobs)
            return

        self._run_jobs([(path, self.delete_local_file, (local_root, path)) for path in plan.to_delete])

        # All file deletes are done at this point
        if plan.dirs_to_remove:
            self._run_one(local_root, self.remove_empty_dirs, (local_root, plan.dirs_to_remove))

        self._run_jobs([(path, self.download_file, (remote, path, local_root)) for path in plan.to_transfer])

    def upload_metadata(self, local_root, remote):
        """Upload the local metadata file.

        Called last, after :meth:`execute` has finished without error.
        """
        self._run_one(META_FILE, self.upload_file, (local_root, META_FILE, remote))

    def _run_jobs(self, jobs):
        if self.workers == 1 or len(jobs) <= 1:
            for path, operation, args in jobs:
                self._run_one(path, operation, args)
            return

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures = [pool.submit(self._run_one, path, operation, args) for path, operation, args in jobs]
            try:
                for future in as_completed(futures):
                    future.result()
            except TransferFailure:
                pool.shutdown(wait=True, cancel_futures=True)
                raise

    @staticmethod
    def _run_one(path, operation, args):
        try:
            operation(*args)
        except TRANSIENT_ERRORS as e:
            raise TransferFailure(f"{path}: failed after retry: {e}", path) from e
        except (BotoCoreError, ClientError, ObjectNotFound, OSError) as e:
            raise TransferFailure(f"{path}: {e}", path) from e
