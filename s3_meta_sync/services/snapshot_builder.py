"""
Metadata snapshot builder.

Produces a :class:`Snapshot` for a local tree (by walking and hashing
it) or for a remote location (by fetching its metadata file).
"""
import os

from ..exceptions import ObjectNotFound, RemoteWithoutMetadata
from ..models.snapshot import META_FILE, NO_METADATA, Snapshot
from ..utils.logger import get_logger
from ..utils.persistence.file_utils import local_path, md5_file, walk_tree, write_bytes
from .transfer import with_transient_retry

log = get_logger(__name__)


class SnapshotBuilder:
    """Builds snapshots of local and remote trees.

    Args:
        store: Blob store used to fetch remote metadata files
    """

    def __init__(self, store):
        self.store = store

    def build_local(self, root):
        """Hash every regular file under *root*.

        The root-level metadata file is left out. A missing root gives an
        empty snapshot.

        Args:
            root: Local directory

        Returns:
            Snapshot including the directories found
        """
        if not os.path.isdir(root):
            return Snapshot()

        files, directories = walk_tree(root)
        checksums = {
            path: md5_file(local_path(root, path))
            for path in files
            if path != META_FILE
        }
        return Snapshot(checksums, directories)

    def build_remote(self, location):
        """Fetch and parse the metadata file at a remote location.

        Raises:
            RemoteWithoutMetadata: If the location has no metadata file
        """
        key = location.key_for(META_FILE)
        log.debug("Downloading %s", key)
        try:
            data = with_transient_retry(self.store.get, location.bucket, key)
        except ObjectNotFound as e:
            raise RemoteWithoutMetadata(f"{location} has no {META_FILE}") from e
        return Snapshot.from_yaml(data)

    def read_remote_or_none(self, location):
        """Like :meth:`build_remote`, but returns ``NO_METADATA`` when missing."""
        try:
            return self.build_remote(location)
        except RemoteWithoutMetadata:
            return NO_METADATA

    def write_local(self, root, snapshot):
        """Write *snapshot* as the metadata file at *root*."""
        write_bytes(local_path(root, META_FILE), snapshot.to_yaml())
