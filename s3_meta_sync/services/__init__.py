"""
Sync services for s3-meta-sync.

- snapshot_builder — local tree hashing and remote metadata fetch
- diff_engine — snapshot comparison into a SyncPlan
- transfer — plan execution with the transient-error retry
- sync_engine — the Syncer orchestrator
- aws/ — boto3-backed blob store
"""
from .blob_store import BlobStore
from .diff_engine import DiffEngine
from .snapshot_builder import SnapshotBuilder
from .sync_engine import Syncer
from .transfer import TRANSIENT_ERRORS, TransferExecutor, with_transient_retry
from .aws.operations import S3Operations

__all__ = [
    'BlobStore',
    'DiffEngine',
    'SnapshotBuilder',
    'Syncer',
    'TRANSIENT_ERRORS',
    'TransferExecutor',
    'with_transient_retry',
    'S3Operations',
]
