"""Error hierarchy for s3-meta-sync.

Every error the sync can end with derives from :class:`S3MetaSyncError`
so the CLI can map each kind to its own exit status.
"""


class S3MetaSyncError(Exception):
    """Base exception for sync failures."""

    exit_code = 1


class ConfigurationError(S3MetaSyncError):
    """Invalid locations or missing credentials; the sync never starts."""

    exit_code = 2


class RemoteWithoutMetadata(S3MetaSyncError):
    """Remote location has no metadata file to download from."""

    exit_code = 3


class TransferFailure(S3MetaSyncError):
    """A single file operation failed after its retry budget was spent."""

    exit_code = 4

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class ObjectNotFound(S3MetaSyncError):
    """Requested object does not exist in the blob store."""

    def __init__(self, bucket: str, key: str):
        super().__init__(f"s3://{bucket}/{key} does not exist")
        self.bucket = bucket
        self.key = key


class MetadataFormatError(S3MetaSyncError):
    """Metadata file is not a flat mapping of path to checksum."""
