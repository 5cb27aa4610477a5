"""
Low-level S3 primitive operations.

Provides the blob-store client the sync engine talks to: list, get,
put and delete of whole objects as raw bytes.
"""
from typing import List

from botocore.exceptions import ClientError

from ...exceptions import ObjectNotFound
from ..blob_store import BlobStore
from ...utils.aws.aws_utils import create_s3_client
from ...utils.logger import get_logger

log = get_logger(__name__)

_MISSING_CODES = ("NoSuchKey", "404", "NotFound")


class S3Operations(BlobStore):
    """Blob-store client backed by boto3.

    Only the narrow ``list``/``get``/``put``/``delete`` surface is exposed;
    any object with the same four methods can stand in for it.

    Args:
        s3_client: boto3 S3 client
    """

    def __init__(self, s3_client):
        self.s3_client = s3_client

    @classmethod
    def from_config(cls, config):
        """Build an instance with a client configured from a SyncConfig."""
        return cls(create_s3_client(config))

    def list(self, bucket: str, prefix: str = "") -> List[str]:
        """List object keys under a prefix.

        Args:
            bucket: S3 bucket name
            prefix: Key prefix (empty for the whole bucket)

        Returns:
            Object keys, directory markers excluded
        """
        keys = []
        paginator = self.s3_client.get_paginator('list_objects_v2')
        list_prefix = f"{prefix}/" if prefix else ""

        for page in paginator.paginate(Bucket=bucket, Prefix=list_prefix):
            for obj in page.get('Contents', []):
                if obj['Key'].endswith('/'):
                    continue
                keys.append(obj['Key'])

        log.debug("Listed %d object(s) under s3://%s/%s", len(keys), bucket, list_prefix)

        return keys

    def get(self, bucket: str, key: str) -> bytes:
        """Download an object's content.

        Raises:
            ObjectNotFound: If the key does not exist
        """
        try:
            response = self.s3_client.get_object(Bucket=bucket, Key=key)
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in _MISSING_CODES:
                raise ObjectNotFound(bucket, key) from e
            raise
        return response['Body'].read()

    def put(self, bucket: str, key: str, data: bytes) -> None:
        """Upload bytes to an object, replacing any previous content."""
        self.s3_client.put_object(Bucket=bucket, Key=key, Body=data)

    def delete(self, bucket: str, key: str) -> None:
        """Delete an object. Deleting a missing key is not an error."""
        self.s3_client.delete_object(Bucket=bucket, Key=key)
