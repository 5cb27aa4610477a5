"""AWS utilities for session management.

Builds the boto3 S3 client used by :class:`~s3_meta_sync.services.aws.S3Operations`
from a :class:`~s3_meta_sync.utils.config_loader.SyncConfig`.
"""
import boto3
from botocore import UNSIGNED
from botocore.config import Config


def create_s3_client(config):
    """Create an S3 client for the given sync configuration.

    Without credentials the client sends unsigned requests, which is
    enough to download from a publicly readable bucket.

    Args:
        config: SyncConfig with key, secret, region and ssl_none

    Returns:
        boto3 S3 client

    Example:
        >>> client = create_s3_client(SyncConfig(key='k', secret='s', region='us-west-2'))
    """
    if config.has_credentials:
        session = boto3.Session(
            aws_access_key_id=config.key,
            aws_secret_access_key=config.secret,
            region_name=config.region,
        )
        client_config = Config(retries={'max_attempts': 1, 'mode': 'standard'})
    else:
        session = boto3.Session(region_name=config.region)
        client_config = Config(signature_version=UNSIGNED,
                               retries={'max_attempts': 1, 'mode': 'standard'})

    return session.client('s3', verify=not config.ssl_none, config=client_config)
