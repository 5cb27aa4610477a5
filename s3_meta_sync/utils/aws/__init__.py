"""AWS utilities sub-package.

Contains boto3 client construction.
"""
from .aws_utils import create_s3_client

__all__ = [
    'create_s3_client',
]
