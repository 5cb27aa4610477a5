"""
s3-meta-sync — Sync folders with S3 using a metadata file.

Keeps a local directory and an S3 bucket/prefix in step by comparing
MD5 checksums recorded in a ``.s3-meta-sync`` file on both sides, so
only changed files are transferred.
"""

__version__ = "0.4.0"
