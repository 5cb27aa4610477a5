"""Utility modules for s3-meta-sync.

Sub-packages:
- persistence/ — byte-oriented local file I/O and tree walking
- aws/ — boto3 client construction
"""

from .config_loader import ConfigLoader, SyncConfig
from .persistence.file_utils import ensure_dir, md5_file, read_bytes, write_bytes
from .logger import get_logger, setup_logging

__all__ = [
    'ConfigLoader',
    'SyncConfig',
    'ensure_dir',
    'md5_file',
    'read_bytes',
    'write_bytes',
    'get_logger',
    'setup_logging',
]
