"""Persistence utilities sub-package.

Contains binary file I/O, checksumming and tree walking.
"""
from .file_utils import (
    ensure_dir,
    local_path,
    read_bytes,
    write_bytes,
    md5_file,
    walk_tree,
)

__all__ = [
    'ensure_dir',
    'local_path',
    'read_bytes',
    'write_bytes',
    'md5_file',
    'walk_tree',
]
