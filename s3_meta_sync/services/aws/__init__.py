"""
AWS S3 blob-store package.

- :mod:`operations` — primitive S3 list/get/put/delete client
"""
from .operations import S3Operations

__all__ = [
    'S3Operations',
]
