"""
Data models for s3-meta-sync
"""
from .location import Direction, Location, parse_location, resolve_pair
from .plan import SyncPlan, SyncResult
from .snapshot import META_FILE, NO_METADATA, Snapshot, is_safe_relative_path

__all__ = [
    'Direction',
    'Location',
    'parse_location',
    'resolve_pair',
    'SyncPlan',
    'SyncResult',
    'META_FILE',
    'NO_METADATA',
    'Snapshot',
    'is_safe_relative_path',
]
