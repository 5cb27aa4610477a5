"""
Location model: a local directory root or an S3 bucket/prefix pair
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..exceptions import ConfigurationError


class Direction(Enum):
    """Which way content flows between the local and remote side."""

    UPLOAD = "upload"
    DOWNLOAD = "download"


@dataclass(frozen=True)
class Location:
    """
    Either a local filesystem root (``path``) or a remote
    ``bucket:prefix`` pair. An empty prefix denotes the bucket root.
    """

    path: Optional[str] = None
    bucket: Optional[str] = None
    prefix: str = ""

    @property
    def is_remote(self) -> bool:
        return self.bucket is not None

    def key_for(self, relative_path: str) -> str:
        """
        Build the object key for a path relative to this location.

        Args:
            relative_path: Forward-slash separated path under the root

        Returns:
            S3 object key
        """
        if not self.is_remote:
            raise ValueError(f"{self} is not a remote location")
        return f"{self.prefix}/{relative_path}" if self.prefix else relative_path

    def __str__(self):
        if self.is_remote:
            return f"{self.bucket}:{self.prefix}"
        return self.path


def parse_location(text: str) -> Location:
    """
    Parse a location string: ``path`` for local, ``bucket:prefix`` for remote.

    Args:
        text: Location string from the command line

    Returns:
        Location instance

    Raises:
        ConfigurationError: If the string is empty or ends with a slash
    """
    if not text:
        raise ConfigurationError("Location must not be empty")
    if text.endswith("/"):
        raise ConfigurationError(f"Location '{text}' must not end with '/'")

    if ":" not in text:
        return Location(path=text)

    bucket, prefix = text.split(":", 1)
    if not bucket:
        raise ConfigurationError(f"Location '{text}' is missing a bucket name")
    return Location(bucket=bucket, prefix=prefix.strip("/"))


def resolve_pair(source: str, destination: str) -> Tuple[Location, Location, Direction]:
    """
    Parse source and destination strings and work out the sync direction.

    Exactly one of the two must be remote.

    Returns:
        Tuple of (source_location, destination_location, direction)

    Raises:
        ConfigurationError: For two local or two remote locations
    """
    source_location = parse_location(source)
    destination_location = parse_location(destination)

    if source_location.is_remote and destination_location.is_remote:
        raise ConfigurationError("Only one of source and destination can be remote (bucket:prefix)")
    if not source_location.is_remote and not destination_location.is_remote:
        raise ConfigurationError("One of source and destination must be remote (bucket:prefix)")

    direction = Direction.UPLOAD if destination_location.is_remote else Direction.DOWNLOAD
    return source_location, destination_location, direction
