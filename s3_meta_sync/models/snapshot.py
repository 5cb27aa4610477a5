"""
Snapshot model: relative path -> content checksum for one tree
"""
from typing import Dict, FrozenSet, Iterable, Iterator, Mapping, Optional

import yaml

from ..exceptions import MetadataFormatError

META_FILE = ".s3-meta-sync"


class Snapshot:
    """
    Immutable, path-ordered mapping of relative file path to MD5 checksum.

    Local snapshots also carry the relative directory paths seen while
    walking the tree; empty directories are not file entries but still
    need to be known for pruning.
    """

    __slots__ = ("_files", "_directories")

    def __init__(self, files: Optional[Mapping[str, str]] = None,
                 directories: Iterable[str] = ()):
        """
        Initialize a Snapshot.

        Args:
            files: Mapping of relative path to checksum
            directories: Relative directory paths under the root
        """
        self._files: Dict[str, str] = dict(sorted((files or {}).items()))
        self._directories: FrozenSet[str] = frozenset(directories)

    @property
    def files(self) -> Dict[str, str]:
        """Copy of the path -> checksum mapping."""
        return dict(self._files)

    @property
    def directories(self) -> FrozenSet[str]:
        return self._directories

    def get(self, path, default=None):
        return self._files.get(path, default)

    def __contains__(self, path) -> bool:
        return path in self._files

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Snapshot):
            return NotImplemented
        return self._files == other._files

    def __hash__(self):
        return hash(tuple(self._files.items()))

    def __repr__(self):
        return f"Snapshot({len(self._files)} files)"

    def to_yaml(self) -> bytes:
        """Serialize to the metadata file format."""
        text = yaml.safe_dump(self._files, explicit_start=True,
                              default_flow_style=False, allow_unicode=True)
        return text.encode("utf-8")

    @classmethod
    def from_yaml(cls, data: bytes) -> "Snapshot":
        """
        Parse a metadata file.

        Args:
            data: Raw metadata file bytes

        Returns:
            Snapshot instance

        Raises:
            MetadataFormatError: If the document is not a flat mapping
        """
        try:
            parsed = yaml.safe_load(data.decode("utf-8"))
        except (UnicodeDecodeError, yaml.YAMLError) as e:
            raise MetadataFormatError(f"Unreadable {META_FILE}: {e}") from e

        if parsed is None:
            return cls()
        if not isinstance(parsed, dict):
            raise MetadataFormatError(f"{META_FILE} must contain a mapping, got {type(parsed).__name__}")

        files = {}
        for path, checksum in parsed.items():
            path = str(path)
            if not is_safe_relative_path(path):
                raise MetadataFormatError(f"Unsafe path '{path}' in {META_FILE}")
            if isinstance(checksum, (dict, list)) or checksum is None:
                raise MetadataFormatError(f"Invalid checksum for '{path}' in {META_FILE}")
            files[path] = str(checksum)
        return cls(files)


def is_safe_relative_path(path: str) -> bool:
    """True for a forward-slash path that stays below its root.

    Absolute paths, backslashes and empty, ``.`` or ``..`` segments are
    rejected.
    """
    if not path or path.startswith("/") or "\\" in path:
        return False
    return all(part not in ("", ".", "..") for part in path.split("/"))


class _NoMetadata:
    """Remote side has no metadata file. Not the same as an empty Snapshot."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "NO_METADATA"


NO_METADATA = _NoMetadata()
