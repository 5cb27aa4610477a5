"""
Configuration loader: command line flags plus environment
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ..exceptions import ConfigurationError
from ..models.location import resolve_pair

ENV_KEY = "AWS_ACCESS_KEY_ID"
ENV_SECRET = "AWS_SECRET_ACCESS_KEY"


@dataclass(frozen=True)
class SyncConfig:
    """Immutable settings for one sync run, built once and passed around."""

    key: Optional[str] = None
    secret: Optional[str] = None
    region: Optional[str] = None
    ssl_none: bool = False
    verbose: bool = False
    parallel: int = 1

    @property
    def has_credentials(self) -> bool:
        return bool(self.key and self.secret)


class ConfigLoader:
    """Builds :class:`SyncConfig` values."""

    @staticmethod
    def from_args(args, environ: Optional[Mapping[str, str]] = None) -> SyncConfig:
        """
        Build a config from parsed CLI arguments.

        Key and secret fall back to ``AWS_ACCESS_KEY_ID`` and
        ``AWS_SECRET_ACCESS_KEY``. Both are required when the destination
        is remote; downloads may run without them.

        Args:
            args: argparse namespace with source, destination and flags
            environ: Environment mapping (defaults to ``os.environ``)

        Returns:
            SyncConfig instance

        Raises:
            ConfigurationError: For invalid locations, missing credentials
                or a non-positive worker count
        """
        if environ is None:
            environ = os.environ

        _, destination, _ = resolve_pair(args.source, args.destination)

        key = args.key or environ.get(ENV_KEY) or None
        secret = args.secret or environ.get(ENV_SECRET) or None

        if destination.is_remote:
            if not key:
                raise ConfigurationError(f"--key is required for uploads (or set {ENV_KEY})")
            if not secret:
                raise ConfigurationError(f"--secret is required for uploads (or set {ENV_SECRET})")

        parallel = getattr(args, 'parallel', 1)
        if parallel < 1:
            raise ConfigurationError("--parallel must be at least 1")

        return SyncConfig(
            key=key,
            secret=secret,
            region=args.region,
            ssl_none=bool(args.ssl_none),
            verbose=bool(args.verbose),
            parallel=parallel,
        )
