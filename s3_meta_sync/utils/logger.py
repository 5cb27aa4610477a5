"""Centralized logging configuration for s3-meta-sync.

Provides coloured console output via *colorama* and supports ``--verbose``
through log-level selection.

Usage::

    from s3_meta_sync.utils.logger import get_logger

    log = get_logger(__name__)
    log.debug("Uploading %s", path)  # only shown with --verbose
    log.error("Sync failed: %s", err)
"""
import logging
import sys

from colorama import Fore, Style

__all__ = ["get_logger", "setup_logging"]

# ---------------------------------------------------------------------------
# Custom formatter that injects colorama colours per level
# ---------------------------------------------------------------------------

_LEVEL_COLOURS = {
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


class ColouredFormatter(logging.Formatter):
    """Formatter that colours messages by level.

    DEBUG and INFO lines are printed untagged so the verbose listing
    reads as plain ``Uploading <path>`` lines; warnings and errors get a
    coloured level tag.
    """

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        if record.levelno <= logging.INFO:
            return msg

        colour = _LEVEL_COLOURS.get(record.levelno, "")
        return f"{colour}[{record.levelname}]{Style.RESET_ALL} {msg}"


# ---------------------------------------------------------------------------
# Module-level setup
# ---------------------------------------------------------------------------

_ROOT_LOGGER_NAME = "s3_meta_sync"
_configured = False


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the root *s3_meta_sync* logger.

    Call once during CLI bootstrap (typically in ``main()``).

    Args:
        verbose: If *True*, set level to ``DEBUG``.
        quiet: If *True*, set level to ``ERROR`` (overrides *verbose*).
    """
    global _configured  # noqa: PLW0603

    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.setLevel(level)

    # Avoid adding duplicate handlers on repeated calls
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColouredFormatter("%(message)s"))
        root.addHandler(handler)
    else:
        for handler in root.handlers:
            handler.setLevel(level)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the *s3_meta_sync* namespace.

    If :func:`setup_logging` has not been called yet, a default
    ``INFO``-level configuration is applied automatically.

    Args:
        name: Typically ``__name__`` of the calling module.

    Returns:
        A :class:`logging.Logger` instance.
    """
    if not _configured:
        setup_logging()

    if not name.startswith(_ROOT_LOGGER_NAME):
        name = f"{_ROOT_LOGGER_NAME}.{name}"

    return logging.getLogger(name)
