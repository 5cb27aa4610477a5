"""
s3-meta-sync - Main CLI interface
Sync folders with s3 using a metadata file with md5 sums.

Exactly one of source and destination is a ``bucket:prefix`` location;
the other is a local folder.
"""
import argparse
import sys

from botocore.exceptions import BotoCoreError, ClientError
from colorama import init

from . import __version__
from .exceptions import ConfigurationError, S3MetaSyncError
from .services.aws.operations import S3Operations
from .services.sync_engine import Syncer
from .utils.config_loader import ConfigLoader
from .utils.logger import get_logger, setup_logging

# Initialize colorama
init(autoreset=True)

log = get_logger(__name__)

DESCRIPTION = "Sync folders with s3 using a metadata file with md5 sums."

EXAMPLES = """\
Examples:
  s3-meta-sync local/folder bucket:remote/folder --key K --secret S
  s3-meta-sync bucket:remote/folder local/folder
  AWS_ACCESS_KEY_ID=K AWS_SECRET_ACCESS_KEY=S s3-meta-sync site my-bucket:

Key and secret are only needed when uploading; they default to
$AWS_ACCESS_KEY_ID and $AWS_SECRET_ACCESS_KEY.
"""


def build_parser():
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="s3-meta-sync",
        description=DESCRIPTION,
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("source", help="Local folder or bucket:prefix to sync from")
    parser.add_argument("destination", help="Local folder or bucket:prefix to sync to")
    parser.add_argument("-k", "--key", help="AWS access key")
    parser.add_argument("-s", "--secret", help="AWS secret key")
    parser.add_argument("-r", "--region", help="AWS region if not us-standard")
    parser.add_argument("--ssl-none", action="store_true",
                        help="Do not verify ssl certs")
    parser.add_argument("-p", "--parallel", type=int, default=1,
                        help="Number of files to transfer at once (default: 1)")
    parser.add_argument("-V", "--verbose", action="store_true",
                        help="Verbose mode")
    parser.add_argument("-v", "--version", action="version",
                        version=f"%(prog)s {__version__}")
    return parser


def parse_options(argv, environ=None):
    """
    Parse command line arguments.

    Args:
        argv: Argument list without the program name
        environ: Environment mapping used for credential fallback

    Returns:
        Tuple of (source, destination, SyncConfig)

    Raises:
        SystemExit: For malformed arguments (argparse usage error)
        ConfigurationError: For invalid locations or missing credentials
    """
    args = build_parser().parse_args(argv)
    config = ConfigLoader.from_args(args, environ)
    return args.source, args.destination, config


def main(argv=None):
    """
    Main entry point.

    Returns:
        Exit code: 0 on success, the error kind's code otherwise
    """
    if argv is None:
        argv = sys.argv[1:]

    try:
        source, destination, config = parse_options(argv)
    except ConfigurationError as e:
        log.error("%s", e)
        return e.exit_code

    setup_logging(verbose=config.verbose)

    try:
        syncer = Syncer(S3Operations.from_config(config), config)
        result = syncer.sync(source, destination)
    except S3MetaSyncError as e:
        log.error("%s", e)
        return e.exit_code
    except (BotoCoreError, ClientError) as e:
        log.error("S3 request failed: %s", e)
        return 1
    except OSError as e:
        log.error("%s", e)
        return 1
    except KeyboardInterrupt:
        log.warning("Interrupted, metadata was not updated")
        return 130

    print(result.summary())
    return 0
