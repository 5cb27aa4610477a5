"""
Main entry point when running as module: python -m s3_meta_sync
"""
import sys

from .cli import main

if __name__ == '__main__':
    sys.exit(main())
