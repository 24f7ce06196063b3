"""
CLI entry point for pg_schema_splitter.

Usage:
    python -m pg_schema_splitter.cli -d <db-url> -o <output-dir>
    python -m pg_schema_splitter.cli -f <dump-file> -o <output-dir>
"""

import sys

from pg_schema_splitter.cli.split import main

if __name__ == "__main__":
    sys.exit(main())
