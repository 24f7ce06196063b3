"""
Entry point for ``python -m pg_schema_splitter``.

Usage:
    python -m pg_schema_splitter -d <db-url> -o <output-dir>
    python -m pg_schema_splitter -f <dump-file> -o <output-dir>
"""

import sys

from pg_schema_splitter.cli.split import main

if __name__ == "__main__":
    sys.exit(main())
