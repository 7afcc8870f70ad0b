#!/usr/bin/env python3
"""
Migration Script.

Applies pending migrations to the redirects database.

Usage:
    python scripts/migrate.py                  # ./data/smart_redirects.db
    python scripts/migrate.py --db /path/x.db  # Custom database
    python scripts/migrate.py --status         # List pending, apply nothing
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from smart_redirects.adapters.sqlite.migrator import SQLiteMigrator

DEFAULT_DATA_DIR = os.environ.get("SMART_REDIRECTS_DATA_DIR", "./data")
DB_FILENAME = "smart_redirects.db"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Apply redirect database migrations")
    parser.add_argument("--db", default=str(Path(DEFAULT_DATA_DIR) / DB_FILENAME))
    parser.add_argument("--migrations", default="migrations")
    parser.add_argument("--status", action="store_true", help="Only list pending migrations")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    Path(args.db).parent.mkdir(parents=True, exist_ok=True)
    migrator = SQLiteMigrator(args.db, args.migrations)

    if args.status:
        pending = migrator.pending_migrations()
        for name in pending:
            print(name)
        return 1 if pending else 0

    try:
        migrator.run_migrations()
    except RuntimeError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
