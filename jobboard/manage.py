#!/usr/bin/env python3
"""
Job board command line.

Run examples
------------
# Start the API (with the periodic backup timer)
jobboard serve --port 3000

# Create tables and seed the bootstrap accounts / sample jobs
jobboard init-db

# One-off backup (WAL checkpoint, then copy into BACKUP_DIR)
jobboard backup

# Merge users and jobs from another SQLite file, skipping duplicates
jobboard import-db path/to/other.db
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import Table, create_engine, text
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from jobboard.app import configure_logging, run
from jobboard.backup import perform_backup
from jobboard.config import Config
from jobboard.db import SessionLocal, init_db, init_engine
from jobboard.models import Job, User
from jobboard.seed import seed_database

logger = logging.getLogger(__name__)

IMPORT_TABLES: Tuple[Table, ...] = (User.__table__, Job.__table__)


def _coerce_row(table: Table, row: Dict[str, Any]) -> Dict[str, Any]:
    values = {}
    for column in table.columns:
        if column.name not in row:
            continue
        value = row[column.name]
        if column.name == "created_at" and isinstance(value, str):
            value = datetime.fromisoformat(value)
        values[column.name] = value
    return values


def _read_rows(source: Engine, table: Table) -> Optional[List[Dict[str, Any]]]:
    try:
        with source.connect() as conn:
            return [dict(r) for r in conn.execute(text(f"SELECT * FROM {table.name}")).mappings()]
    except OperationalError as e:
        if "no such table" in str(e):
            logger.warning("Skipping table '%s': not found in source", table.name)
            return None
        raise


def _insert_ignoring_duplicates(dest: Engine, table: Table, rows: Iterable[Dict[str, Any]]) -> Tuple[int, int]:
    imported = skipped = 0
    stmt = sqlite_insert(table).on_conflict_do_nothing()
    # one transaction per table: a failure leaves the table untouched
    with dest.begin() as conn:
        for row in rows:
            res = conn.execute(stmt, _coerce_row(table, row))
            if res.rowcount:
                imported += 1
            else:
                skipped += 1
    return imported, skipped


def import_database(source_path, dest: Engine) -> Dict[str, Tuple[int, int]]:
    """Copy users and jobs from another SQLite file. Returns ``{table: (imported, skipped)}``."""
    source_path = Path(source_path).resolve()
    if not source_path.is_file():
        raise FileNotFoundError(f"Source database not found at {source_path}")

    source = create_engine(f"sqlite:///{source_path}")
    results: Dict[str, Tuple[int, int]] = {}
    try:
        for table in IMPORT_TABLES:
            rows = _read_rows(source, table)
            if rows is None:
                continue
            if not rows:
                logger.info("Table '%s' is empty in source", table.name)
                results[table.name] = (0, 0)
                continue
            imported, skipped = _insert_ignoring_duplicates(dest, table, rows)
            logger.info(
                "Table '%s' complete: %d imported, %d skipped (duplicates)", table.name, imported, skipped
            )
            results[table.name] = (imported, skipped)
    finally:
        source.dispose()
    return results


def _setup_database(seed: bool = False) -> Engine:
    engine = init_engine(Config.DATABASE_URL)
    init_db(engine)
    if seed:
        with SessionLocal() as s:
            seed_database(s, Config.ADMIN_EMAIL, Config.ADMIN_PASSWORD, Config.BCRYPT_ROUNDS)
    return engine


def cli(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="jobboard", description="Job board API server and database tools")
    sub = ap.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--port", type=int, default=None, help=f"Port to listen on (default {Config.PORT})")

    sub.add_parser("init-db", help="Create tables and seed bootstrap data")
    sub.add_parser("backup", help="Checkpoint and copy the SQLite database into BACKUP_DIR")

    imp = sub.add_parser("import-db", help="Import users and jobs from another SQLite database file")
    imp.add_argument("source", type=str, help="Path to the source database file")

    args = ap.parse_args(argv)
    configure_logging(Config.LOG_LEVEL)

    if args.command == "serve":
        run(port=args.port)
        return 0

    if args.command == "init-db":
        _setup_database(seed=True)
        print("[OK] Database ready")
        return 0

    if args.command == "backup":
        engine = _setup_database()
        try:
            destination = perform_backup(engine, Config.BACKUP_DIR, Config.BACKUP_KEEP)
        except (OSError, RuntimeError) as e:
            print(f"[FATAL] Backup failed: {e}", file=sys.stderr)
            return 1
        print(f"[OK] Backup saved to {destination}")
        return 0

    if args.command == "import-db":
        engine = _setup_database()
        try:
            results = import_database(args.source, engine)
        except FileNotFoundError as e:
            print(f"[FATAL] {e}", file=sys.stderr)
            return 1
        for table, (imported, skipped) in results.items():
            print(f"[OK] {table}: {imported} imported, {skipped} skipped")
        return 0

    return 2


def main() -> None:
    sys.exit(cli())


if __name__ == "__main__":
    main()
