"""
SQLite backups: checkpoint the WAL into the main file, then copy it into a
timestamped file under the backup directory.
"""

from __future__ import annotations

import logging
import shutil
import threading
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from jobboard.db import sqlite_path

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = "_database.db"


def backup_filename(now: Optional[datetime] = None) -> str:
    """``YYYY_MM_DD_HH_MM_SS_database.db``"""
    return (now or datetime.now()).strftime("%Y_%m_%d_%H_%M_%S") + BACKUP_SUFFIX


def list_backups(backup_dir: Path) -> List[Path]:
    """Existing backups, oldest first (the names sort chronologically)."""
    if not backup_dir.is_dir():
        return []
    return sorted(p for p in backup_dir.iterdir() if p.is_file() and p.name.endswith(BACKUP_SUFFIX))


def prune_backups(backup_dir: Path, keep: int) -> List[Path]:
    if keep <= 0:
        return []
    removed = list_backups(backup_dir)[:-keep]
    for path in removed:
        path.unlink()
        logger.info("Removed old backup %s", path)
    return removed


def checkpoint_wal(engine: Engine) -> bool:
    """Fold the WAL into the main file. False when readers or writers kept it busy."""
    with engine.connect() as conn:
        row = conn.exec_driver_sql("PRAGMA wal_checkpoint(TRUNCATE)").fetchone()
    # row is (busy, wal_frames, checkpointed_frames)
    return row is None or row[0] == 0


def perform_backup(engine: Engine, backup_dir, keep: int = 0) -> Path:
    db_path = sqlite_path(engine)
    if db_path is None:
        raise RuntimeError("Backups require a file-backed SQLite database")

    if checkpoint_wal(engine):
        logger.debug("WAL checkpoint complete for %s", db_path)
    else:
        logger.warning("WAL checkpoint of %s was blocked; the backup may miss recent writes", db_path)

    backup_dir = Path(backup_dir)
    backup_dir.mkdir(parents=True, exist_ok=True)
    destination = backup_dir / backup_filename()
    shutil.copy2(db_path, destination)
    logger.info("Backup saved to %s", destination)

    prune_backups(backup_dir, keep)
    return destination


class BackupScheduler:
    """Runs ``perform_backup`` every ``interval`` seconds on a daemon thread."""

    def __init__(self, engine: Engine, backup_dir, interval: int, keep: int = 0):
        self.engine = engine
        self.backup_dir = Path(backup_dir)
        self.interval = interval
        self.keep = keep
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="db-backup", daemon=True)
        self._thread.start()
        logger.info("Scheduled database backups every %ss into %s", self.interval, self.backup_dir)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                perform_backup(self.engine, self.backup_dir, self.keep)
            except (OSError, SQLAlchemyError):
                logger.exception("Scheduled backup failed")
