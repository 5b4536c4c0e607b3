import logging
import threading
from datetime import datetime

import pytest
from sqlalchemy import create_engine, func, insert, select

from jobboard import backup
from jobboard.app import start_backup_scheduler
from jobboard.backup import BackupScheduler, backup_filename, checkpoint_wal, list_backups, perform_backup, prune_backups
from jobboard.db import Base, get_engine
from jobboard.manage import cli, import_database
from jobboard.models import Job, User
from tests.conftest import make_app


def test_backup_filename_format():
    assert backup_filename(datetime(2024, 3, 9, 7, 5, 1)) == "2024_03_09_07_05_01_database.db"


def test_perform_backup_copies_a_readable_database(app, tmp_path):
    backup_dir = tmp_path / "backups"
    destination = perform_backup(get_engine(), backup_dir)

    assert destination.parent == backup_dir
    assert destination.name.endswith("_database.db")

    copy = create_engine(f"sqlite:///{destination}")
    try:
        with copy.connect() as conn:
            assert conn.scalar(select(func.count()).select_from(Job.__table__)) == 6
            assert conn.scalar(select(func.count()).select_from(User.__table__)) == 2
    finally:
        copy.dispose()


def test_perform_backup_prunes_oldest(app, tmp_path):
    backup_dir = tmp_path / "backups"
    backup_dir.mkdir()
    for stamp in ("2020_01_01_00_00_00", "2020_01_02_00_00_00", "2020_01_03_00_00_00"):
        (backup_dir / f"{stamp}_database.db").write_bytes(b"old")
    (backup_dir / "notes.txt").write_text("not a backup")

    destination = perform_backup(get_engine(), backup_dir, keep=2)

    names = [p.name for p in list_backups(backup_dir)]
    assert names == ["2020_01_03_00_00_00_database.db", destination.name]
    assert (backup_dir / "notes.txt").exists()


def test_checkpoint_wal_reports_success(app):
    assert checkpoint_wal(get_engine()) is True


def test_blocked_checkpoint_warns_and_still_copies(app, tmp_path, monkeypatch, caplog):
    monkeypatch.setattr(backup, "checkpoint_wal", lambda engine: False)

    with caplog.at_level(logging.WARNING, logger="jobboard.backup"):
        destination = perform_backup(get_engine(), tmp_path / "backups")

    assert destination.exists()
    assert "was blocked" in caplog.text


def test_prune_keep_zero_keeps_everything(tmp_path):
    (tmp_path / "2020_01_01_00_00_00_database.db").write_bytes(b"old")
    assert prune_backups(tmp_path, 0) == []
    assert len(list_backups(tmp_path)) == 1


def test_backup_requires_sqlite_file():
    engine = create_engine("sqlite://")
    with pytest.raises(RuntimeError):
        perform_backup(engine, "unused")


def test_scheduler_stops_cleanly(app, tmp_path):
    scheduler = BackupScheduler(get_engine(), tmp_path / "backups", interval=3600)
    scheduler.start()
    scheduler.stop(timeout=5)
    assert list_backups(tmp_path / "backups") == []


def test_create_app_starts_no_scheduler_until_asked(tmp_path):
    app = make_app(tmp_path, BACKUP_INTERVAL_SECONDS=3600)
    assert "db-backup" not in {t.name for t in threading.enumerate()}

    app = make_app(tmp_path, BACKUP_INTERVAL_SECONDS=0)
    assert start_backup_scheduler(app) is None

    app = make_app(tmp_path, BACKUP_INTERVAL_SECONDS=3600)
    scheduler = start_backup_scheduler(app)
    try:
        assert isinstance(scheduler, BackupScheduler)
        assert scheduler.interval == 3600
    finally:
        scheduler.stop(timeout=5)


@pytest.fixture
def source_db(tmp_path):
    path = tmp_path / "source.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    stamp = datetime(2023, 6, 1, 12, 0, 0)
    with engine.begin() as conn:
        conn.execute(insert(User.__table__), [
            {"id": 1, "name": "Admin", "email": "admin@mail.com", "password": "x", "role": "admin", "created_at": stamp},
            {"id": 50, "name": "Imported", "email": "imported@mail.com", "password": "x", "role": "user", "created_at": stamp},
        ])
        conn.execute(insert(Job.__table__), [
            {"id": 1, "type": "Remote", "title": "Duplicate", "location": "Nowhere", "contact_email": "a@b.co", "created_at": stamp},
            {"id": 100, "type": "Contract", "title": "Imported Job", "location": "Lisbon", "contact_email": "a@b.co", "created_at": stamp},
        ])
    engine.dispose()
    return path


def test_import_database_skips_duplicates(app, source_db, client):
    results = import_database(source_db, get_engine())

    assert results == {"users": (1, 1), "jobs": (1, 1)}
    job = client.get("/api/jobs/100").get_json()
    assert job["title"] == "Imported Job"
    assert job["created_at"] == "2023-06-01 12:00:00"
    assert client.get("/api/jobs/1").get_json()["title"] == "Senior Vue Developer"


def test_import_database_skips_missing_tables(app, tmp_path):
    path = tmp_path / "unrelated.db"
    engine = create_engine(f"sqlite:///{path}")
    with engine.begin() as conn:
        conn.exec_driver_sql("CREATE TABLE notes (id INTEGER PRIMARY KEY)")
    engine.dispose()

    assert import_database(path, get_engine()) == {}


def test_import_database_missing_file(app, tmp_path):
    with pytest.raises(FileNotFoundError):
        import_database(tmp_path / "missing.db", get_engine())


def test_cli_import_reports_missing_source(tmp_path, monkeypatch, capsys):
    from jobboard.config import Config

    monkeypatch.setattr(Config, "DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    assert cli(["import-db", str(tmp_path / "missing.db")]) == 1
    assert "Source database not found" in capsys.readouterr().err
