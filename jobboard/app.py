from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from flasgger import Swagger
from flask import Flask
from flask_cors import CORS

from jobboard import __version__
from jobboard.backup import BackupScheduler
from jobboard.config import DEFAULT_JWT_SECRET, Config
from jobboard.db import SessionLocal, get_engine, init_db, init_engine, sqlite_path
from jobboard.errors import register_error_handlers
from jobboard.routes.job_routes import bp as job_bp
from jobboard.routes.site_routes import bp as site_bp
from jobboard.routes.user_routes import bp as user_bp
from jobboard.security import init_security
from jobboard.seed import seed_database

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("jobboard").setLevel(level.upper())


def create_app(config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__, static_folder=None)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(app.config["LOG_LEVEL"])
    if app.config["JWT_SECRET"] == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set; using the insecure development default")

    engine = init_engine(app.config["DATABASE_URL"])
    init_db(engine)
    if app.config["SEED_DATABASE"]:
        with SessionLocal() as s:
            seed_database(
                s,
                admin_email=app.config["ADMIN_EMAIL"],
                admin_password=app.config["ADMIN_PASSWORD"],
                rounds=app.config["BCRYPT_ROUNDS"],
            )

    init_security(app)
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
    )

    app.register_blueprint(user_bp)
    app.register_blueprint(job_bp)
    app.register_blueprint(site_bp)
    register_error_handlers(app)

    # Swagger UI at /apidocs
    Swagger(app, template={
        "info": {"title": "Job Board API", "version": __version__},
        "basePath": "/",
        "securityDefinitions": {
            "bearerAuth": {"type": "apiKey", "name": "Authorization", "in": "header"},
        },
    })

    return app


def start_backup_scheduler(app: Flask) -> Optional[BackupScheduler]:
    interval = app.config["BACKUP_INTERVAL_SECONDS"]
    engine = get_engine()
    if interval <= 0:
        return None
    if sqlite_path(engine) is None:
        logger.info("Periodic backups disabled: database is not a SQLite file")
        return None
    scheduler = BackupScheduler(engine, app.config["BACKUP_DIR"], interval, app.config["BACKUP_KEEP"])
    scheduler.start()
    return scheduler


def run(port: Optional[int] = None) -> None:
    app = create_app()
    scheduler = start_backup_scheduler(app)
    port = port or app.config["PORT"]
    logger.info("Server is running on http://localhost:%s (API at /api/jobs)", port)
    try:
        app.run(host="0.0.0.0", port=port, threaded=True)
    finally:
        if scheduler is not None:
            scheduler.stop(timeout=5)


if __name__ == "__main__":
    run()
