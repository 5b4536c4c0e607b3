from pathlib import Path

from flask import Blueprint, current_app, jsonify, send_from_directory
from sqlalchemy import func, select
from werkzeug.security import safe_join

from jobboard.db import SessionLocal
from jobboard.errors import NotFound
from jobboard.models.job import Job

bp = Blueprint("site", __name__)


@bp.get("/api/health")
def health():
    """
    Health Check
    ---
    tags: [Meta]
    responses:
      200:
        description: API and DB health
        schema:
          type: object
          properties:
            ok: { type: boolean }
            db_rows: { type: integer }
    """
    with SessionLocal() as s:
        total = s.scalar(select(func.count()).select_from(Job))
    return jsonify({"ok": True, "db_rows": int(total or 0)})


@bp.get("/", defaults={"path": ""})
@bp.get("/<path:path>")
def serve_spa(path: str):
    """Serve the built frontend, falling back to index.html for client-side routes."""
    if path == "api" or path.startswith("api/"):
        raise NotFound("Not found")

    dist = Path(current_app.config["FRONTEND_DIST"])
    if path:
        candidate = safe_join(str(dist), path)
        if candidate is not None and Path(candidate).is_file():
            return send_from_directory(dist, path)
    if (dist / "index.html").is_file():
        return send_from_directory(dist, "index.html")
    raise NotFound("Not found")
