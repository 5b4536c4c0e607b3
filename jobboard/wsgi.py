"""
WSGI entry point (``gunicorn "jobboard.wsgi:app"``). No backup timer runs
here; schedule ``jobboard backup`` externally.
"""

from jobboard.app import create_app

app = create_app()
