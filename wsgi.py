"""
WSGI / Flask-Migrate entry point.

Usage:
    gunicorn wsgi:app
    flask --app wsgi db upgrade
    flask --app wsgi install --sample-data
"""

from privacy_guard import create_app

app = create_app()
