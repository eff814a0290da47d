# backend/app/tasks/__init__.py
"""
Celery tasks package.

Importing this package exposes the configured Celery application; the
maintenance tasks register themselves through ``celery_app.conf.imports``.
"""

from app.tasks.celery_app import celery_app

__all__ = ["celery_app"]
