# backend/app/routes/__init__.py
"""HTTP routes; every application router lives in v1/."""
