# backend/app/models/types.py
"""
Custom SQLAlchemy types that work across different database backends.
"""

from sqlalchemy import JSON, Text
from sqlalchemy.dialects.postgresql import JSONB

# JSONB on PostgreSQL, plain JSON on SQLite (unit tests).
JSONDocument = JSONB(astext_type=Text()).with_variant(JSON(), "sqlite")
