"""Dialect-aware column helpers shared by the models."""
import uuid

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON as SA_JSON


def uuid_col_type():
    # ids are stored as text to keep SQLite and Postgres schemas identical
    return String(36)


def json_col_type():
    # Postgres gets JSONB, everything else plain JSON
    return SA_JSON().with_variant(JSONB(), "postgresql")


def new_id() -> str:
    return str(uuid.uuid4())
