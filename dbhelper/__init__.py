"""Minimal PostgreSQL access helper."""

from .config import DEFAULT_DATABASE_URL, get_database_url
from .connection import get_connection
from .database import DatabaseHelper, DatabaseHelperError, NotConnectedError

__all__ = [
    "DEFAULT_DATABASE_URL",
    "get_database_url",
    "get_connection",
    "DatabaseHelper",
    "DatabaseHelperError",
    "NotConnectedError",
]
