"""Shared database connection factory."""

from typing import Optional

import psycopg2

from .config import get_database_url


def get_connection(url: Optional[str] = None):
    """Create database connection from the resolved URL."""
    return psycopg2.connect(get_database_url(url))
