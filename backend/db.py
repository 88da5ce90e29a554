"""
Database connection helper.

This module centralizes how connections are created. Every call opens a
new psycopg connection to `settings.db_url`; rows come back as dicts so
the repository can map columns by name.

Usage:
    from db import get_conn
    with get_conn() as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT 1;")

Note: switching to a connection pool or async DB driver will change the
`get_conn()` implementation, and repository code should remain unchanged.
"""

import psycopg
from psycopg.rows import dict_row

from settings import settings


def get_conn(autocommit: bool = False):
    """Return a new psycopg connection using `settings.db_url`.

    `connect_timeout` keeps HTTP requests from hanging when the database
    is unreachable. The update-trigger listener asks for `autocommit`
    so LISTEN takes effect immediately.
    """

    return psycopg.connect(
        settings.db_url,
        connect_timeout=settings.connect_timeout,
        autocommit=autocommit,
        row_factory=dict_row,
    )
