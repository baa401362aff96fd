"""
Sqlite3 cache database: connection and schema.
"""

from os.path import exists
from sqlite3 import Connection, connect


def connection_from_path(path: str) -> Connection:
    """
    Creates a connection to a database at ``path``.
    If the file at ``path`` doesn't exist, creates a new one and
    initializes a database schema.

    The connection is shared between the per-network tasks,
    so it is not bound to the thread that created it.
    Callers serialize access themselves.

    Args:
        path: The absolute path to the database

    Returns:
        An instance of sqlite3 Connection

    Note:
        The schema migrations are currently not supported.
    """

    is_fresh = not exists(path)
    conn = connect(path, check_same_thread=False)
    if is_fresh:
        _init_db(conn)

    return conn


def _init_db(conn: Connection):
    """
    Initialize db schema

    Args:
        conn: Connection to the database
    """
    cursor = conn.cursor()

    # Snapshots table
    cursor.execute(
        """CREATE TABLE IF NOT EXISTS snapshots
            (key text, chain_id integer, data text)"""
    )
    cursor.execute(
        """CREATE UNIQUE INDEX IF NOT EXISTS idx_snapshots_id
            ON snapshots(key,chain_id)"""
    )

    conn.commit()
