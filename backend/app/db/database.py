import sqlite3
import os
from contextlib import contextmanager
from pathlib import Path
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def get_schema_path() -> str:
    """Get the path to schema.sql file."""
    return os.path.join(os.path.dirname(__file__), "schema.sql")


def init_database() -> None:
    """Create the report/assignment/staff tables if they don't exist."""
    db_path = Path(settings.db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with open(get_schema_path(), 'r') as f:
        schema_sql = f.read()

    with get_db_connection() as conn:
        conn.executescript(schema_sql)
        conn.commit()

    logger.info(f"Database initialized at {settings.db_path}")


@contextmanager
def get_db_connection(read_only: bool = False):
    """
    Context manager for database connections.

    Snapshot reads open the file read-only, so a missing database surfaces
    as an error instead of silently creating an empty one.
    """
    if read_only:
        uri = f"{Path(settings.db_path).resolve().as_uri()}?mode=ro"
        conn = sqlite3.connect(uri, uri=True)
    else:
        conn = sqlite3.connect(settings.db_path)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def database_reachable() -> bool:
    """Cheap probe used by the health endpoint."""
    try:
        with get_db_connection(read_only=True) as conn:
            conn.execute("SELECT 1 FROM reports LIMIT 1").fetchone()
        return True
    except sqlite3.Error as e:
        logger.warning(f"Database probe failed: {e}")
        return False
