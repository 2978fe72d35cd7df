"""SQLite connections for the analysis history store, one per thread and database file."""
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Optional

from rely import config

logger = logging.getLogger(__name__)

HISTORY_TABLE = "analysis_history"
BUSY_TIMEOUT_S = 5.0

_local = threading.local()


def _open_conns() -> dict[str, sqlite3.Connection]:
    conns = getattr(_local, "conns", None)
    if conns is None:
        conns = _local.conns = {}
    return conns


def get_conn(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """Return this thread's connection to `db_path` (defaults to config.DB_PATH)."""
    key = str(Path(db_path or config.DB_PATH).resolve())
    conns = _open_conns()
    conn = conns.get(key)
    if conn is None:
        conn = sqlite3.connect(key, timeout=BUSY_TIMEOUT_S, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        # WAL lets the history browser read while an analysis is being saved
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        conns[key] = conn
    return conn


def has_history_table(conn: sqlite3.Connection) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type='table' AND name=?", (HISTORY_TABLE,)
    ).fetchone()
    return row is not None


def init_db(db_path: Optional[Path] = None, schema_path: Optional[Path] = None) -> sqlite3.Connection:
    """Apply schema.sql (idempotent) and return the ready connection."""
    db_path = Path(db_path or config.DB_PATH)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = get_conn(db_path)
    existed = has_history_table(conn)
    with open(schema_path or config.SCHEMA_PATH, "r", encoding="utf-8") as f:
        conn.executescript(f.read())
    conn.commit()
    if not existed:
        logger.info("Created %s in %s", HISTORY_TABLE, db_path)
    return conn


def close_conn(db_path: Optional[Path] = None) -> None:
    """Close and forget this thread's connection to `db_path`, if any."""
    key = str(Path(db_path or config.DB_PATH).resolve())
    conn = _open_conns().pop(key, None)
    if conn is not None:
        conn.close()
