"""SQLite storage for short links."""

from __future__ import annotations

import logging
import sqlite3
import time
from dataclasses import asdict, dataclass

logger = logging.getLogger(__name__)

# Bump whenever the schema changes.
USER_VERSION = 1

_FIND_WITH_HITS = (
    "SELECT long_url, hits, expiry_time FROM urls "
    "WHERE short_url = ? AND (expiry_time > ? OR expiry_time = 0)"
)
_FIND_WITHOUT_HITS = (
    "SELECT long_url FROM urls "
    "WHERE short_url = ? AND (expiry_time > ? OR expiry_time = 0)"
)


@dataclass(frozen=True)
class LinkRow:
    """One stored link as returned by :func:`getall`."""

    shortlink: str
    longlink: str
    hits: int
    expiry_time: int

    def to_dict(self) -> dict:
        """Return the row as a JSON-ready mapping."""
        return asdict(self)


@dataclass(frozen=True)
class LinkInfo:
    """The target of a short link, with its hit count and expiry when asked for."""

    longlink: str
    hits: int | None = None
    expiry_time: int | None = None


def _now() -> int:
    return int(time.time())


def find_url(db: sqlite3.Connection, shortlink: str, needhits: bool) -> LinkInfo | None:
    """Look up an unexpired short link; return None if there is none."""
    query = _FIND_WITH_HITS if needhits else _FIND_WITHOUT_HITS
    row = db.execute(query, (shortlink, _now())).fetchone()
    if row is None:
        return None
    if needhits:
        longlink, hits, expiry_time = row
        return LinkInfo(longlink, hits, expiry_time)
    return LinkInfo(row[0])


def getall(db: sqlite3.Connection) -> list[LinkRow]:
    """Return every unexpired link, oldest first."""
    cursor = db.execute(
        "SELECT short_url, long_url, hits, expiry_time FROM urls "
        "WHERE expiry_time > ? OR expiry_time = 0 ORDER BY id ASC",
        (_now(),),
    )
    return [
        LinkRow(short, long_, hits, expiry or 0)
        for short, long_, hits, expiry in cursor
    ]


def add_hit(db: sqlite3.Connection, shortlink: str) -> None:
    """Count one visit of a short link."""
    db.execute("UPDATE urls SET hits = hits + 1 WHERE short_url = ?", (shortlink,))


def add_link(
    db: sqlite3.Connection, shortlink: str, longlink: str, expiry_delay: int
) -> int:
    """Store a new link and return its expiry time (0 for never).

    Raises sqlite3.IntegrityError if the short link is already taken.
    """
    cleanup(db)  # expired links must not block new ones
    expiry_time = 0 if expiry_delay == 0 else _now() + expiry_delay
    db.execute(
        "INSERT INTO urls (long_url, short_url, hits, expiry_time) VALUES (?, ?, ?, ?)",
        (longlink, shortlink, 0, expiry_time),
    )
    return expiry_time


def cleanup(db: sqlite3.Connection) -> int:
    """Delete expired links and return how many were removed."""
    now = _now()
    expired = db.execute(
        "SELECT short_url FROM urls WHERE ? >= expiry_time AND expiry_time > 0",
        (now,),
    ).fetchall()
    for (shortlink,) in expired:
        logger.info("Expired link marked for deletion: %s", shortlink)

    deleted = db.execute(
        "DELETE FROM urls WHERE ? >= expiry_time AND expiry_time > 0", (now,)
    ).rowcount
    if deleted == 1:
        logger.info("1 link was deleted.")
    elif deleted > 1:
        logger.info("%d links were deleted.", deleted)
    return deleted


def delete_link(db: sqlite3.Connection, shortlink: str) -> bool:
    """Delete a short link; return whether anything was removed."""
    try:
        cursor = db.execute("DELETE FROM urls WHERE short_url = ?", (shortlink,))
    except sqlite3.Error:
        return False
    return cursor.rowcount > 0


def open_db(path: str) -> sqlite3.Connection:
    """Open the database at ``path``, creating and migrating the schema as needed."""
    db = sqlite3.connect(path, isolation_level=None, check_same_thread=False)

    (table_exists,) = db.execute(
        "SELECT count(*) FROM sqlite_master WHERE type = 'table' AND name = 'urls'"
    ).fetchone()

    db.execute(
        """CREATE TABLE IF NOT EXISTS urls (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            long_url TEXT NOT NULL,
            short_url TEXT NOT NULL,
            hits INTEGER NOT NULL,
            expiry_time INTEGER NOT NULL DEFAULT 0
        )"""
    )
    db.execute("CREATE UNIQUE INDEX IF NOT EXISTS idx_short_url ON urls (short_url)")

    if table_exists == 0:
        current_version = USER_VERSION
    else:
        row = db.execute("PRAGMA user_version").fetchone()
        current_version = row[0] if row else 0

    # Migration 1: add expiry_time.
    if current_version < 1:
        db.execute("ALTER TABLE urls ADD COLUMN expiry_time INTEGER NOT NULL DEFAULT 0")

    db.execute("CREATE INDEX IF NOT EXISTS idx_expiry_time ON urls (expiry_time)")
    db.execute(f"PRAGMA user_version = {int(USER_VERSION)}")
    return db