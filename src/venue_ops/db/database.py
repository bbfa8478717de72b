"""SQLite database connection and schema."""

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)


class Database:
    """SQLite database for the DJ song collections and saved finance scenarios."""

    def __init__(self, db_path: Path | str = ":memory:") -> None:
        self._db_path = str(db_path)
        # Flask may serve requests from a worker thread other than the opener
        self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self.create_tables()
        logger.debug("Opened database %s", self._db_path)

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def create_tables(self) -> None:
        """Create all tables and indexes if they do not exist yet."""
        cur = self._conn.cursor()

        cur.executescript("""
            CREATE TABLE IF NOT EXISTS song_requests (
                song_id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                artist TEXT NOT NULL,
                venue TEXT DEFAULT '',
                request_count INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_song_requests_count
                ON song_requests(request_count);

            CREATE TABLE IF NOT EXISTS cooldown_songs (
                song_id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                artist TEXT NOT NULL,
                cooldown_until INTEGER NOT NULL,
                played_at TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_cooldown_until
                ON cooldown_songs(cooldown_until);

            CREATE TABLE IF NOT EXISTS blacklist (
                song_id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                artist TEXT NOT NULL,
                added_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS scenarios (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                inputs_json TEXT NOT NULL,
                results_json TEXT NOT NULL,
                created_at TEXT NOT NULL
            );
        """)
        self._conn.commit()

    # ------------------------------------------------------------------
    # Connection management
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    @property
    def connection(self) -> sqlite3.Connection:
        """Expose the underlying connection for the stores."""
        return self._conn
