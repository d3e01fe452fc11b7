"""
SQLite Database for Link Storage

Design Decision: Why SQLite?
============================

Options Considered:
1. SQLite - Embedded, no server, ACID compliant
2. JSON file - Simple, but no atomic single-row updates
3. PostgreSQL/MySQL - Overkill, requires server

Decision: SQLite with aiosqlite
- Zero configuration, single file next to the operator's data
- Every operation is one parameterized statement, so concurrent
  requests never see a half-applied change
- Async support via aiosqlite keeps the serving event loop free

Tables:
- naslinks: identifier -> (path, fingerprint, size)

There are no multi-statement transactions. A read followed by a
delete can race with another request doing the same; the second
delete simply affects zero rows.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional, List, Dict, Any

import aiosqlite

from ..errors import StoreError

logger = logging.getLogger(__name__)


class Database:
    """
    SQLite database holding the naslink records.

    Every sqlite failure is re-raised as StoreError.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._connection: Optional[aiosqlite.Connection] = None

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    async def connect(self):
        """Open database connection and create the schema."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
            await self._init_schema()
        except (OSError, sqlite3.Error) as e:
            # A half-opened connection keeps its worker thread alive
            if self._connection is not None:
                await self._connection.close()
                self._connection = None
            raise StoreError(f"Cannot open database {self.db_path}: {e}") from e

        logger.debug(f"Database connected: {self.db_path}")

    async def close(self):
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def _init_schema(self):
        await self._connection.executescript("""
            CREATE TABLE IF NOT EXISTS naslinks (
                id INTEGER PRIMARY KEY,
                identifier TEXT NOT NULL UNIQUE,
                path TEXT NOT NULL,
                fingerprint TEXT NOT NULL,
                size INTEGER NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE INDEX IF NOT EXISTS idx_naslinks_path ON naslinks(path);
        """)
        await self._connection.commit()

    def _conn(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise StoreError("Database is not connected")
        return self._connection

    async def _write(self, sql: str, params: tuple) -> int:
        """Run one statement, commit, and return the affected row count."""
        conn = self._conn()
        try:
            cursor = await conn.execute(sql, params)
            await conn.commit()
            return cursor.rowcount
        except sqlite3.Error as e:
            raise StoreError(f"Database write failed: {e}") from e

    async def _read(self, sql: str, params: tuple = ()) -> List[aiosqlite.Row]:
        conn = self._conn()
        try:
            async with conn.execute(sql, params) as cursor:
                return list(await cursor.fetchall())
        except sqlite3.Error as e:
            raise StoreError(f"Database read failed: {e}") from e

    # === Links ===

    async def insert_link(self, identifier: str, path: str, fingerprint: str, size: int):
        """Insert a new link record."""
        await self._write(
            """INSERT INTO naslinks (identifier, path, fingerprint, size)
               VALUES (?, ?, ?, ?)""",
            (identifier, path, fingerprint, size)
        )

    async def get_link(self, identifier: str) -> Optional[Dict[str, Any]]:
        """Get the record for an identifier, or None."""
        rows = await self._read(
            "SELECT identifier, path, fingerprint, size FROM naslinks WHERE identifier = ?",
            (identifier,)
        )
        # Duplicate identifiers cannot be inserted; if any exist, the last one wins
        return dict(rows[-1]) if rows else None

    async def find_identifier(self, path: str) -> Optional[str]:
        """Get the identifier registered for a path, or None."""
        rows = await self._read(
            "SELECT identifier FROM naslinks WHERE path = ? ORDER BY id",
            (path,)
        )
        return rows[-1]['identifier'] if rows else None

    async def delete_link(self, identifier: str) -> bool:
        """Delete a record. Returns False if nothing was deleted."""
        deleted = await self._write(
            "DELETE FROM naslinks WHERE identifier = ?",
            (identifier,)
        )
        return deleted > 0

    async def list_links(self) -> List[Dict[str, Any]]:
        """Get all records."""
        rows = await self._read(
            "SELECT identifier, path, fingerprint, size FROM naslinks ORDER BY id"
        )
        return [dict(row) for row in rows]

    async def count_links(self) -> int:
        rows = await self._read("SELECT COUNT(*) AS n FROM naslinks")
        return rows[0]['n']


async def init_database(db_path: Path) -> Database:
    """Initialize and return a connected database instance."""
    db = Database(db_path)
    await db.connect()
    return db
