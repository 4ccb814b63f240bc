import aiosqlite
from pathlib import Path
from typing import Optional, Any
import logging

from models import JoinedChannel

logger = logging.getLogger(__name__)


class Database:
    """Async SQLite database wrapper."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._connection: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        """Connect to the database and run migrations."""
        self._connection = await aiosqlite.connect(self.db_path)
        self._connection.row_factory = aiosqlite.Row
        await self._run_migrations()

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def _run_migrations(self) -> None:
        """Run all SQL migration files."""
        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS _migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        await self._connection.commit()

        migrations_dir = Path(__file__).parent / "migrations"

        for migration_file in sorted(migrations_dir.glob("*.sql")):
            cursor = await self._connection.execute(
                "SELECT 1 FROM _migrations WHERE name = ?",
                (migration_file.name,)
            )
            if await cursor.fetchone():
                logger.debug(f"Skipping already applied migration: {migration_file.name}")
                continue

            logger.info(f"Running migration: {migration_file.name}")
            sql = migration_file.read_text()
            await self._connection.executescript(sql)
            await self._connection.execute(
                "INSERT INTO _migrations (name) VALUES (?)",
                (migration_file.name,)
            )
            await self._connection.commit()

    async def execute(
        self, query: str, params: tuple = ()
    ) -> aiosqlite.Cursor:
        """Execute a query and return the cursor."""
        cursor = await self._connection.execute(query, params)
        await self._connection.commit()
        return cursor

    async def fetch_one(
        self, query: str, params: tuple = ()
    ) -> Optional[aiosqlite.Row]:
        """Fetch a single row."""
        cursor = await self._connection.execute(query, params)
        return await cursor.fetchone()

    async def fetch_all(
        self, query: str, params: tuple = ()
    ) -> list[aiosqlite.Row]:
        """Fetch all rows."""
        cursor = await self._connection.execute(query, params)
        return await cursor.fetchall()

    async def fetch_value(
        self, query: str, params: tuple = ()
    ) -> Optional[Any]:
        """Fetch a single value from the first column of the first row."""
        row = await self.fetch_one(query, params)
        return row[0] if row else None

    # Joined channel methods

    async def join_channel(self, guild_id: str, channel_id: str) -> bool:
        """Mark a channel as joined. Returns False if it was already joined."""
        cursor = await self.execute(
            """
            INSERT OR IGNORE INTO joined_channels (guild_id, channel_id)
            VALUES (?, ?)
            """,
            (guild_id, channel_id),
        )
        return cursor.rowcount > 0

    async def leave_channel(self, guild_id: str, channel_id: str) -> bool:
        """Forget a joined channel. Returns False if it wasn't joined."""
        cursor = await self.execute(
            "DELETE FROM joined_channels WHERE guild_id = ? AND channel_id = ?",
            (guild_id, channel_id),
        )
        return cursor.rowcount > 0

    async def is_channel_joined(self, guild_id: str, channel_id: str) -> bool:
        result = await self.fetch_value(
            "SELECT 1 FROM joined_channels WHERE guild_id = ? AND channel_id = ?",
            (guild_id, channel_id),
        )
        return result is not None

    async def get_joined_channels(self) -> list[JoinedChannel]:
        """Get every joined channel across all guilds."""
        rows = await self.fetch_all(
            "SELECT guild_id, channel_id, joined_at FROM joined_channels ORDER BY joined_at, channel_id"
        )
        return [JoinedChannel(**dict(row)) for row in rows]

    # Ban methods

    async def ban_user(self, guild_id: str, user_id: str, banned_by: Optional[str] = None) -> bool:
        """Ban a user from using the bot in a guild. Returns False if already banned."""
        cursor = await self.execute(
            """
            INSERT OR IGNORE INTO banned_users (guild_id, user_id, banned_by)
            VALUES (?, ?, ?)
            """,
            (guild_id, user_id, banned_by),
        )
        return cursor.rowcount > 0

    async def unban_user(self, guild_id: str, user_id: str) -> bool:
        """Lift a ban. Returns False if the user wasn't banned."""
        cursor = await self.execute(
            "DELETE FROM banned_users WHERE guild_id = ? AND user_id = ?",
            (guild_id, user_id),
        )
        return cursor.rowcount > 0

    async def is_user_banned(self, guild_id: str, user_id: str) -> bool:
        result = await self.fetch_value(
            "SELECT 1 FROM banned_users WHERE guild_id = ? AND user_id = ?",
            (guild_id, user_id),
        )
        return result is not None

    # Data deletion methods

    async def get_all_guild_ids(self) -> set[str]:
        """Get all guild IDs that have data in the database."""
        guild_ids = set()
        for table in ["joined_channels", "banned_users"]:
            rows = await self.fetch_all(f"SELECT DISTINCT guild_id FROM {table}")
            guild_ids.update(row["guild_id"] for row in rows)
        return guild_ids

    async def delete_guild_data(self, guild_id: str) -> None:
        """Delete all data for a guild (used when bot is removed from a server)."""
        await self.execute(
            "DELETE FROM joined_channels WHERE guild_id = ?",
            (guild_id,),
        )
        await self.execute(
            "DELETE FROM banned_users WHERE guild_id = ?",
            (guild_id,),
        )
        logger.info(f"Deleted all data for guild {guild_id}")
