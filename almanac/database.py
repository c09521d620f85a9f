# almanac/database.py
"""
Handles asynchronous database interactions using asyncpg for PostgreSQL.
Encapsulates all database logic within the DatabaseManager class.
"""
import json
import logging
from typing import Optional, Dict, Any, List

import asyncpg
from pydantic_settings import BaseSettings

log = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "almanac"
    db_password: str = ""
    db_name: str = "almanacdb"

    class Config:
        env_file = ".env"
        env_prefix = "ALMANAC_"
        case_sensitive = False
        extra = "ignore"


def _decode_json(value: Any, default: Any = None) -> Any:
    """JSONB columns arrive as text unless a codec is registered."""
    if value is None:
        return default
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            log.warning("Malformed JSON in database column: %.60s", value)
            return default
    return value


class DatabaseManager:
    """A class to manage the application's PostgreSQL connection pool and queries."""

    def __init__(self, settings: Optional[DatabaseSettings] = None):
        self.settings = settings or DatabaseSettings()
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Creates the connection pool."""
        try:
            self.pool = await asyncpg.create_pool(
                host=self.settings.db_host,
                port=self.settings.db_port,
                user=self.settings.db_user,
                password=self.settings.db_password,
                database=self.settings.db_name,
            )
            log.info("Successfully connected to PostgreSQL and created connection pool.")
        except Exception:
            log.exception("!!! Failed to connect to PostgreSQL database. Server cannot start.")
            raise

    async def close(self):
        """Closes the connection pool."""
        if self.pool:
            await self.pool.close()
            log.info("PostgreSQL connection pool closed.")

    async def execute_query(self, query: str, *params) -> str:
        """Executes a data-modifying query. Returns the status string."""
        if not self.pool: raise ConnectionError("Database pool not initialized.")
        async with self.pool.acquire() as conn:
            return await conn.execute(query, *params)

    async def fetch_one_query(self, query: str, *params) -> Optional[asyncpg.Record]:
        """Executes a query that is expected to return at most one row."""
        if not self.pool: raise ConnectionError("Database pool not initialized.")
        async with self.pool.acquire() as conn:
            return await conn.fetchrow(query, *params)

    async def fetch_all_query(self, query: str, *params) -> List[asyncpg.Record]:
        """Executes a query that returns multiple rows."""
        if not self.pool: raise ConnectionError("Database pool not initialized.")
        async with self.pool.acquire() as conn:
            return await conn.fetch(query, *params)

    async def init_db(self):
        """Initializes the database schema for PostgreSQL."""
        log.info("--- Initializing PostgreSQL database schema ---")
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute("""
                    CREATE TABLE IF NOT EXISTS world_settings (
                        key TEXT PRIMARY KEY,
                        value JSONB,
                        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                    )
                """)
                await conn.execute("""
                    CREATE TABLE IF NOT EXISTS scenes (
                        id SERIAL PRIMARY KEY,
                        name TEXT NOT NULL,
                        is_active BOOLEAN NOT NULL DEFAULT FALSE,
                        -- darkness sync mode, brightness multiplier, climate zone override
                        flags JSONB DEFAULT '{}'::jsonb,
                        -- darkness level, base/dark lighting, last transition
                        environment JSONB DEFAULT '{}'::jsonb,
                        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                    )
                """)
        log.info("--- Database schema ready ---")

    # --- World settings ---
    async def load_world_settings(self) -> Dict[str, Any]:
        """Null or undecodable values are left out so readers fall back to defaults."""
        rows = await self.fetch_all_query("SELECT key, value FROM world_settings")
        values = {}
        for row in rows:
            value = _decode_json(row['value'])
            if value is not None:
                values[row['key']] = value
        return values

    async def save_world_setting(self, key: str, value: Any) -> str:
        """Upserts a single world setting."""
        query = """
            INSERT INTO world_settings (key, value, updated_at)
            VALUES ($1, $2, NOW())
            ON CONFLICT (key) DO UPDATE SET
                value = EXCLUDED.value,
                updated_at = NOW();
        """
        return await self.execute_query(query, key, json.dumps(value))

    # --- Scenes ---
    async def load_scenes(self) -> List[Dict[str, Any]]:
        rows = await self.fetch_all_query("SELECT id, name, is_active, flags, environment FROM scenes ORDER BY id")
        scenes = []
        for row in rows:
            record = dict(row)
            record['flags'] = _decode_json(record.get('flags'), {})
            record['environment'] = _decode_json(record.get('environment'), {})
            scenes.append(record)
        return scenes

    async def save_scene_flags(self, scene_id: int, flags: Dict[str, Any]) -> str:
        query = "UPDATE scenes SET flags = $1, updated_at = NOW() WHERE id = $2"
        return await self.execute_query(query, json.dumps(flags), scene_id)

    async def save_scene_environment(self, scene_id: int, environment: Dict[str, Any]) -> str:
        query = "UPDATE scenes SET environment = $1, updated_at = NOW() WHERE id = $2"
        return await self.execute_query(query, json.dumps(environment), scene_id)

    async def set_active_scene(self, scene_id: int) -> str:
        """Marks one scene active and every other scene inactive."""
        query = "UPDATE scenes SET is_active = (id = $1), updated_at = NOW()"
        return await self.execute_query(query, scene_id)


db_manager = DatabaseManager()
