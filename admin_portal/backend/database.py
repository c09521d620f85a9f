import json
import logging
import asyncpg
from .config import settings

log = logging.getLogger(__name__)

class Database:
    def __init__(self):
        self.pool = None

    async def connect(self):
        """Create the connection pool"""
        self.pool = await asyncpg.create_pool(
            host=settings.db_host,
            port=settings.db_port,
            user=settings.db_user,
            password=settings.db_password,
            database=settings.db_name,
            ssl=settings.db_sslmode,
            min_size=1,
            max_size=5,
            command_timeout=60
        )
        log.info("Database pool created: %s@%s", settings.db_name, settings.db_host)

    async def disconnect(self):
        """Close the connection pool"""
        if self.pool:
            await self.pool.close()
            log.info("Database pool closed.")

    async def fetch_one(self, query: str, *args):
        """Fetch a single row"""
        async with self.pool.acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetch_all(self, query: str, *args):
        """Fetch multiple rows"""
        async with self.pool.acquire() as conn:
            return await conn.fetch(query, *args)

    async def get_setting(self, key: str, default=None):
        """Read one world setting, decoding its JSONB value."""
        row = await self.fetch_one("SELECT value FROM world_settings WHERE key = $1", key)
        if not row or row['value'] is None:
            return default
        value = row['value']
        return json.loads(value) if isinstance(value, str) else value

db = Database()
