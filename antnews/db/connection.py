"""Database connection management."""

import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool


class DatabaseConfig:
    """Database configuration."""

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize database config from dict."""
        self.host = config.get("host", "localhost")
        self.port = config.get("port", 5432)
        self.database = config.get("database", "antnews")
        self.user = config.get("user", "antnews")
        self.min_size = config.get("min_size", 1)
        self.max_size = config.get("max_size", 10)

        # Handle password from environment variable if specified
        password_env = config.get("password_env")
        self.password = config.get("password") or ""
        if not self.password and password_env:
            self.password = os.environ.get(password_env, "")

    @property
    def connection_string(self) -> str:
        """Get psycopg connection string."""
        return make_conninfo(
            host=self.host,
            port=self.port,
            dbname=self.database,
            user=self.user,
            password=self.password or None,
        )


@asynccontextmanager
async def open_pool(config: Dict[str, Any]) -> AsyncIterator[AsyncConnectionPool]:
    """Open a connection pool for the duration of the block."""
    db_config = DatabaseConfig(config)
    pool = AsyncConnectionPool(
        db_config.connection_string,
        min_size=db_config.min_size,
        max_size=db_config.max_size,
        kwargs={"row_factory": dict_row},
        open=False,
    )
    await pool.open()
    try:
        yield pool
    finally:
        await pool.close()
