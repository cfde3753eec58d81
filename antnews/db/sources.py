"""Source management in database."""

from typing import Dict, List

from psycopg.types.json import Jsonb
from psycopg_pool import AsyncConnectionPool

from ..config import SourceConfig
from ..models import Source


class SourceManager:
    """Manage sources in database."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        """Initialize source manager."""
        self.pool = pool

    async def sync_sources(self, sources: List[SourceConfig]) -> Dict[str, int]:
        """
        Sync sources from config to database.

        Returns:
            Mapping of source name to database ID
        """
        source_map = {}

        async with self.pool.connection() as conn:
            async with conn.cursor() as cur:
                for source in sources:
                    # Upsert source
                    await cur.execute(
                        """
                        INSERT INTO sources (
                            name, type, url, language, fetch_interval_minutes, is_active, config
                        )
                        VALUES (%s, %s, %s, %s, %s, %s, %s)
                        ON CONFLICT (name) DO UPDATE SET
                            type = EXCLUDED.type,
                            url = EXCLUDED.url,
                            language = EXCLUDED.language,
                            fetch_interval_minutes = EXCLUDED.fetch_interval_minutes,
                            is_active = EXCLUDED.is_active,
                            config = EXCLUDED.config
                        RETURNING id
                        """,
                        (
                            source.name,
                            source.type,
                            source.url,
                            source.language,
                            source.fetch_interval_minutes,
                            source.is_active,
                            Jsonb(source.config.model_dump()),
                        ),
                    )
                    source_id = (await cur.fetchone())["id"]
                    source_map[source.name] = source_id

        return source_map

    async def get_active_rss_sources(self) -> List[Source]:
        """Sources the FETCH stage polls."""
        async with self.pool.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    "SELECT * FROM sources WHERE type = 'rss' AND is_active = TRUE ORDER BY id"
                )
                return [Source.model_validate(row) for row in await cur.fetchall()]

    async def mark_fetched(self, source_id: int) -> None:
        """Stamp the last fetch attempt."""
        async with self.pool.connection() as conn:
            await conn.execute(
                "UPDATE sources SET last_fetched_at = CURRENT_TIMESTAMP WHERE id = %s",
                (source_id,),
            )
