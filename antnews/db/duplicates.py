"""Duplicate relationship storage."""

from psycopg_pool import AsyncConnectionPool


class DuplicateStorage:
    """Persist canonical/duplicate article pairs."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        """Initialize duplicate storage."""
        self.pool = pool

    async def relation_exists(self, first_id: int, second_id: int) -> bool:
        """Check for a relation between two articles in either column order."""
        async with self.pool.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    SELECT 1 FROM article_duplicates
                    WHERE (canonical_article_id = %(a)s AND duplicate_article_id = %(b)s)
                       OR (canonical_article_id = %(b)s AND duplicate_article_id = %(a)s)
                    LIMIT 1
                    """,
                    {"a": first_id, "b": second_id},
                )
                return await cur.fetchone() is not None

    async def create_relation(
        self,
        canonical_id: int,
        duplicate_id: int,
        similarity_score: float,
    ) -> bool:
        """Insert a relation; False when the pair already exists."""
        async with self.pool.connection() as conn:
            cur = await conn.execute(
                """
                INSERT INTO article_duplicates (
                    canonical_article_id, duplicate_article_id, similarity_score
                ) VALUES (%s, %s, %s)
                ON CONFLICT DO NOTHING
                """,
                (canonical_id, duplicate_id, similarity_score),
            )
            return cur.rowcount == 1
