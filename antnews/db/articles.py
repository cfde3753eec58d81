"""Article storage and management."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from psycopg_pool import AsyncConnectionPool

from ..models import Article, ArticleCategory, NewArticle, SimilarArticle

ARTICLE_COLUMNS = """
    id, title, slug, content, summary, source_name, source_url, author,
    published_at, scraped_at, language, image_url, tags, category,
    view_count, (embedding IS NOT NULL) AS has_embedding
"""

# Fields the metadata scraper may fill.
METADATA_FIELDS = ("image_url", "summary", "content", "author")


def to_vector_literal(embedding: Sequence[float]) -> str:
    """Format an embedding as a pgvector text literal."""
    return "[" + ",".join(repr(float(v)) for v in embedding) + "]"


def _row_to_article(row: Dict[str, Any]) -> Article:
    row = dict(row)
    row["tags"] = row.get("tags") or []
    return Article.model_validate(row)


class ArticleStorage:
    """Handle article persistence."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        """Initialize article storage."""
        self.pool = pool

    async def slug_exists(self, slug: str) -> bool:
        """Check whether an article already uses ``slug``."""
        async with self.pool.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute("SELECT 1 FROM articles WHERE slug = %s LIMIT 1", (slug,))
                return await cur.fetchone() is not None

    async def insert_article(
        self,
        article: NewArticle,
        source_id: int,
        original_url: str,
    ) -> Optional[int]:
        """
        Insert a raw article and link it to its source.

        Returns:
            The new article id, or None when the slug was taken concurrently
        """
        async with self.pool.connection() as conn:
            async with conn.transaction():
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        INSERT INTO articles (
                            title, slug, content, summary, source_name, source_url,
                            author, published_at, language, image_url, tags, category
                        ) VALUES (
                            %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, '{}', NULL
                        )
                        ON CONFLICT (slug) DO NOTHING
                        RETURNING id
                        """,
                        (
                            article.title,
                            article.slug,
                            article.content,
                            article.summary,
                            article.source_name,
                            article.source_url,
                            article.author,
                            article.published_at,
                            article.language,
                            article.image_url,
                        ),
                    )
                    row = await cur.fetchone()
                    if row is None:
                        return None

                    article_id = row["id"]
                    await cur.execute(
                        """
                        INSERT INTO article_sources (article_id, source_id, original_url)
                        VALUES (%s, %s, %s)
                        ON CONFLICT (article_id, source_id) DO NOTHING
                        """,
                        (article_id, source_id, original_url),
                    )
                    return article_id

    async def get_article(self, article_id: int) -> Optional[Article]:
        """Get article by ID."""
        async with self.pool.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"SELECT {ARTICLE_COLUMNS} FROM articles WHERE id = %s",
                    (article_id,),
                )
                row = await cur.fetchone()
                return _row_to_article(row) if row else None

    async def get_articles(self, article_ids: List[int]) -> List[Article]:
        """Get articles by ID, in ascending id order."""
        if not article_ids:
            return []
        async with self.pool.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"SELECT {ARTICLE_COLUMNS} FROM articles WHERE id = ANY(%s) ORDER BY id",
                    (list(article_ids),),
                )
                return [_row_to_article(row) for row in await cur.fetchall()]

    async def update_metadata(self, article_id: int, fields: Dict[str, str]) -> None:
        """Write scraped metadata fields."""
        fields = {k: v for k, v in fields.items() if k in METADATA_FIELDS}
        if not fields:
            return
        assignments = ", ".join(f"{column} = %s" for column in fields)
        async with self.pool.connection() as conn:
            await conn.execute(
                f"UPDATE articles SET {assignments} WHERE id = %s",
                (*fields.values(), article_id),
            )

    async def update_categorization(
        self,
        article_id: int,
        tags: List[str],
        category: ArticleCategory,
    ) -> None:
        """Overwrite tags and category."""
        async with self.pool.connection() as conn:
            await conn.execute(
                "UPDATE articles SET tags = %s, category = %s WHERE id = %s",
                (tags, category.value, article_id),
            )

    async def set_embedding(self, article_id: int, embedding: Sequence[float]) -> bool:
        """Store an embedding unless one is already present."""
        async with self.pool.connection() as conn:
            cur = await conn.execute(
                """
                UPDATE articles SET embedding = %s::vector
                WHERE id = %s AND embedding IS NULL
                """,
                (to_vector_literal(embedding), article_id),
            )
            return cur.rowcount == 1

    async def find_similar(
        self,
        article_id: int,
        limit: int = 10,
        published_since: Optional[datetime] = None,
    ) -> List[SimilarArticle]:
        """Nearest other articles by cosine distance to the stored embedding."""
        query = """
            WITH target AS (
                SELECT embedding FROM articles WHERE id = %(id)s
            )
            SELECT a.id, a.title, (a.embedding <=> target.embedding) AS distance
            FROM articles a, target
            WHERE a.id <> %(id)s
              AND a.embedding IS NOT NULL
              AND target.embedding IS NOT NULL
        """
        params: Dict[str, Any] = {"id": article_id, "limit": limit}
        if published_since is not None:
            query += " AND a.published_at >= %(since)s"
            params["since"] = published_since
        query += " ORDER BY a.embedding <=> target.embedding LIMIT %(limit)s"

        async with self.pool.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(query, params)
                return [SimilarArticle.model_validate(row) for row in await cur.fetchall()]

    async def get_articles_without_embedding(self, limit: int = 100) -> List[Article]:
        """Articles lacking an embedding, newest publication first."""
        async with self.pool.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"""
                    SELECT {ARTICLE_COLUMNS} FROM articles
                    WHERE embedding IS NULL
                    ORDER BY published_at DESC NULLS LAST
                    LIMIT %s
                    """,
                    (limit,),
                )
                return [_row_to_article(row) for row in await cur.fetchall()]

    async def get_uncategorized_articles(self, limit: int = 50) -> List[Article]:
        """Articles with empty tags or no category, newest ingestion first."""
        async with self.pool.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"""
                    SELECT {ARTICLE_COLUMNS} FROM articles
                    WHERE tags IS NULL OR cardinality(tags) = 0 OR category IS NULL
                    ORDER BY scraped_at DESC
                    LIMIT %s
                    """,
                    (limit,),
                )
                return [_row_to_article(row) for row in await cur.fetchall()]
