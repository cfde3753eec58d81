"""Database initialization and schema management."""

from typing import Any, Dict

import psycopg
from psycopg.errors import DatabaseError
from psycopg.rows import dict_row
from rich.console import Console

from .connection import DatabaseConfig

console = Console()


SCHEMA_SQL = """
CREATE EXTENSION IF NOT EXISTS vector;

-- Sources table
CREATE TABLE IF NOT EXISTS sources (
    id SERIAL PRIMARY KEY,
    name VARCHAR(200) NOT NULL UNIQUE,
    type VARCHAR(50),
    url TEXT,
    language VARCHAR(10) NOT NULL DEFAULT 'fr',
    last_fetched_at TIMESTAMPTZ,
    fetch_interval_minutes INTEGER DEFAULT 60,
    is_active BOOLEAN DEFAULT TRUE,
    config JSONB
);

-- Articles table
CREATE TABLE IF NOT EXISTS articles (
    id SERIAL PRIMARY KEY,
    title VARCHAR(500) NOT NULL,
    slug VARCHAR(500) NOT NULL UNIQUE,
    content TEXT,
    summary TEXT,
    source_name VARCHAR(200),
    source_url TEXT,
    author VARCHAR(200),
    published_at TIMESTAMPTZ,
    scraped_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
    language VARCHAR(5) DEFAULT 'en',
    image_url TEXT,
    tags TEXT[] DEFAULT '{}',
    category VARCHAR(50) CHECK (category IS NULL OR category IN (
        'research', 'care', 'conservation', 'behavior',
        'ecology', 'community', 'news', 'off-topic'
    )),
    view_count INTEGER DEFAULT 0,
    embedding vector(%(dimensions)s),
    search_vector TSVECTOR
);

-- Article/source link table
CREATE TABLE IF NOT EXISTS article_sources (
    article_id INTEGER NOT NULL REFERENCES articles(id),
    source_id INTEGER NOT NULL REFERENCES sources(id),
    original_url TEXT,
    PRIMARY KEY (article_id, source_id)
);

-- Near-duplicate relationships
CREATE TABLE IF NOT EXISTS article_duplicates (
    id SERIAL PRIMARY KEY,
    canonical_article_id INTEGER NOT NULL REFERENCES articles(id),
    duplicate_article_id INTEGER NOT NULL REFERENCES articles(id),
    similarity_score REAL,
    merged_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
    CHECK (canonical_article_id <> duplicate_article_id)
);

-- Create indexes
CREATE UNIQUE INDEX IF NOT EXISTS idx_article_duplicates_pair ON article_duplicates (
    LEAST(canonical_article_id, duplicate_article_id),
    GREATEST(canonical_article_id, duplicate_article_id)
);
CREATE INDEX IF NOT EXISTS idx_articles_published_at ON articles(published_at);
CREATE INDEX IF NOT EXISTS idx_articles_search_vector ON articles USING GIN (search_vector);
CREATE INDEX IF NOT EXISTS idx_articles_embedding ON articles
    USING hnsw (embedding vector_cosine_ops);

-- Full-text search vector trigger
CREATE OR REPLACE FUNCTION articles_update_search_vector()
RETURNS TRIGGER AS $$
BEGIN
    NEW.search_vector :=
        setweight(to_tsvector('simple', COALESCE(NEW.title, '')), 'A') ||
        setweight(to_tsvector('simple', COALESCE(NEW.summary, '')), 'B') ||
        setweight(to_tsvector('simple', COALESCE(NEW.content, '')), 'C');
    RETURN NEW;
END;
$$ LANGUAGE plpgsql;

DROP TRIGGER IF EXISTS articles_search_vector_trigger ON articles;

CREATE TRIGGER articles_search_vector_trigger
    BEFORE INSERT OR UPDATE OF title, summary, content
    ON articles
    FOR EACH ROW
    EXECUTE FUNCTION articles_update_search_vector();
"""


def render_schema(dimensions: int = 1536) -> str:
    """Schema SQL with the embedding dimensionality filled in."""
    return SCHEMA_SQL.replace("%(dimensions)s", str(int(dimensions)))


async def validate_connection(config: Dict[str, Any]) -> bool:
    """Validate database connection."""
    try:
        conninfo = DatabaseConfig(config).connection_string
        async with await psycopg.AsyncConnection.connect(conninfo, row_factory=dict_row) as conn:
            async with conn.cursor() as cur:
                await cur.execute("SELECT 1 AS ok")
                result = await cur.fetchone()
                return result is not None and result["ok"] == 1
    except psycopg.Error as e:
        console.print(f"[red]Database connection failed: {e}[/red]")
        return False


async def init_database(config: Dict[str, Any], dimensions: int = 1536) -> None:
    """Initialize database schema."""
    try:
        conninfo = DatabaseConfig(config).connection_string
        async with await psycopg.AsyncConnection.connect(conninfo) as conn:
            async with conn.cursor() as cur:
                await cur.execute(render_schema(dimensions))
            await conn.commit()
            console.print("Database schema initialized successfully")
    except DatabaseError as e:
        console.print(f"[red]Failed to initialize database schema: {e}[/red]")
        raise
