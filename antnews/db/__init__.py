"""Database management for the ant news pipeline."""

from .articles import ArticleStorage
from .connection import open_pool
from .duplicates import DuplicateStorage
from .init import init_database, validate_connection
from .sources import SourceManager

__all__ = [
    "ArticleStorage",
    "DuplicateStorage",
    "SourceManager",
    "init_database",
    "open_pool",
    "validate_connection",
]
