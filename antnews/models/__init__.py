"""Data models for the ant news pipeline."""

from .article import Article, ArticleCategory, ArticleDuplicate, NewArticle, SimilarArticle
from .source import Source

__all__ = [
    "Article",
    "ArticleCategory",
    "ArticleDuplicate",
    "NewArticle",
    "SimilarArticle",
    "Source",
]
