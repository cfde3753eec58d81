"""Ant news aggregator: RSS ingestion, AI enrichment and duplicate detection."""

__version__ = "0.1.0"
