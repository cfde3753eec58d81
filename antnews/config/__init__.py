"""Configuration management for the ant news pipeline."""

from .loader import Config, load_config, load_sources, save_config, save_sources
from .models import (
    ConfigModel,
    DecoderConfig,
    OpenRouterConfig,
    PipelineConfig,
    PostgresConfig,
    ScraperConfig,
    SourceConfig,
    SourceFeedConfig,
    TriggerConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "DecoderConfig",
    "OpenRouterConfig",
    "PipelineConfig",
    "PostgresConfig",
    "ScraperConfig",
    "SourceConfig",
    "SourceFeedConfig",
    "TriggerConfig",
    "load_config",
    "load_sources",
    "save_config",
    "save_sources",
]
