"""Configuration for the research aggregation pipeline."""

from research_adequacy.config.settings import Settings, configure_logging, settings

__all__ = ["Settings", "configure_logging", "settings"]
