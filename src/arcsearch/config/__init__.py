"""Configuration layer."""

from arcsearch.config.settings import MappingMode, Settings

__all__ = ["MappingMode", "Settings"]
