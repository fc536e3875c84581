"""
Configuration management module for math_ellm.

This module provides centralized configuration management using pydantic-settings,
ensuring type safety, validation, and clear configuration hierarchy:

1. Base settings class with encoding and retrieval parameters
2. Component-specific settings classes
3. A provider singleton to manage settings instances

Usage:
    from math_ellm.config import settings_provider, IndexingSettings

    # Get settings for a specific component
    indexing_settings = settings_provider.get_settings(IndexingSettings)

    # Access settings properties
    dataset_path = indexing_settings.resolve_dataset_path()
"""

from math_ellm.config.settings import (
    IndexingSettings,
    MathEllmBaseSettings,
    settings_provider,
)

__all__ = [
    "MathEllmBaseSettings",
    "IndexingSettings",
    "settings_provider",
]
