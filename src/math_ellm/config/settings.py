"""
Unified configuration management for math_ellm using pydantic-settings.

This module provides a hierarchical configuration system with:
1. A base settings class with the encoding and retrieval parameters
2. Component-specific settings classes
3. A provider singleton to manage settings instances

All settings can be overridden through environment variables prefixed with
``MATH_ELLM_`` or through a .env file.
"""

from pathlib import Path
from typing import Dict, Optional, Type, TypeVar

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from math_ellm.core.project_root import ROOT

# Type variable for settings classes
T = TypeVar("T", bound="MathEllmBaseSettings")


class MathEllmBaseSettings(BaseSettings):
    """Base settings for all math_ellm components with common configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MATH_ELLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Prime generation
    sieve_limit: int = Field(
        default=10000,
        ge=2,
        description="Upper bound for the initial sieve of Eratosthenes",
    )

    # Retrieval
    similarity_threshold: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Minimum Jaccard similarity a match must exceed",
    )
    match_limit: int = Field(
        default=5, ge=1, description="Maximum number of matches per query"
    )

    log_level: str = Field(default="INFO", description="Log level for math_ellm")


class IndexingSettings(MathEllmBaseSettings):
    """Settings for loading and indexing a Q&A corpus."""

    dataset_path: Optional[Path] = Field(
        default=None,
        description="Path to a .json, .jsonl or .yaml dataset; None uses the "
        "generated sample dataset",
    )
    sample_size: int = Field(
        default=5000,
        ge=0,
        description="Number of records in the generated sample dataset",
    )
    progress_every: int = Field(
        default=1000,
        ge=1,
        description="Log progress after this many records with expressions",
    )
    show_progress: bool = Field(
        default=False, description="Show a tqdm progress bar while indexing"
    )

    # Fixed paths
    default_dataset_path: Path = Field(
        default=ROOT / "data" / "mathstack_qa.jsonl",
        description="Dataset used by the CLI when it exists and no path is given",
    )

    def resolve_dataset_path(self) -> Optional[Path]:
        """Return the configured dataset, falling back to the default file."""
        if self.dataset_path is not None:
            return self.dataset_path
        if self.default_dataset_path.exists():
            return self.default_dataset_path
        return None


class SettingsProvider:
    """
    Central provider for application settings.

    This singleton ensures consistent settings access throughout the application.
    Settings instances are cached to avoid redundant parsing.

    Example usage:
        settings = settings_provider.get_settings(IndexingSettings)
        sample_size = settings.sample_size
    """

    _instance = None
    _settings_cache: Dict[str, MathEllmBaseSettings] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._settings_cache = {}
        return cls._instance

    def get_settings(self, settings_class: Type[T] = MathEllmBaseSettings) -> T:
        """
        Get settings of the specified type.

        Args:
            settings_class: Settings class to instantiate (defaults to
                MathEllmBaseSettings)

        Returns:
            Instance of the requested settings class
        """
        class_name = settings_class.__name__
        if class_name not in self._settings_cache:
            self._settings_cache[class_name] = settings_class()
        return self._settings_cache[class_name]  # type: ignore

    def clear(self) -> None:
        """Drop cached settings so the next lookup re-reads the environment."""
        self._settings_cache.clear()


# Global settings provider instance
settings_provider = SettingsProvider()
