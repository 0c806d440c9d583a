"""
Configuration management for the delve orchestrator.

Loads settings from environment variables and provides a centralized
settings object for all components.

Configuration precedence (highest to lowest):
1. CLI arguments (passed as kwargs to DelveSettings)
2. Environment variables (DELVE_* prefix)
3. .env file
4. pyproject.toml [tool.delve] section
5. Hardcoded defaults
"""

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from ..models.contracts import CompletionOptions
from ..models.enums import LogLevel, QualityReview

logger = logging.getLogger(__name__)


def load_pyproject_defaults() -> dict[str, Any]:
    """
    Load defaults from [tool.delve] section in pyproject.toml.

    Returns:
        Dictionary of configuration overrides from pyproject.toml
    """
    pyproject_path = Path("pyproject.toml")

    if not pyproject_path.exists():
        return {}

    try:
        with pyproject_path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        logger.warning(f"Could not load pyproject.toml: {e}")
        return {}
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Could not parse pyproject.toml: {e}")
        return {}

    tool_config = data.get("tool", {}).get("delve", {})
    if tool_config:
        logger.debug(f"Loaded {len(tool_config)} settings from pyproject.toml")
    return tool_config


class PyProjectTomlSettingsSource(PydanticBaseSettingsSource):
    """
    A pydantic-settings source that loads configuration from pyproject.toml.
    """

    def get_field_value(self, field_name: str, field_info: Any) -> tuple[Any, str, bool]:
        """Not used in this implementation."""
        return None, "", False

    def __call__(self) -> dict[str, Any]:
        """Load and return configuration from pyproject.toml."""
        return load_pyproject_defaults()


class DelveSettings(BaseSettings):
    """
    Main settings class for the research orchestrator.
    """

    model_config = SettingsConfigDict(
        env_prefix="DELVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Models (LiteLLM format: provider/model)
    default_model: str = Field(
        default="openai/gpt-4o-mini", description="Model used by sub-agents"
    )
    decision_model: str | None = Field(
        default=None, description="Model used by the decision loop (defaults to default_model)"
    )
    evaluator_model: str | None = Field(
        default=None, description="Model used for quality review (defaults to the sub-agent model)"
    )
    fallback_models: str | None = Field(
        default=None, description="Comma-separated list of fallback models"
    )
    llm_timeout: int = Field(default=120, description="Request timeout in seconds for LiteLLM")
    llm_max_retries: int = Field(default=3, description="Retry attempts on transient LLM errors")
    max_tool_rounds: int = Field(
        default=8, description="Maximum tool-call rounds inside one model completion"
    )
    tool_timeout: float | None = Field(
        default=60.0, description="Per tool call timeout in seconds (None disables)"
    )

    # Orchestration
    max_iterations: int = Field(default=30, description="Hard ceiling on decision loop iterations")
    max_parallel_execution: int = Field(
        default=3, description="Maximum concurrent sub-agent invocations in a fan-out"
    )
    quality_review: QualityReview = Field(
        default=QualityReview.DELIVERABLE, description="Quality gate mode: all, deliverable or none"
    )
    breadth: int = Field(default=3, description="Target number of report sections")
    depth: int = Field(default=2, description="Search queries per section")
    search_results: int = Field(default=8, description="Search results per query")
    llm_status_updates: bool = Field(
        default=False, description="Rephrase progress statuses with the model before reporting"
    )

    # Monitoring and Logging
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_file: Path | None = Field(
        default=None,
        description="Path to main application log file (set to None to disable file logging)",
    )
    log_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Maximum log file size before rotation"  # 10MB
    )
    log_backup_count: int = Field(default=5, description="Number of backup log files to keep")
    enable_rich_console: bool = Field(
        default=True, description="Enable rich console output (banners, tables)"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Customize the sources and their priority for loading configuration.

        Returns:
            Tuple of settings sources in priority order
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            PyProjectTomlSettingsSource(settings_cls),
            file_secret_settings,
        )

    @field_validator("max_iterations")
    @classmethod
    def validate_max_iterations(cls, v: int) -> int:
        """Ensure the iteration ceiling is usable"""
        if v < 1:
            raise ValueError(f"max_iterations must be >= 1, got {v}")
        if v > 200:
            logger.warning(f"Very high max_iterations ({v}). Runaway runs may be costly.")
        return v

    @field_validator("max_parallel_execution")
    @classmethod
    def validate_max_parallel(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_parallel_execution must be >= 1, got {v}")
        return v

    @field_validator("breadth", "depth", "search_results", "max_tool_rounds")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Value must be positive, got {v}")
        return v

    @model_validator(mode="after")
    def validate_cross_field_constraints(self) -> "DelveSettings":
        """Cross-field validation of configuration constraints"""
        if self.max_parallel_execution > self.breadth * self.depth * 2:
            logger.warning(
                f"max_parallel_execution ({self.max_parallel_execution}) exceeds any "
                f"expected fan-out for breadth={self.breadth}, depth={self.depth}."
            )
        return self

    def fallback_model_list(self) -> list[str]:
        """Parse the comma-separated fallback models."""
        if not self.fallback_models:
            return []
        return [m.strip() for m in self.fallback_models.split(",") if m.strip()]

    def completion_options(self, **overrides: Any) -> CompletionOptions:
        """
        Build per-run CompletionOptions from these settings.

        Args:
            **overrides: Fields to override (None values are ignored)

        Returns:
            CompletionOptions instance
        """
        values: dict[str, Any] = {
            "model": self.default_model,
            "decision_model": self.decision_model,
            "quality_review": self.quality_review,
            "max_parallel_execution": self.max_parallel_execution,
            "max_iterations": self.max_iterations,
            "breadth": self.breadth,
            "depth": self.depth,
            "search_results": self.search_results,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return CompletionOptions(**values)

    def ensure_log_directory(self) -> None:
        """Ensure the log directory exists."""
        if self.log_file and self.log_file.parent:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)


# Global settings instance
_settings: DelveSettings | None = None


def get_settings() -> DelveSettings:
    """
    Get the global settings instance.

    Returns:
        DelveSettings instance
    """
    global _settings
    if _settings is None:
        _settings = DelveSettings()
        _settings.ensure_log_directory()
    return _settings


def reset_settings() -> None:
    """Reset the global settings (mainly for testing)."""
    global _settings
    _settings = None
