"""
Falkor Configuration Management

Provides the process-wide configuration (base URL, schema root, timeouts,
logging) with validation and environment support.
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Logging level")
    file_path: Optional[str] = Field(default=None, description="Log file path")
    max_file_size: int = Field(
        default=10_000_000, description="Max log file size in bytes"
    )
    backup_count: int = Field(default=5, description="Number of backup log files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class FalkorConfig(BaseSettings):
    """Main Falkor configuration."""

    base_url: str = Field(
        default="", description="Base URL that relative test case URLs resolve against"
    )
    root_schema_path: str = Field(
        default="", description="Directory that schema paths resolve against"
    )
    request_timeout: float = Field(
        default=30.0, description="Per-request network timeout in seconds"
    )
    runner_timeout: int = Field(
        default=120, description="Timeout for a whole runner invocation in seconds"
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="FALKOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("request_timeout")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Invalid request timeout: {v}. Must be positive")
        return v

    def resolve_schema_path(self, schema_path: str) -> Path:
        """
        Resolve a schema path against the configured schema root.

        Args:
            schema_path: Path as given to add_json_schema/validate_json

        Returns:
            The path to read
        """
        if self.root_schema_path:
            return (Path(self.root_schema_path) / schema_path).resolve()
        return Path(schema_path)


# Global configuration instance.
# Mutating it while test cases are in flight is a race the caller must avoid.
_config: Optional[FalkorConfig] = None


def get_config() -> FalkorConfig:
    """
    Get the global configuration instance.

    Returns:
        The global FalkorConfig instance
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def load_config(env_file: Optional[Path] = None) -> FalkorConfig:
    """
    Load configuration from an env file and environment variables.

    Args:
        env_file: Optional path to a .env style file

    Returns:
        Loaded configuration instance
    """
    if env_file is not None and env_file.exists():
        return FalkorConfig(_env_file=env_file)
    return FalkorConfig()


def reload_config(env_file: Optional[Path] = None) -> FalkorConfig:
    """
    Reload the global configuration.

    Args:
        env_file: Optional path to a .env style file

    Returns:
        Reloaded configuration instance
    """
    global _config
    _config = load_config(env_file)
    return _config


def update_config(**kwargs: Any) -> None:
    """
    Update configuration values at runtime.

    Args:
        **kwargs: Configuration values to update
    """
    config = get_config()

    for key, value in kwargs.items():
        if key in FalkorConfig.model_fields:
            setattr(config, key, value)
        else:
            raise ValueError(f"Unknown configuration key: {key}")


def set_base_url(url: str) -> None:
    """Sets the base URL that relative test case URLs are resolved against."""
    update_config(base_url=url or "")


def set_root_schema_path(path: str) -> None:
    """Sets the directory that JSON schema paths are resolved against."""
    update_config(root_schema_path=str(path) if path else "")
