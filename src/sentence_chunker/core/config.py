import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, Dict, Any
from pathlib import Path


class Settings(BaseSettings):
    # Chunking bounds used by `sentence-chunker chunk`
    CHUNK_MIN_LENGTH: int = Field(default=5, ge=0)
    CHUNK_MAX_LENGTH: int = Field(default=250, ge=0)

    # Chunking bounds used by the JSON expectation harness
    HARNESS_MIN_LENGTH: int = Field(default=5, ge=0)
    HARNESS_MAX_LENGTH: int = Field(default=200, ge=0)

    # Observability & UI
    LOG_FORMAT: str = "auto"  # json|plain|auto
    LOG_LEVEL: str = "warning"  # debug|info|warning|error
    NO_COLOR: bool = False  # Disable colored output

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @classmethod
    def load_config(cls, config_file: Optional[str] = None) -> "Settings":
        """Load settings with config file -> env -> CLI precedence."""
        config_data: Dict[str, Any] = {}

        # Find config file
        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_file}")
        else:
            # Auto-discover .sentence_chunker.{yaml,yml,toml}
            for ext in ["yaml", "yml", "toml"]:
                config_path = Path(f".sentence_chunker.{ext}")
                if config_path.exists():
                    break
            else:
                config_path = None

        # Load config file if found
        if config_path and config_path.exists():
            if config_path.suffix in [".yaml", ".yml"]:
                import yaml  # type: ignore[import-untyped]

                with open(config_path) as f:
                    config_data = yaml.safe_load(f) or {}
            elif config_path.suffix == ".toml":
                import tomllib  # type: ignore[import-untyped]

                with open(config_path, "rb") as f:
                    config_data = tomllib.load(f)

        # Environment variables override file values; env names are case-insensitive
        env_keys = {name.upper() for name in os.environ}
        config_data = {
            key: value
            for key, value in config_data.items()
            if str(key).upper() not in env_keys
        }
        return cls(**config_data)


# Default settings - will be replaced by load_config() during CLI startup
SETTINGS = Settings()
