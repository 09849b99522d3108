"""Configuration management - settings from env, reading rules from YAML."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Defaults for config/reading_rules.yaml
ADS_TO_UNLOCK = 3
PREVIEW_CHARACTERS = 1500
WORDS_PER_MINUTE = 110
MIN_CONDENSED_CHARACTERS = 100
BATCH_DELAY_SECONDS = 1.0


class Settings(BaseSettings):
    """Application settings from environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8000, description="Bind port")
    admin_token: str | None = Field(default=None, description="Shared secret for admin endpoints")

    # LLM (OpenAI-compatible)
    llm_base_url: str | None = Field(default=None, description="OpenAI-compatible API base URL")
    llm_api_key: str = Field(default="", description="API key for LLM provider")
    llm_model: str = Field(default="gpt-4o-mini", description="Model name")
    llm_temperature: float = Field(default=0.7, description="Sampling temperature for condensation")
    condensation_timeout_seconds: float = Field(
        default=60.0,
        description="Upper bound for a single condensation call",
    )

    # Data
    data_dir: Path = Field(default=Path("data"), description="Directory for JSON persistence")
    redis_url: str | None = Field(default=None, description="Redis URL for cloud persistence (e.g. Upstash)")


class ReadingRules:
    """Typed view over reading_rules.yaml with code defaults."""

    def __init__(self, raw: dict[str, Any] | None = None) -> None:
        raw = raw or {}
        self.ads_to_unlock = int(raw.get("ads_to_unlock", ADS_TO_UNLOCK))
        self.preview_characters = int(raw.get("preview_characters", PREVIEW_CHARACTERS))
        self.words_per_minute = int(raw.get("words_per_minute", WORDS_PER_MINUTE))
        self.min_condensed_characters = int(
            raw.get("min_condensed_characters", MIN_CONDENSED_CHARACTERS)
        )
        self.batch_delay_seconds = float(raw.get("batch_delay_seconds", BATCH_DELAY_SECONDS))


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load YAML config file."""
    if not config_path.exists():
        return {}
    with config_path.open() as f:
        return yaml.safe_load(f) or {}


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


@lru_cache
def get_reading_rules(config_dir_str: str = "") -> ReadingRules:
    """Load reading rules from config. Missing file or keys fall back to defaults."""
    if not config_dir_str:
        config_dir = Path(__file__).parent.parent.parent / "config"
    else:
        config_dir = Path(config_dir_str)
    return ReadingRules(load_yaml_config(config_dir / "reading_rules.yaml"))
