"""
config.py — Settings
=====================
Environment-based settings (prefix VISUALIZER_, optional .env file).

    from config import get_settings
    settings = get_settings()
"""

from functools import lru_cache
from typing import Dict

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-based settings."""
    model_config = SettingsConfigDict(
        env_prefix="VISUALIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    host: str = "127.0.0.1"
    port: int = 5000
    debug: bool = False
    log_level: str = "info"

    # Pacing (milliseconds per step)
    default_speed_ms: int = Field(default=80, gt=0)
    min_speed_ms: int = Field(default=10, gt=0)
    max_speed_ms: int = Field(default=2000, gt=0)
    speed_presets: Dict[str, int] = Field(
        default_factory=lambda: {"slow": 1000, "medium": 400, "fast": 150, "turbo": 50}
    )

    # Sorting surface
    default_array_size: int = Field(default=40, gt=0)
    min_array_size: int = Field(default=2, gt=0)
    max_array_size: int = Field(default=120, gt=0)

    # Graph and tree surfaces; traversal depth follows these sizes
    max_graph_nodes: int = Field(default=50, gt=0, le=200)
    max_tree_nodes: int = Field(default=63, gt=0, le=200)

    # Explanation service
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_api_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    http_timeout: int = Field(default=30, gt=0)
    http_retry_attempts: int = Field(default=3, ge=1)

    @model_validator(mode="after")
    def _check_ranges(self) -> "Settings":
        if not self.min_speed_ms <= self.default_speed_ms <= self.max_speed_ms:
            raise ValueError(
                f"default_speed_ms must lie in [{self.min_speed_ms}, {self.max_speed_ms}], got {self.default_speed_ms}"
            )
        if not self.min_array_size <= self.default_array_size <= self.max_array_size:
            raise ValueError(
                f"default_array_size must lie in [{self.min_array_size}, {self.max_array_size}], got {self.default_array_size}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
