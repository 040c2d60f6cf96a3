"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `PRDFORGE_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """PRDForge settings.

    All fields are environment-configurable. Prefix is `PRDFORGE_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="PRDFORGE_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    app_env: Literal["dev", "prod"] = Field(default="dev")
    log_level: str = Field(default="INFO")
    product_name: str = Field(default="Audityzer AI Agent")

    # LLM
    openai_api_key: str | None = Field(default=None)
    openai_base_url: str | None = Field(default=None)
    openai_model: str = Field(default="gpt-4o-mini")
    openai_timeout_s: float = Field(default=300.0, ge=1.0)
    temperature: float = Field(default=0.4, ge=0.0, le=2.0)

    # Storage
    storage_backend: Literal["file", "memory", "redis"] = Field(default="file")
    storage_dir: Path = Field(default=Path(".prdforge"))
    storage_key_prefix: str = Field(default="prdforge")
    redis_url: str = Field(default="redis://localhost:6379/0")

    # Workspace
    notification_ttl_s: float = Field(default=3.8, ge=0.0, le=60.0)
    default_template: Literal["agile", "waterfall", "lean", "default"] = Field(default="agile")
    default_font: str = Field(default="font-inter")

    @property
    def versions_key(self) -> str:
        return f"{self.storage_key_prefix}_prd_versions"

    @property
    def font_key(self) -> str:
        return f"{self.storage_key_prefix}_prd_font"


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("PRDFORGE_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
