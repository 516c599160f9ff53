"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `DOCOUTLINE_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """docoutline settings.

    All fields are environment-configurable. Prefix is `DOCOUTLINE_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCOUTLINE_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    log_level: str = Field(default="INFO")

    # Refresh
    # Time an analyzer gets to produce symbols before the single retry fires
    analyzer_ready_budget_s: float = Field(default=0.35, ge=0.0, le=10.0)

    # Providers
    markdown_type_tags: list[str] = Field(default_factory=lambda: ["markdown", "emd"])
    fallback_skip_code_fences: bool = Field(default=True)
    max_heading_level: int = Field(default=6, ge=1, le=6)

    # Files
    file_encoding: str = Field(default="utf-8")
    suffix_type_tags: dict[str, str] = Field(
        default_factory=lambda: {
            ".md": "markdown",
            ".markdown": "markdown",
            ".emd": "emd",
            ".txt": "plaintext",
        }
    )
    default_type_tag: str = Field(default="plaintext")


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("DOCOUTLINE_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
