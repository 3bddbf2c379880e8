"""
Configuration management.

Loads settings from environment variables and .env file.
Prefix: WAYFINDER_
"""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Set by the hosting platform on read-only deployments
READ_ONLY_ENV_FLAG = "VERCEL"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="WAYFINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Storage
    data_dir: Path = Field(default=Path("data"), description="Data storage directory")
    memory_file: str = Field(default="worldMemory.json", description="World memory JSON file")
    persist_memory: bool = Field(default=True, description="Write world memory to disk")

    # Generative fallback
    fallback_model: str = Field(default="gpt-4o-mini", description="Model id from models.yaml")
    fallback_temperature: float = Field(default=0.0, description="Fallback sampling temperature")
    fallback_max_tokens: int = Field(default=256, description="Fallback response token cap")

    # Contact actions
    contact_email: str = Field(default="hello@madebyjoz.com", description="mailto: recipient")
    contact_subject: str = Field(default="Hello Joz", description="mailto: subject line")
    contact_phone: str = Field(default="+10000000000", description="tel: number")

    # HTTP
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, description="Bind port")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"], description="Allowed origins")
    log_level: str = Field(default="INFO", description="Root log level")

    @property
    def memory_path(self) -> Path:
        return self.data_dir / self.memory_file

    @property
    def persistence_enabled(self) -> bool:
        """False when disabled explicitly or running on a read-only host."""
        if not self.persist_memory:
            return False
        return not os.environ.get(READ_ONLY_ENV_FLAG)


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
