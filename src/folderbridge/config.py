"""folderbridge configuration settings."""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from folderbridge.infrastructure.config.settings_utils import (
    env_bool,
    env_int,
    env_list,
    env_path,
    env_str,
)
from folderbridge.infrastructure.logging_setup import configure_logging
from folderbridge.infrastructure.storage.path_guard import normalize_path, safe_join


class Settings(BaseSettings):
    """Application settings with env var support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Local state (capability database + metadata key-value file)
    state_root: Path = Field(
        default_factory=lambda: env_path("FOLDERBRIDGE_STATE_ROOT", ".folderbridge")
    )
    metadata_filename: str = "metadata.json"
    capability_db_filename: str = "capabilities.db"

    # Read tool
    read_default_limit: int = Field(
        default_factory=lambda: env_int("FOLDERBRIDGE_READ_LIMIT", 2000, minimum=1)
    )
    read_max_line_chars: int = Field(
        default_factory=lambda: env_int("FOLDERBRIDGE_READ_MAX_LINE_CHARS", 2000, minimum=1)
    )

    # Server/observability
    api_host: str = Field(default_factory=lambda: env_str("FOLDERBRIDGE_HOST", "127.0.0.1"))
    api_port: int = Field(
        default_factory=lambda: env_int("FOLDERBRIDGE_PORT", 8000, minimum=1, maximum=65535)
    )
    api_reload: bool = Field(default_factory=lambda: env_bool("FOLDERBRIDGE_RELOAD", False))
    log_level: str = Field(default_factory=lambda: env_str("FOLDERBRIDGE_LOG_LEVEL", "INFO"))
    log_json: bool = Field(default_factory=lambda: env_bool("FOLDERBRIDGE_LOG_JSON", False))
    cors_origins: list[str] = Field(
        default_factory=lambda: env_list("FOLDERBRIDGE_CORS_ORIGINS", default=["*"])
    )

    @model_validator(mode="after")
    def _normalize_paths_validator(self) -> "Settings":
        self.state_root = normalize_path(self.state_root)
        return self

    @property
    def metadata_path(self) -> Path:
        return safe_join(self.state_root, self.metadata_filename)

    @property
    def capability_db_path(self) -> Path:
        return safe_join(self.state_root, self.capability_db_filename)

    def setup_logging(self) -> None:
        configure_logging(level=self.log_level, json_logs=self.log_json)

    def ensure_directories(self) -> None:
        """Ensure the state directory exists."""
        self.state_root = normalize_path(self.state_root)
        self.state_root.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
