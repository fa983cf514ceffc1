"""Configuration management for the Paperless bridge."""

from pathlib import Path
from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    log_file: Optional[Path] = Field(default=None)

    # Paperless Configuration
    paperless_url: str = Field(default="http://localhost:8000")
    request_timeout: float = Field(default=30.0, gt=0)

    # Directory Configuration
    base_dir: Path = Field(default_factory=Path.cwd)
    originals_dir: Path = Field(default=Path("originals"))
    archive_dir: Path = Field(default=Path("pdf-a"))

    # Polling Configuration
    poll_interval: float = Field(default=5.0, ge=0)
    poll_max_attempts: Optional[int] = Field(default=None, ge=1)
    poll_timeout: float = Field(default=600.0, ge=0)

    # Processing Policy
    ignore_existing_file: bool = Field(default=True)
    reprocess_existing_documents: bool = Field(default=True)
    download_original: bool = Field(default=False)

    # Duplicate detection contract
    duplicate_phrase: str = Field(default="It is a duplicate")
    duplicate_id_pattern: str = Field(default=r"(\d+)")

    # API Configuration
    paperless_helper_host: str = Field(default="0.0.0.0")
    paperless_helper_port: int = Field(default=3137)
    api_reload: bool = Field(default=False)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._setup_directories()

    @field_validator("paperless_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @model_validator(mode="after")
    def _check_polling_bounds(self) -> "Settings":
        # Unbounded polling needs a real pause between requests.
        if self.polling_is_unbounded and self.poll_interval <= 0:
            raise ValueError(
                "poll_interval must be positive when neither poll_timeout "
                "nor poll_max_attempts bounds polling"
            )
        return self

    def _setup_directories(self) -> None:
        """Create staging directories if they don't exist."""
        for directory in (self.originals_path, self.archive_path):
            directory.mkdir(parents=True, exist_ok=True)

    @property
    def originals_path(self) -> Path:
        """Get absolute path to the originals staging directory."""
        if self.originals_dir.is_absolute():
            return self.originals_dir
        return self.base_dir / self.originals_dir

    @property
    def archive_path(self) -> Path:
        """Get absolute path to the archival download directory."""
        if self.archive_dir.is_absolute():
            return self.archive_dir
        return self.base_dir / self.archive_dir

    @property
    def polling_is_unbounded(self) -> bool:
        """Legacy mode: poll until the task leaves PENDING, however long it takes."""
        return self.poll_max_attempts is None and not self.poll_timeout


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
