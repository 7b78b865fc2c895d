"""
Application Configuration
Loads settings from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List, Optional
from pathlib import Path


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_debug: bool = False

    # CORS Configuration
    cors_origins: List[str] = ["*"]  # Allow all origins for development

    # Scraper Configuration
    scraper_headless: bool = True
    scraper_timeout: int = 30  # Network idle timeout per page, seconds
    scraper_max_pages: int = Field(3, ge=1)
    scraper_scroll_delay: float = 2.0

    # Output file for the latest run (defaults to data/listings.json)
    output_file: Optional[str] = None

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Paths
    @property
    def log_dir(self) -> Path:
        """Get the log directory path."""
        return Path(__file__).parent.parent.parent / "logs"

    @property
    def log_file(self) -> Path:
        """Get the log file path."""
        return self.log_dir / "backend.log"

    @property
    def data_dir(self) -> Path:
        """Get the data directory path."""
        return Path(__file__).parent.parent / "data"

    @property
    def listings_file(self) -> Path:
        """Get the JSON file that holds the latest scrape results."""
        if self.output_file:
            return Path(self.output_file)
        return self.data_dir / "listings.json"

    class Config:
        # Only load .env if it exists to avoid permission errors
        env_file = ".env" if __import__("pathlib").Path(".env").exists() else None
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra environment variables


# Global settings instance
settings = Settings()
