"""Configuration settings for the Deal Marketplace matching service."""

from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Paths
    base_dir: Path = Path(__file__).parent.parent
    data_dir: Path = base_dir / "data"
    db_path: Path = data_dir / "deal_marketplace.db"

    # Logging
    log_level: str = "INFO"

    # Matching Settings
    candidate_batch_size: int = 500  # rows fetched per round-trip when streaming profiles
    default_export_limit: int = 100

    # API Settings
    api_version: str = "0.1.0"

    # Database URL
    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.db_path}"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

# Ensure data directory exists
settings.data_dir.mkdir(parents=True, exist_ok=True)
