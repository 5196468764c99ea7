"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with defaults and env var overrides."""

    # Database (ingestion audit log only)
    database_url: str = "sqlite:///./getnet_recon.db"

    # App
    app_env: str = "development"
    app_port: int = 8000
    log_level: str = "INFO"

    # Settlement files
    file_encoding: str = "latin-1"
    max_upload_bytes: int = 50 * 1024 * 1024

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
