"""Configuration management using Pydantic Settings"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="TRANSFER_ROUTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Service
    service_name: str = "transfer-router"
    log_level: str = "INFO"

    # Combination search
    max_combination_size: int = 5
    max_combinations: Optional[int] = None
    max_eligible_accounts: Optional[int] = None  # top-K by balance before 2^n enumeration

    # Transfer data source
    transfer_data_url: str = "http://localhost:8001"

    # HTTP Client
    http_timeout_seconds: float = 5.0


settings = Settings()
