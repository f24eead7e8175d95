"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Blob store backing database
    database_url: str = "sqlite:///./debt_tracker.db"

    # Blob keys (current layout + legacy single-debt layout)
    debts_key: str = "debt_tracker_debts_v1"
    payments_key: str = "debt_tracker_payments_v2"
    legacy_settings_key: str = "debt_tracker_settings_v1"
    legacy_payments_key: str = "debt_tracker_payments_v1"

    # Service
    service_name: str = "debt-tracker"
    log_level: str = "INFO"

    # Advisory (Google Generative Language API)
    advisory_api_key: str = ""
    advisory_api_base: str = "https://generativelanguage.googleapis.com"
    advisory_model: str = "gemini-2.5-flash"
    advisory_language: str = "Spanish"

    # HTTP Client
    http_timeout_seconds: float = 10.0

    # Report
    report_recent_payments: int = 5


settings = Settings()
