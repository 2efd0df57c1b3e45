"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "creditguard-core"
    log_level: str = "INFO"

    # Bureau resolution
    default_bureau: str = "equifax"
    strict_bureau_isolation: bool = False  # True: never substitute another bureau's view

    # Score display defaults when a provider view omits its ranges
    score_range_min: int = 300
    score_range_max: int = 850

    default_currency: str = "USD"


settings = Settings()
