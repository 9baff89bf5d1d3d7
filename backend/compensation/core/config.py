from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Credit Compensation"
    version: str = "0.1.0"
    DEBUG: bool = False
    APP_DATABASE_DSN: str = "sqlite:////tmp/compensation.db"
    REDIS_URL: str = "redis://localhost:6379"
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Compensation engine
    COMPENSATION_ISOLATION_LEVEL: str = "SERIALIZABLE"
    COMPENSATION_MAX_TRIES: int = 5
    COMPENSATION_RETRY_DELAY_SECONDS: int = 2


settings = Settings()
