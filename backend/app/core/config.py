from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./finance.db"
    LOG_LEVEL: str = "INFO"

    # CORS origins for the Next.js frontend
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Currency every payment is converted to before it hits the ledger
    BASE_CURRENCY: str = "INR"

    # Redis / Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"
    CELERY_TIMEZONE: str = "Asia/Kolkata"

    # Hour of day (CELERY_TIMEZONE) at which due expense reminders are raised
    REMINDER_HOUR: int = 9


settings = Settings()
