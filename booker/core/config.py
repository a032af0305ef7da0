from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BOOKING_TIMEZONE: str = "Europe/Brussels"
    WINDOW_OPEN_HOUR: int = Field(default=9, ge=0, le=23)
    WINDOW_OPEN_MINUTE: int = Field(default=0, ge=0, le=59)
    PREPARATION_LEAD_SECONDS: float = Field(default=60.0, gt=0)

    RECONCILE_INTERVAL_SECONDS: float = Field(default=20.0, gt=0)
    COUNTDOWN_INTERVAL_SECONDS: float = Field(default=1.0, gt=0)

    # Heuristic waits for the target page to render after each step
    SETTLE_AFTER_OPEN_SECONDS: float = 1.0
    SETTLE_AFTER_SELECT_SECONDS: float = 0.4
    SETTLE_AFTER_CONFIRM_SECONDS: float = 0.5
    MANUAL_COMMIT_DELAY_SECONDS: float = 1.5
    EXECUTOR_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    INDOOR_FIELDS: list[int] = [1, 2, 3]
    OUTDOOR_FIELDS: list[int] = [1, 2, 3, 4, 5]

    ITEMS_FILE: str = "./data/items.json"
    STATUS_WEBHOOK_URL: str | None = None
    STATUS_HISTORY_LIMIT: int = 50


settings = Settings()
