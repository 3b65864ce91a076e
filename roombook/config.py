from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # ─── Application ───────────────────────────────────────────────────────────
    APP_NAME: str = "Room Booking Admin"
    APP_ENV:  str = "development"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # ─── Database ──────────────────────────────────────────────────────────────
    DATABASE_URL:           str
    DATABASE_POOL_SIZE:     int  = 10
    DATABASE_MAX_OVERFLOW:  int  = 20
    DATABASE_POOL_TIMEOUT:  int  = 30
    DATABASE_ECHO:          bool = False
    DATABASE_CREATE_TABLES: bool = True

    # ─── CORS ──────────────────────────────────────────────────────────────────
    CORS_ORIGINS: str = "*"

    # ─── Rate Limiting ─────────────────────────────────────────────────────────
    RATE_LIMIT_ENABLED:        bool = True
    RATE_LIMIT_MAX:            int  = 100
    RATE_LIMIT_WINDOW_SECONDS: int  = 60

    # ─── Problem Documents ─────────────────────────────────────────────────────
    PROBLEM_TYPE_BASE: str = "/problems/"

    def get_cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    model_config = {"env_file": ".env", "case_sensitive": True, "extra": "ignore"}


settings = Settings()
