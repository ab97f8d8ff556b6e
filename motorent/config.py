from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # ─── Application ───────────────────────────────────────────────────────────
    APP_NAME:  str  = "MotoRent Dumaguete"
    APP_ENV:   str  = "development"
    APP_DEBUG: bool = True
    APP_HOST:  str  = "0.0.0.0"
    APP_PORT:  int  = 8000
    APP_URL:   str  = "http://localhost:5173"   # customer-facing frontend, used in email links

    # ─── Database ──────────────────────────────────────────────────────────────
    DATABASE_URL:          str
    DATABASE_POOL_SIZE:    int  = 10
    DATABASE_MAX_OVERFLOW: int  = 20
    DATABASE_POOL_TIMEOUT: int  = 30
    DATABASE_ECHO:         bool = False

    # ─── JWT ───────────────────────────────────────────────────────────────────
    SECRET_KEY:                    str
    ALGORITHM:                     str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES:   int = 60
    REFRESH_TOKEN_EXPIRE_DAYS:     int = 7
    RESET_TOKEN_EXPIRE_MINUTES:    int = 60

    # ─── OTP ───────────────────────────────────────────────────────────────────
    OTP_EXPIRE_MINUTES: int = 10
    OTP_LENGTH:         int = 6

    # ─── Email ─────────────────────────────────────────────────────────────────
    EMAIL_SERVICE:       str = "console"    # resend | sendgrid | function | console
    EMAIL_API_KEY:       str = ""
    EMAIL_FROM:          str = "noreply@motorent.com"
    EMAIL_FUNCTION_URL:  str = ""
    EMAIL_TIMEOUT:       float = 15.0
    CONTACT_INBOX_EMAIL: str = "support@motorent.com"
    PICKUP_LOCATION:     str = "MotoRent Dumaguete Main Office"

    # ─── Storage ───────────────────────────────────────────────────────────────
    STORAGE_ROOT:              str = "./storage"
    PUBLIC_BASE_URL:           str = "http://localhost:8000"
    SIGNED_URL_EXPIRE_SECONDS: int = 3600

    # ─── CORS ──────────────────────────────────────────────────────────────────
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000,http://localhost:8000"

    def get_cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",")]

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    model_config = {"env_file": ".env", "case_sensitive": True, "extra": "ignore"}


settings = Settings()
