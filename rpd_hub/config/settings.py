from functools import lru_cache

from pydantic_settings import BaseSettings

DEFAULT_SENDER = "RPD Hub <no-reply@rpdhub.app>"


class Settings(BaseSettings):
    # App
    app_host: str = "0.0.0.0"
    app_port: int = 3000
    debug: bool = False
    cors_origins: list[str] = ["*"]

    ENVIRONMENT: str = "development"

    # Database
    database_url: str = "sqlite+aiosqlite:///./rpd.db"
    LOG_DB: bool = False

    # Email (SMTP relay)
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_pass: str = ""
    smtp_from: str = ""
    # Most shared relays present certificates that do not verify
    smtp_tls_reject_unauthorized: bool = False
    smtp_timeout: float = 15.0
    smtp_max_connections: int = 3

    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0
    SENTRY_PROFILES_SAMPLE_RATE: float = 0.0

    RUN_MIGRATIONS_ON_STARTUP: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_user)

    @property
    def sender_address(self) -> str:
        """From address: explicit override, then the login if it is an address."""
        if self.smtp_from:
            return self.smtp_from
        if "@" in self.smtp_user:
            return self.smtp_user
        return DEFAULT_SENDER


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
