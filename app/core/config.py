from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import PostgresDsn, computed_field
from typing import List

class Settings(BaseSettings):
    PROJECT_NAME: str = "Booking Engine"
    API_V1_STR: str = "/api/v1"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_DB: str = "bookings"
    POSTGRES_PORT: int = 5432

    # full URL wins over the POSTGRES_* parts (tests use sqlite://)
    DATABASE_URL: str | None = None

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 300
    AUTO_CREATE_TABLES: bool = True

    @computed_field
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return str(PostgresDsn.build(
            scheme="postgresql",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_SERVER,
            port=self.POSTGRES_PORT,
            path=self.POSTGRES_DB,
        ))

    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    LOG_LEVEL: str = "INFO"

    # Scheduling
    DEFAULT_TIMEZONE: str = "Europe/Paris"
    # false = interpret working hours in the server's local zone
    APPLY_HOST_TIMEZONE: bool = True

    # Notifications
    NOTIFICATION_BACKEND: str = "log"   # log | redis
    REDIS_URL: str = "redis://localhost:6379"
    NOTIFICATION_CHANNEL: str = "bookings"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore"
    )

settings = Settings()
