from typing import List, Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./kguardian.db"
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_TIMEOUT: float = 2.0  # seconds; publishing happens inside the submit request
    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: str = "minioadmin"
    MINIO_BUCKET: str = "incident-media"
    MINIO_SECURE: bool = False
    MINIO_PUBLIC_URL: Optional[str] = None  # e.g. a CDN in front of the bucket
    SECRET_KEY: str = "change-me"
    JWT_AUDIENCE: str = "authenticated"
    API_PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    SQL_ECHO: bool = False
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        url = self.DATABASE_URL
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://"):]
        if url.startswith("postgresql://"):
            url = "postgresql+asyncpg://" + url[len("postgresql://"):]
        return url

    @property
    def is_sqlite(self) -> bool:
        return self.ASYNC_DATABASE_URL.startswith("sqlite")

settings = Settings()
