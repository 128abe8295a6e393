# Файл: src/blob_store_client/config.py

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Any, Optional

# --- 1. Настройки подключения к базе ---
class DatabaseConfig(BaseModel):
    # Полный SQLAlchemy URL; если задан, поля ниже для DSN не используются
    url: Optional[str] = None

    user: str = "postgres"
    password: str = "postgres"
    host: str = "localhost"
    port: int = 5432
    db: str = "blobs"

    pool_size: int = 5
    max_overflow: int = 5
    pool_timeout: int = 30
    pool_recycle: int = 1800
    pool_pre_ping: bool = True
    echo: bool = False

    def get_dsn(self) -> str:
        """Собирает DSN для SQLAlchemy из полей этого объекта."""
        if self.url:
            return self.url
        return f"postgresql+psycopg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db}"

    def engine_options(self) -> dict[str, Any]:
        """Аргументы для create_engine. SQLite-пулы не принимают параметры размера."""
        options: dict[str, Any] = {"echo": self.echo, "pool_pre_ping": self.pool_pre_ping}
        if self.get_dsn().startswith("sqlite"):
            # соединения из пула переходят между потоками
            options["connect_args"] = {"check_same_thread": False}
            return options
        options.update(
            pool_size=self.pool_size,
            max_overflow=self.max_overflow,
            pool_timeout=self.pool_timeout,
            pool_recycle=self.pool_recycle,
        )
        return options


# --- 2. Политика повторов для транзиентных ошибок ---
class RetryConfig(BaseModel):
    max_attempts: int = Field(3, ge=1)
    delay_seconds: float = Field(0.0, ge=0)


# --- 3. Основной класс для явной передачи конфигурации ---
class BlobStoreConfig(BaseModel):
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    maximum_file_size: int = Field(100 * 1024 * 1024, gt=0, description="bytes")


# --- 4. Settings для чтения из .env ---
class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BLOBSTORE_",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = "INFO"

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    maximum_file_size: int = 100 * 1024 * 1024

    def to_config(self) -> BlobStoreConfig:
        return BlobStoreConfig(
            database=self.database,
            retry=self.retry,
            maximum_file_size=self.maximum_file_size,
        )


# Ленивая инициализация
_cached_settings: Optional[Settings] = None

def get_settings() -> Settings:
    """
    Возвращает синглтон-экземпляр настроек, создавая его при первом вызове.
    Это предотвращает ошибки валидации при импорте.
    """
    global _cached_settings
    if _cached_settings is None:
        _cached_settings = Settings()
    return _cached_settings


def reset_settings() -> None:
    """Сбрасывает кэш, следующий get_settings() перечитает окружение."""
    global _cached_settings
    _cached_settings = None
