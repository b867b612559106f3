"""Configuration settings for the word drill backend."""
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)

# Selection settings
DEFAULT_WORD_COUNT = 10
WEAK_WORD_SHARE = 0.5  # half of the requested words come from the user's weakest


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///wordrill.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"
    busy_timeout: float = float(os.getenv("DATABASE_BUSY_TIMEOUT", "30"))


@dataclass
class StoreSettings:
    """Table and index names of the document store."""
    words_table: str = os.getenv("WORDS_TABLE", "words")
    users_table: str = os.getenv("USERS_TABLE", "users")
    word_statistics_table: str = os.getenv("WORD_STATISTICS_TABLE", "word_statistics")
    email_index: str = os.getenv("EMAIL_INDEX", "email-user_id-index")
    success_ratio_index: str = os.getenv("SUCCESS_RATIO_INDEX", "user_id-success_ratio-index")


@dataclass
class SelectionSettings:
    """Word selection settings."""
    default_word_count: int = int(os.getenv("DEFAULT_WORD_COUNT", str(DEFAULT_WORD_COUNT)))
    weak_word_share: float = float(os.getenv("WEAK_WORD_SHARE", str(WEAK_WORD_SHARE)))


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class MonitoringSettings:
    """Prometheus exporter settings."""
    enabled: bool = os.getenv("MONITORING_ENABLED", "false").lower() == "true"
    port: int = int(os.getenv("MONITORING_PORT", "9090"))


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_store_settings() -> StoreSettings:
    """Get store settings."""
    return StoreSettings()


def get_selection_settings() -> SelectionSettings:
    """Get selection settings."""
    return SelectionSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    database: DatabaseSettings = field(default_factory=get_database_settings)
    store: StoreSettings = field(default_factory=get_store_settings)
    selection: SelectionSettings = field(default_factory=get_selection_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.selection.weak_word_share < 0 or self.selection.weak_word_share > 1:
            raise ValueError("WEAK_WORD_SHARE must be between 0 and 1")

        if self.selection.default_word_count < 1:
            raise ValueError("DEFAULT_WORD_COUNT must be positive")

        for name in (
            self.store.words_table,
            self.store.users_table,
            self.store.word_statistics_table,
            self.store.email_index,
            self.store.success_ratio_index,
        ):
            if not name:
                raise ValueError("Table and index names cannot be empty")


# Create global settings instance
settings = Settings()
settings.validate()
