"""
Settings for the shift book service.

Everything comes from environment variables with sensible defaults, so a
bare ``uvicorn shiftbook.main:app`` works against a local SQLite file.
"""
import logging
import os
from dataclasses import dataclass, replace
from typing import Optional
from zoneinfo import ZoneInfo

from shiftbook.utils.timeutils import DEFAULT_TIMEZONE

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./shiftbook.sqlite3"
    shop_name: str = "My Shop"
    timezone: str = DEFAULT_TIMEZONE
    currency: str = "₺"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from the environment, falling back to the defaults."""
        env = os.environ
        settings = cls(
            database_url=env.get("SHIFTBOOK_DATABASE_URL", cls.database_url),
            shop_name=env.get("SHIFTBOOK_SHOP_NAME", cls.shop_name),
            timezone=env.get("SHIFTBOOK_TIMEZONE", cls.timezone),
            currency=env.get("SHIFTBOOK_CURRENCY", cls.currency),
            log_level=env.get("SHIFTBOOK_LOG_LEVEL", cls.log_level),
            log_file=env.get("SHIFTBOOK_LOG_FILE") or None,
        )
        return settings.checked()

    def checked(self) -> "Settings":
        try:
            ZoneInfo(self.timezone)
        except Exception:
            logging.getLogger(__name__).warning(
                "Unknown timezone %r, using %s", self.timezone, DEFAULT_TIMEZONE
            )
            return replace(self, timezone=DEFAULT_TIMEZONE)
        return self


def configure_logging(settings: Settings) -> logging.Logger:
    """Attach console (and optional file) handlers to the package logger once."""
    logger = logging.getLogger("shiftbook")
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    if getattr(logger, "_shiftbook_configured", False):
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger._shiftbook_configured = True
    return logger
