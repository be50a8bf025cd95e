import logging
import logging.config
from pathlib import Path

from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024

def _rotating_file(path: Path, level: str) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(path),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": 5,
    }

def build_logging_config(log_dir: str, to_file: bool = True) -> dict:
    """dictConfig for the service. Tests run console-only."""
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "detailed",
            "stream": "ext://sys.stdout",
        },
    }
    if to_file:
        handlers["file"] = _rotating_file(Path(log_dir) / "app.log", "INFO")
        handlers["error_file"] = _rotating_file(Path(log_dir) / "error.log", "ERROR")

    names = list(handlers)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"detailed": {"format": LOG_FORMAT}},
        "handlers": handlers,
        "root": {"level": "INFO", "handlers": names},
        "loggers": {
            "app": {"level": "INFO", "handlers": names, "propagate": False},
            # HIT/MISS lines
            "app.services.cache_service": {"level": "DEBUG", "propagate": True},
            "uvicorn.access": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        },
    }

def configure_logging():
    to_file = not settings.TESTING
    if to_file:
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(settings.LOG_DIR, to_file=to_file))
