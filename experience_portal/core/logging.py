import logging
import logging.config
import os

from experience_portal.core.config import get_settings


def build_logging_config(level: str = "INFO", log_dir: str = None) -> dict:
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "[%(asctime)s] [%(levelname)s] [%(name)s] [%(filename)s:%(lineno)d] %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "level": level,
                "class": "logging.StreamHandler",
                "formatter": "standard",
            },
        },
        "root": {
            "handlers": ["console"],
            "level": level,
        },
    }

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        config["handlers"]["file_app"] = {
            "level": "DEBUG",
            "class": "logging.handlers.TimedRotatingFileHandler",
            "filename": os.path.join(log_dir, "portal.log"),
            "when": "midnight",
            "interval": 1,
            "backupCount": 30,
            "encoding": "utf-8",
            "formatter": "standard",
        }
        config["root"]["handlers"].append("file_app")

    return config


def setup_logging():
    """Apply logging configuration from settings."""
    settings = get_settings()
    logging.config.dictConfig(build_logging_config(settings.log_level.upper(), settings.log_dir))


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with standard configuration."""
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
