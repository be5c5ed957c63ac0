import logging
import logging.config

from utils.app_config import config_dir, get_log_level

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(levelname)s %(name)s: %(message)s"},
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s "
            "[%(process)d:%(threadName)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "simple",
        },
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "verbose",
            "filename": "household_budget.log",
            "maxBytes": 2_000_000,
            "backupCount": 3,
            "encoding": "utf-8",
        },
    },
    "loggers": {
        "": {
            "level": "DEBUG",
            "handlers": ["console", "file"],
        },
        "matplotlib": {"level": "WARNING", "propagate": True},
        "PIL": {"level": "WARNING", "propagate": True},
    },
}


def build_logging_config(level: str | None = None) -> dict:
    """Return LOGGING with the file handler placed in the config dir."""
    log_dir = config_dir() / "logs"
    config = {
        **LOGGING,
        "handlers": {name: dict(h) for name, h in LOGGING["handlers"].items()},
    }
    config["handlers"]["file"]["filename"] = str(log_dir / "household_budget.log")
    config["handlers"]["console"]["level"] = level or get_log_level()
    return config


def configure_logging(level: str | None = None) -> None:
    config = build_logging_config(level)
    (config_dir() / "logs").mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(config)
