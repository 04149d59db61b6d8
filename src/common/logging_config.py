import logging
import logging.config

from common.config import LOG_LEVEL

# Centralized logging configuration for the listings map engine
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "rich": {
            "format": "%(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }
    },
    "handlers": {
        "console": {
            "class": "rich.logging.RichHandler",
            "level": LOG_LEVEL,
            "formatter": "rich",
            "show_time": True,
            "show_level": True,
            "show_path": False,
            "markup": True,
        }
    },
    "loggers": {
        # Engine components
        "listing_ingestor": {"level": "DEBUG"},
        "resolution_queue": {"level": "DEBUG"},
        "listing_filters": {"level": "DEBUG"},
        "listings_map_session": {"level": "DEBUG"},
        "common_metrics": {"level": "INFO"},
        # External libraries
        "httpx": {"level": "WARNING"},
        "httpcore": {"level": "WARNING"},
    },
    "root": {"level": LOG_LEVEL, "handlers": ["console"]},
}

# Track if logging has been configured to avoid duplicate configuration
_logging_configured = False


def get_logger(logger_name: str) -> logging.Logger:
    """
    Get a logger instance with the centralized configuration.

    Args:
        logger_name: Name of the logger (e.g., 'resolution_queue')

    Returns:
        Configured logger instance
    """
    global _logging_configured
    if not _logging_configured:
        logging.config.dictConfig(LOGGING_CONFIG)
        _logging_configured = True
    return logging.getLogger(logger_name)
