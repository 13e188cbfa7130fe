"""Logging setup.

Modules log through `logging.getLogger(__name__)` and prefix messages
with a bracketed subsystem tag ([SCHEDULE], [CATALOG], [ENRICH], ...).
setup_logging() configures the root handlers once at startup.
"""

import logging
import logging.config

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure console (and optional rotating file) logging.

    Args:
        level: Root log level name (e.g., 'INFO', 'DEBUG')
        log_file: Optional path for a rotating log file
    """
    handlers: dict[str, dict] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "default",
            "filename": log_file,
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 3,
            "encoding": "utf-8",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": LOG_FORMAT}},
            "handlers": handlers,
            "root": {"level": level, "handlers": list(handlers)},
            "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
        }
    )
    logging.getLogger(__name__).debug("[LOGGING] Configured level=%s file=%s", level, log_file)
