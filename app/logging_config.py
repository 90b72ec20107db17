import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"

# Chatty at INFO: uvicorn logs every request, SQLAlchemy every statement.
QUIET_LOGGERS = ("uvicorn.access", "websockets", "sqlalchemy.engine")


def _resolve_level(level) -> int:
    if level is None:
        from app.config import settings

        level = settings.log_level
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str | None = None) -> None:
    """Send all application logs to stdout at the configured LOG_LEVEL."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(_resolve_level(level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
