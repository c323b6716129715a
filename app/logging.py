import logging
import structlog
import sys
from pathlib import Path

from .config import settings

SERVICE_NAME = "dividend-projections"
_NOISY_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _renderer(fmt: str):
    # "console" is for the operator scripts; the API always logs JSON lines
    if fmt.strip().lower() == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def setup_logging(level: str | None = None, fmt: str | None = None) -> int:
    """Route structlog events through the stdlib root logger.

    Level and format fall back to LOG_LEVEL / LOG_FORMAT. Returns the numeric
    level that was applied.
    """
    level_name = (level or settings.log_level or "INFO").upper()
    log_level = getattr(logging, level_name, logging.INFO)
    error_log_path = settings.log_error_file.strip()

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(log_level)

    formatter = logging.Formatter("%(message)s")
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    # Errors also go to a file when LOG_ERROR_FILE is set
    if error_log_path:
        Path(error_log_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(error_log_path)
        file_handler.setLevel(logging.ERROR)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=SERVICE_NAME)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            _renderer(fmt or settings.log_format),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=False,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(log_level)
    return log_level
