import logging
import structlog
import sys
from pathlib import Path

from .config import settings

_QUIET = ("httpx", "httpcore")
_SERVER = ("uvicorn", "uvicorn.error", "uvicorn.access")

def setup_logging(level: str | None = None, error_log_path: str | None = None):
    level_name = (level or settings.log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    if error_log_path is None:
        error_log_path = settings.log_error_file
    error_log_path = error_log_path.strip()

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)

    formatter = logging.Formatter("%(message)s")
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if error_log_path:
        Path(error_log_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(error_log_path, encoding="utf-8")
        file_handler.setLevel(logging.ERROR)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            # memos are free text, often non-ASCII
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
    )
    # httpx emits one INFO line per request
    for name in _QUIET:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
    for name in _SERVER:
        logging.getLogger(name).setLevel(log_level)
    return log_level
