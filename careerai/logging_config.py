import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def setup_logging(level: int | str | None = None) -> None:
    """Configure the root logger for the API and scripts."""
    if level is None:
        from careerai.config import settings

        level = settings.log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        root.handlers.clear()
    root.addHandler(handler)
    # Provider calls go through httpx; its per-request INFO lines drown ours.
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
