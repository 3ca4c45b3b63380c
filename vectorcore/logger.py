import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(
    name: str = "vectorcore", log_file: Optional[str] = None, log_dir: Optional[str] = None
) -> logging.Logger:
    if not name.startswith("vectorcore"):
        name = f"vectorcore.{name}"
    log_dir = log_dir or os.getenv("VECTORCORE_LOG_PATH")
    level_name = os.getenv("VECTORCORE_LOG_LEVEL", "INFO").upper()

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    formatter = logging.Formatter(LOG_FORMAT)

    # Console handler
    if not any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    ):
        ch = logging.StreamHandler()
        ch.setFormatter(formatter)
        logger.addHandler(ch)

    # File handler, only when a log folder is configured
    if log_dir:
        if not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, log_file or "vectorcore.log")
        if not any(
            isinstance(h, logging.FileHandler)
            and h.baseFilename == os.path.abspath(log_path)
            for h in logger.handlers
        ):
            fh = logging.FileHandler(log_path, encoding="utf-8")
            fh.setFormatter(formatter)
            logger.addHandler(fh)

    return logger


def configure_logging(folder: Optional[str] = None, level: Optional[str] = None) -> None:
    """Apply a settings-level log folder and level to every vectorcore logger."""
    manager = logging.Logger.manager
    names = [n for n in list(manager.loggerDict) if n == "vectorcore" or n.startswith("vectorcore.")]
    for name in names:
        logger = get_logger(name, log_dir=folder)
        if level:
            logger.setLevel(getattr(logging, level.upper(), logging.INFO))
