"""Logging for the agent-seg command line.

Library modules log through ``logging.getLogger(__name__)`` and never attach
handlers. The CLI calls :func:`setup_logger` once per invocation, after the
config is loaded, so ``verbose`` and ``log-file`` decide where records go.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

__all__ = ["PACKAGE_LOGGER", "DEFAULT_LOG_FILE", "log_path_for", "setup_logger"]

PACKAGE_LOGGER = "agent_segmenter"
DEFAULT_LOG_FILE = Path("~/.agent-segmenter/logs/segmenter.log").expanduser()

STDERR_FORMAT = "[%(levelname).1s] %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3


def log_path_for(log_file: Union[str, bool]) -> Optional[Path]:
    """Where the ``log-file`` setting sends records; ``None`` when disabled."""
    if log_file is False:
        return None
    if log_file is True:
        return DEFAULT_LOG_FILE
    return Path(log_file).expanduser()


def setup_logger(config, name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Route the package logger according to a loaded ``Config``.

    Records at INFO and above go out when ``config.verbose`` is set,
    otherwise WARNING and above. They always reach stderr, and also a
    rotating file when ``config.log_file`` names one. Handlers from an
    earlier call are closed first.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = logging.INFO if config.verbose else logging.WARNING
    logger.setLevel(level)
    logger.propagate = False

    stderr_handler = logging.StreamHandler()
    stderr_handler.setFormatter(logging.Formatter(STDERR_FORMAT))
    logger.addHandler(stderr_handler)

    log_path = log_path_for(config.log_file)
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)
        logger.info("Logging to %s", log_path)

    return logger
