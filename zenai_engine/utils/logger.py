"""
Engine-wide logging.

One named logger is shared by every component; messages carry the emitting
component in brackets ("[OrchestratorSystem] ..."). Console output is short,
the log file under config.LOGS_DIR keeps file and line numbers.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from zenai_engine.config.settings import config

ENGINE_LOGGER_NAME = "zenai_engine"

CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(message)s"
FILE_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(filename)s:%(lineno)d | %(message)s"

# Provider SDKs and HTTP clients log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "anthropic", "chromadb", "redis")


def _handlers(level: int, log_file: Optional[Path]) -> List[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    handlers: List[logging.Handler] = [console]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
    return handlers


def setup_logger(
    name: str = ENGINE_LOGGER_NAME,
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure and return the engine logger.

    Calling it again for an already configured name returns the existing
    logger untouched, so importing modules never stacks handlers.

    Args:
        name: Logger name
        level: Level name; defaults to config.LOG_LEVEL
        log_file: Log file path; defaults to config.LOG_FILE
    """
    engine_logger = logging.getLogger(name)
    if engine_logger.handlers:
        return engine_logger

    numeric_level = getattr(logging, (level or config.LOG_LEVEL).upper(), logging.INFO)
    engine_logger.setLevel(numeric_level)
    for handler in _handlers(numeric_level, log_file or config.LOG_FILE):
        engine_logger.addHandler(handler)

    for noisy in QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return engine_logger


logger = setup_logger()
