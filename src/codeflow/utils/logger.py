"""Logging setup for codeflow.

Every module logs through a child of the "codeflow" logger
(codeflow.analyzers.javascript, codeflow.storage, ...). setup_logger()
attaches handlers to the package logger once and can give individual areas
their own level, e.g. keep the server quiet while debugging the analyzers.
"""

import logging
import sys
from pathlib import Path
from typing import Mapping, Optional

from rich.console import Console
from rich.logging import RichHandler


ROOT_LOGGER = "codeflow"

FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _level(value) -> int:
    if isinstance(value, int):
        return value
    return getattr(logging, str(value).upper(), logging.INFO)


def setup_logger(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    rich_output: bool = True,
    module_levels: Optional[Mapping[str, str]] = None,
) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Level of the "codeflow" logger (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file that receives every record the loggers pass
        rich_output: Render console output with rich, else plain stderr lines
        module_levels: Per-area overrides keyed relative to the package,
            e.g. {"analyzers.javascript": "DEBUG", "server": "WARNING"}

    Returns:
        The configured "codeflow" logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(_level(level))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if rich_output:
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=False
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            logging.Formatter("[%(levelname)s] %(name)s: %(message)s")
        )
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    for area, area_level in (module_levels or {}).items():
        logging.getLogger(f"{ROOT_LOGGER}.{area}").setLevel(_level(area_level))

    return logger


def setup_from_config(cfg, verbose: bool = False) -> logging.Logger:
    """Configure logging from the logging.* section of a Config.

    verbose forces DEBUG on the package logger; per-area levels still apply.
    """
    return setup_logger(
        level="DEBUG" if verbose else cfg.get("logging.level", "INFO"),
        log_file=cfg.log_file,
        rich_output=bool(cfg.get("logging.rich", True)),
        module_levels=cfg.get("logging.modules") or {},
    )
