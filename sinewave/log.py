from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_LEVEL = logging.INFO


def setup_logger(
    name: str = "sinewave",
    level: int | str = LOG_LEVEL,
    log_file: Optional[str | Path] = None,
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(console_handler)

    if log_file is not None:
        path = Path(log_file)
        target = os.path.abspath(path)
        # one file handler per path, however often this is called
        if not any(
            isinstance(h, RotatingFileHandler) and h.baseFilename == target
            for h in logger.handlers
        ):
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                path, maxBytes=1_000_000, backupCount=5, encoding="utf-8"
            )
            file_handler.setFormatter(logging.Formatter(
                "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            ))
            logger.addHandler(file_handler)

    return logger
