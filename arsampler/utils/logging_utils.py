# arsampler/utils/logging_utils.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from rich.console import Console
from rich.logging import RichHandler
from tqdm import tqdm

PACKAGE_LOGGER = "arsampler"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    *,
    rich: bool = True,
) -> logging.Logger:
    """Configure the ``arsampler`` logger with a stderr console handler and an optional file."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    if rich:
        console: logging.Handler = RichHandler(
            console=Console(stderr=True), show_time=True, show_path=False, markup=False
        )
    else:
        console = logging.StreamHandler()
        console.setFormatter(
            logging.Formatter("[%(asctime)s] %(levelname)s - %(message)s", datefmt="%H:%M:%S")
        )
    console.setLevel(level)
    logger.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(fh)

    logger.debug("Logger initialized.")
    return logger


@dataclass
class Timer:
    """Wall-clock timer for a sampling phase; logs at debug level."""
    name: str = "task"
    logger: Optional[logging.Logger] = None
    start: float = 0.0
    elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.elapsed = time.perf_counter() - self.start
        if self.logger is None:
            return
        if exc_type is None:
            self.logger.debug("[%s] finished in %.3fs", self.name, self.elapsed)
        else:
            self.logger.debug("[%s] aborted by %s after %.3fs", self.name, exc_type.__name__, self.elapsed)


def progress(total: int, desc: str = "ARS", enabled: bool = True) -> tqdm:
    """Counter-style bar over accepted samples; ``enabled=False`` keeps it silent."""
    return tqdm(total=total, desc=desc, unit="draw", leave=False, disable=not enabled)


def log_config(logger: logging.Logger, cfg: Mapping[str, Any], prefix: str = "") -> None:
    """Log a nested run config one dotted key per line."""
    if not prefix:
        logger.info("=== Effective Config ===")
    for key in sorted(cfg):
        value = cfg[key]
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            log_config(logger, value, dotted)
        else:
            logger.info("%s: %r", dotted, value)
