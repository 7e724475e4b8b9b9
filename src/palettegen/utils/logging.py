"""Logging configuration for PaletteGen."""

import logging
import sys
import time
from pathlib import Path
from typing import Dict, Optional

import colorlog

CONSOLE_FORMAT = "%(levelname)-8s %(name)s: %(message)s"
COLOR_CONSOLE_FORMAT = "%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that stay at WARNING or above even under --verbose.
NOISY_LOGGERS = ("PIL", "matplotlib")


def verbosity_level(verbose: bool = False, quiet: bool = False) -> int:
    """Map the CLI verbosity flags to a logging level.

    ``quiet`` wins over ``verbose`` when both are given.
    """
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.INFO


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[str] = None,
    enable_colors: bool = True,
) -> int:
    """Setup logging for a PaletteGen run.

    Args:
        verbose: Log pipeline timings and sampling details at DEBUG
        quiet: Only log errors
        log_file: Optional log file path, always written at DEBUG
        enable_colors: Whether to use colored output on a terminal

    Returns:
        The console logging level that was applied
    """
    level = verbosity_level(verbose, quiet)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    if enable_colors and sys.stderr.isatty():
        formatter = colorlog.ColoredFormatter(
            COLOR_CONSOLE_FORMAT,
            datefmt=DATE_FORMAT,
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )
    else:
        formatter = logging.Formatter(CONSOLE_FORMAT)
    console_handler.setFormatter(formatter)

    handlers = [console_handler]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    logging.getLogger("palettegen").setLevel(level)

    return level


class PerformanceLogger:
    """Logger for tracking per-stage timings of an extraction."""

    def __init__(self, name: str = "palettegen.performance"):
        """Initialize performance logger."""
        self.logger = logging.getLogger(name)
        self.timers: Dict[str, float] = {}

    def start_timer(self, name: str) -> None:
        """Start a performance timer.

        Args:
            name: Timer name
        """
        self.timers[name] = time.perf_counter()

    def end_timer(self, name: str) -> float:
        """End a performance timer and log result.

        Args:
            name: Timer name

        Returns:
            Elapsed time in seconds
        """
        if name not in self.timers:
            self.logger.warning(f"Timer '{name}' was not started")
            return 0.0

        elapsed = time.perf_counter() - self.timers.pop(name)
        self.logger.debug(f"{name}: {elapsed * 1000:.1f}ms")
        return elapsed


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
