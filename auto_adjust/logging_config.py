"""
Logging configuration for auto-adjust.
Provides both console and file logging.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from auto_adjust.style.models import Style


def setup_logger(
    name: str = "auto_adjust",
    log_file: Optional[Path] = None,
    level: str = "INFO",
    console: bool = True
) -> logging.Logger:
    """
    Set up logger with both file and console handlers.

    Args:
        name: Logger name
        log_file: Path to log file (None = no file logging)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console: Whether to also log to console

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers
    logger.handlers = []

    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # File handler
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # Log everything to file
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Console handler (optional)
    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, level.upper()))
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def log_style_summary(logger: logging.Logger, style: Style) -> None:
    """Log an overview of a style and its rules."""
    logger.info("=" * 60)
    logger.info(f"STYLE v{style.version} ({style.metric})")
    logger.info("=" * 60)
    logger.info(f"Computed kinds: {sorted(k.value for k in style.computed_kinds)}")
    logger.info(f"Rules: {len(style.rules)} (total weight {style.total_weight})")
    for i, rule in enumerate(style.rules):
        logger.info(f"  [{i}] weight={rule.weight:<4d} dims={len(rule.centroid):<4d} delta={rule.delta.to_dict()}")
    logger.info("=" * 60)
