"""Centralized logging configuration for Scale Climber.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "scale_climber": logging.INFO,
    "scale_climber.pitch_detector": logging.INFO,
    "scale_climber.scale_mapper": logging.INFO,
    "scale_climber.session": logging.INFO,
    "scale_climber.audio": logging.INFO,
    "scale_climber.core": logging.INFO,
    "scale_climber.ui": logging.WARNING,  # UI modules often noisy, keep at WARNING
    "scale_climber.logger": logging.WARNING,  # Logger module itself should be quiet
    # Libraries/third-party
    "PIL": logging.ERROR,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'scale_climber' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)
    else:
        # stdout may have been swapped since the first call
        _console_handler.setStream(sys.stdout)

    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("scale_climber"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name if module_name else "")
        logger.setLevel(module_level)

        # Only the top of each subtree gets the handler; children propagate to it
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        if module_name in ("", "scale_climber") or not module_name.startswith(
            "scale_climber"
        ):
            logger.addHandler(_console_handler)
            logger.propagate = False

    logging.getLogger("scale_climber").info("Logging configuration complete")
