"""
Logging Configuration
Sets up the 'barometer' logger namespace for the demo and for tests.

The level can be overridden without code changes through the
BAROMETER_LOG_LEVEL environment variable (e.g. "DEBUG" to trace every tick of
the fluid-state updater).
"""
import logging
import os
import sys
from typing import Optional, Union

LEVEL_ENV_VAR = "BAROMETER_LOG_LEVEL"

# Third-party loggers that flood DEBUG output while a figure is drawn.
NOISY_LOGGERS = ("matplotlib", "PIL")


def resolve_level(level: Union[int, str, None]) -> int:
    """Accept a logging constant or its name; fall back to the environment, then INFO."""
    if level is None:
        level = os.environ.get(LEVEL_ENV_VAR, logging.INFO)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        return resolved
    return int(level)


def setup_logging(level: Union[int, str, None] = None, log_file: Optional[str] = None) -> None:
    """
    Configures the 'barometer' logger.

    Args:
        level: Logging level or its name. Defaults to $BAROMETER_LOG_LEVEL, else INFO.
        log_file: Optional path; the file log also records the source line.
    """
    level = resolve_level(level)
    logger = logging.getLogger("barometer")
    logger.setLevel(level)

    # Only our own handlers are replaced, so repeated calls do not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    ))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s'
        ))
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logger.info(f"Logging initialized at {logging.getLevelName(level)}.")
