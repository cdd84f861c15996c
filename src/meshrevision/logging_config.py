"""
Logging Configuration
Handlers for command-line runs and the matching gmsh terminal verbosity.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "meshrevision"

# Upper bound of the package log level -> gmsh General.Verbosity
# (0 silent, 1 errors, 2 warnings, 5 status messages)
_GMSH_VERBOSITY = (
    (logging.DEBUG, 5),
    (logging.WARNING, 2),
    (logging.ERROR, 1),
)


def resolve_level(level: Union[int, str]) -> int:
    """
    Numeric logging level of a level name such as ``"DEBUG"`` or of an int.

    Raises:
        ValueError: If the name is not a known logging level.
    """
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level '{level}'.")
    return numeric


def setup_logging(level: Union[int, str] = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configures the logger for the 'meshrevision' namespace.

    The console receives records from ``level`` up. A log file, when given,
    also keeps the debug records, so a quiet run can still be inspected
    afterwards. Calling this again replaces the previous handlers.

    Args:
        level: Console level, as a name from ``--log-level`` or a number.
        log_file: Optional path to save logs to a file.

    Raises:
        ValueError: If ``level`` is an unknown level name.
    """
    level = resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(min(level, logging.DEBUG) if log_file else level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter('%(asctime)s %(levelname)-8s %(name)s: %(message)s', datefmt='%H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug(f"Logging initialized at {logging.getLevelName(level)}.")


def gmsh_verbosity() -> int:
    """gmsh ``General.Verbosity`` matching the effective level of the package logger."""
    level = logging.getLogger(PACKAGE_LOGGER).getEffectiveLevel()
    for bound, verbosity in _GMSH_VERBOSITY:
        if level <= bound:
            return verbosity
    return 0
