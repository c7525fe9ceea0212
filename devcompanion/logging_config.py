"""
Logging configuration for devcompanion processes.

The level and log directory are ordinary settings of the layered config
(``log_level``/``log_directory`` in config.json or DEVCOMPANION_LOG_LEVEL
and DEVCOMPANION_LOG_DIRECTORY). Whether logging is on at all, console
echo and the shared session ID are per-process and only come from the
environment:

    DEVCOMPANION_LOG_ENABLED: '0', '1', 'true', 'false'
    DEVCOMPANION_LOG_CONSOLE: echo entries to stderr
    DEVCOMPANION_SESSION_ID: session ID shared by cooperating processes

Usage:
    from devcompanion.logging_config import configure_from_config

    configure_from_config(ConfigLoader(project_root).load())
"""

import os
from typing import Optional

from devcompanion.config.loader import CompanionConfig
from devcompanion.logger import configure_logger


def configure_from_environment() -> None:
    """Configure logging before any config file has been read."""
    _configure(
        level=os.environ.get("DEVCOMPANION_LOG_LEVEL", "INFO"),
        log_directory=os.environ.get("DEVCOMPANION_LOG_DIRECTORY"),
    )


def configure_from_config(config: CompanionConfig) -> None:
    """Apply the logging settings of a loaded CompanionConfig."""
    _configure(level=config.log_level, log_directory=config.log_directory)


def _configure(level: str, log_directory: Optional[str]) -> None:
    configure_logger(
        enabled=_parse_bool(os.environ.get("DEVCOMPANION_LOG_ENABLED"), True),
        level=level,
        log_directory=log_directory,
        console_output=_parse_bool(os.environ.get("DEVCOMPANION_LOG_CONSOLE"), False),
        session_id=os.environ.get("DEVCOMPANION_SESSION_ID"),
    )


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


__all__ = [
    "configure_from_config",
    "configure_from_environment",
]
