"""
Build Logging

Console logging for the build pipeline. Each pipeline module gets its own
named logger whose level can be set independently.

Usage:
    from asset_inliner.logging import get_logger

    log = get_logger('writer')
    log.debug("Compressing document")
    log.info("Wrote dist/index.html")

Configuration:
    Environment variables (or the project's .env file, picked up when the
    build configuration is loaded):
        INLINER_LOG_LEVEL=DEBUG        # Default for every module
        INLINER_LOG_WRITER=DEBUG       # Only the writer module
        INLINER_LOG_RENDER=OFF

    Or programmatically:
        from asset_inliner.logging import configure_logging
        configure_logging(level='DEBUG', modules={'render': 'INFO'})
"""

import os
import sys
from enum import IntEnum
from functools import lru_cache
from typing import Any, Dict, Optional


class LogLevel(IntEnum):
    """Levels, numbered like Python's logging module."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    OFF = 100


_config: Dict[str, Any] = {
    'default_level': LogLevel.INFO,
    'module_levels': {},
}

ENV_PREFIX = 'INLINER_LOG_'
ENV_DEFAULT = 'INLINER_LOG_LEVEL'

_LEVEL_NAMES = {
    'DEBUG': LogLevel.DEBUG,
    'INFO': LogLevel.INFO,
    'WARNING': LogLevel.WARNING,
    'WARN': LogLevel.WARNING,
    'ERROR': LogLevel.ERROR,
    'OFF': LogLevel.OFF,
}


def _level_from_string(name: str) -> LogLevel:
    """Level for a name such as 'debug'; unknown names mean INFO."""
    return _LEVEL_NAMES.get(name.strip().upper(), LogLevel.INFO)


def configure_logging(
    level: str = 'INFO',
    modules: Optional[Dict[str, str]] = None,
) -> None:
    """
    Set the default level and, optionally, per-module levels.

    Args:
        level: Level for modules without their own setting
        modules: module name -> level name
    """
    _config['default_level'] = _level_from_string(level)
    for mod, mod_level in (modules or {}).items():
        _config['module_levels'][mod] = _level_from_string(mod_level)


def load_env_config() -> None:
    """Apply INLINER_LOG_* variables from the current environment."""
    if ENV_DEFAULT in os.environ:
        _config['default_level'] = _level_from_string(os.environ[ENV_DEFAULT])

    for key, value in os.environ.items():
        if key.startswith(ENV_PREFIX) and key != ENV_DEFAULT:
            _config['module_levels'][key[len(ENV_PREFIX):].lower()] = _level_from_string(value)


def reset_logging() -> None:
    """Back to INFO everywhere, then re-apply the environment."""
    _config['default_level'] = LogLevel.INFO
    _config['module_levels'].clear()
    load_env_config()


def disable_logging() -> None:
    """Silence every module."""
    _config['default_level'] = LogLevel.OFF
    _config['module_levels'].clear()


load_env_config()


class BuildLogger:
    """
    Named logger printing ``[module] LEVEL: message``.

    DEBUG and INFO go to stdout; WARNING and ERROR go to stderr.
    """

    def __init__(self, module: str):
        self.module = module
        self._key = module.lower().replace('.', '_')

    @property
    def level(self) -> LogLevel:
        return _config['module_levels'].get(self._key, _config['default_level'])

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def _log(self, level: LogLevel, msg: str, args: tuple) -> None:
        if not self.is_enabled_for(level):
            return
        if args:
            try:
                msg = msg % args
            except (TypeError, ValueError):
                msg = f"{msg} {args}"
        stream = sys.stderr if level >= LogLevel.WARNING else sys.stdout
        print(f"[{self.module}] {level.name}: {msg}", file=stream)

    def debug(self, msg: str, *args) -> None:
        self._log(LogLevel.DEBUG, msg, args)

    def info(self, msg: str, *args) -> None:
        self._log(LogLevel.INFO, msg, args)

    def warning(self, msg: str, *args) -> None:
        self._log(LogLevel.WARNING, msg, args)

    def error(self, msg: str, *args) -> None:
        self._log(LogLevel.ERROR, msg, args)


@lru_cache(maxsize=64)
def get_logger(module: str) -> BuildLogger:
    """Logger for ``module``; the same instance is returned on every call."""
    return BuildLogger(module)
