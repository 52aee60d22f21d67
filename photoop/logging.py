"""
Photo Op Logging

Console logging with per-module levels, plus structured gameplay records.

Gameplay records (session start, scored hits, game over) go to a sink
registered per channel. Only the 'session' channel is used by the game.
JsonlSink appends one JSON object per line; NullSink drops records when
the channel is not enabled.

Usage:
    from photoop.logging import get_logger, emit_record

    log = get_logger('engine')
    log.debug("Flash triggered at %.2f", position)

    emit_record('session', {'type': 'game_over', 'score': 12})

Configuration:
    Environment variables:
        PHOTOOP_LOG_LEVEL=DEBUG                 # Global default level
        PHOTOOP_LOG_ENGINE=TRACE                # Per-module level
        PHOTOOP_LOG_DIR=/tmp/photoop            # Where record files go
        PHOTOOP_LOGGING_SESSION_ENABLED=true    # Write 'session' records

    Or programmatically:
        configure_logging(level='DEBUG', modules={'ticker': 'INFO'})
"""

import json
import os
import sys
import time
from abc import ABC, abstractmethod
from enum import IntEnum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, TextIO


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""
    TRACE = 5      # Per-tick detail
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50
    OFF = 100      # Disable logging


_LEVEL_NAMES = {
    'TRACE': LogLevel.TRACE,
    'DEBUG': LogLevel.DEBUG,
    'INFO': LogLevel.INFO,
    'WARNING': LogLevel.WARNING,
    'WARN': LogLevel.WARNING,
    'ERROR': LogLevel.ERROR,
    'CRITICAL': LogLevel.CRITICAL,
    'OFF': LogLevel.OFF,
}

_config: Dict[str, Any] = {
    'default_level': LogLevel.INFO,
    'module_levels': {},
    'log_dir': None,         # None = platform default
    'channels': {},          # record channel -> enabled
}


# =============================================================================
# Structured records
# =============================================================================

class RecordSink(ABC):
    """Destination for structured gameplay records."""

    @abstractmethod
    def emit(self, channel: str, record: Dict[str, Any]) -> None:
        """Write one JSON-serializable record."""
        pass

    @abstractmethod
    def close(self) -> None:
        pass


class JsonlSink(RecordSink):
    """
    Appends records to `<session_name>_<channel>.jsonl` files.

    Files are opened on the first record of a channel, start with a header
    line and end with a footer line written by close(). Output is line
    buffered so a crash loses at most the record being written.

    Args:
        log_dir: Directory for record files (default: get_log_dir())
        session_name: File name prefix (default: start timestamp)
    """

    def __init__(self, log_dir: Optional[str] = None, session_name: Optional[str] = None):
        self._log_dir = Path(log_dir) if log_dir else Path(get_log_dir())
        self._session_name = session_name or time.strftime("%Y%m%d_%H%M%S")
        self._files: Dict[str, TextIO] = {}

    def path_for(self, channel: str) -> Path:
        return self._log_dir / f"{self._session_name}_{channel}.jsonl"

    def _open(self, channel: str) -> TextIO:
        if channel not in self._files:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            f = open(self.path_for(channel), 'a', buffering=1)
            f.write(json.dumps({
                'type': 'header',
                'channel': channel,
                'session_name': self._session_name,
                'start_time': time.time(),
            }) + "\n")
            self._files[channel] = f
        return self._files[channel]

    def emit(self, channel: str, record: Dict[str, Any]) -> None:
        self._open(channel).write(json.dumps({'wall_time': time.time(), **record}) + "\n")

    def close(self) -> None:
        for channel, f in self._files.items():
            f.write(json.dumps({'type': 'footer', 'channel': channel, 'end_time': time.time()}) + "\n")
            f.close()
        self._files.clear()


class NullSink(RecordSink):
    """Drops every record."""

    def emit(self, channel: str, record: Dict[str, Any]) -> None:
        pass

    def close(self) -> None:
        pass


_sinks: Dict[str, RecordSink] = {}


def register_sink(channel: str, sink: RecordSink) -> None:
    """Route records for `channel` to `sink`, replacing any previous one."""
    _sinks[channel] = sink


def emit_record(channel: str, record: Dict[str, Any]) -> bool:
    """
    Send a record to the channel's sink.

    Returns:
        True if a sink received it, False if none is registered
    """
    sink = _sinks.get(channel)
    if sink is None:
        return False
    sink.emit(channel, record)
    return True


def close_all_sinks() -> None:
    """Close and unregister every sink."""
    for sink in _sinks.values():
        sink.close()
    _sinks.clear()


def channel_enabled(channel: str) -> bool:
    """Whether PHOTOOP_LOGGING_<CHANNEL>_ENABLED switched a channel on."""
    return bool(_config['channels'].get(channel.lower(), False))


def create_sink_for_environment(channel: str, session_name: Optional[str] = None) -> RecordSink:
    """JsonlSink if the channel is enabled, otherwise NullSink."""
    if not channel_enabled(channel):
        return NullSink()
    return JsonlSink(log_dir=_config['log_dir'], session_name=session_name)


# =============================================================================
# Configuration
# =============================================================================

def get_log_dir() -> str:
    """Get the record directory.

    PHOTOOP_LOG_DIR (or configure_logging(log_dir=...)) wins; otherwise a
    per-user data directory:
       - macOS: ~/Library/Application Support/PhotoOp/logs
       - Windows: %APPDATA%/PhotoOp/logs
       - Linux: $XDG_DATA_HOME/photoop/logs
    """
    if _config['log_dir']:
        return str(Path(_config['log_dir']).expanduser())

    if sys.platform == 'darwin':
        user_data = Path.home() / 'Library' / 'Application Support' / 'PhotoOp'
    elif sys.platform == 'win32':
        user_data = Path(os.environ.get('APPDATA', str(Path.home()))) / 'PhotoOp'
    else:
        xdg_data = os.environ.get('XDG_DATA_HOME', str(Path.home() / '.local' / 'share'))
        user_data = Path(xdg_data) / 'photoop'

    return str(user_data / 'logs')


def _level_from_string(level_str: str) -> LogLevel:
    """Convert a level name to LogLevel; unknown names mean INFO."""
    return _LEVEL_NAMES.get(level_str.upper(), LogLevel.INFO)


def _is_truthy(value: str) -> bool:
    return value.strip().lower() in ('true', '1', 'yes', 'on')


def configure_logging(
    level: str = 'INFO',
    modules: Optional[Dict[str, str]] = None,
    log_dir: Optional[str] = None,
) -> None:
    """
    Configure the logging system.

    Args:
        level: Default log level for all modules
        modules: Dict of module_name -> level overrides
        log_dir: Directory for record files
    """
    _config['default_level'] = _level_from_string(level)

    for mod, mod_level in (modules or {}).items():
        _config['module_levels'][mod] = _level_from_string(mod_level)

    if log_dir:
        _config['log_dir'] = log_dir


def _load_env_config() -> None:
    """Read PHOTOOP_LOG_* levels and PHOTOOP_LOGGING_<CHANNEL>_ENABLED flags."""
    for key, value in os.environ.items():
        if key == 'PHOTOOP_LOG_LEVEL':
            _config['default_level'] = _level_from_string(value)
        elif key == 'PHOTOOP_LOG_DIR':
            _config['log_dir'] = value
        elif key.startswith('PHOTOOP_LOG_'):
            _config['module_levels'][key[len('PHOTOOP_LOG_'):].lower()] = _level_from_string(value)
        elif key.startswith('PHOTOOP_LOGGING_') and key.endswith('_ENABLED'):
            channel = key[len('PHOTOOP_LOGGING_'):-len('_ENABLED')].lower()
            _config['channels'][channel] = _is_truthy(value)


_load_env_config()


# =============================================================================
# Console logger
# =============================================================================

class PhotoOpLogger:
    """Logger for a specific module, printing `[module] LEVEL: message`."""

    def __init__(self, module: str):
        self.module = module
        self._module_key = module.lower().replace('.', '_')

    @property
    def level(self) -> LogLevel:
        """Effective level: the module override, else the default."""
        return _config['module_levels'].get(self._module_key, _config['default_level'])

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def _log(self, level: LogLevel, level_name: str, msg: str, *args) -> None:
        if not self.is_enabled_for(level):
            return

        if args:
            try:
                msg = msg % args
            except (TypeError, ValueError):
                msg = f"{msg} {args}"

        print(f"[{self.module}] {level_name}: {msg}")

    def trace(self, msg: str, *args) -> None:
        """Log at TRACE level (per-tick detail)."""
        self._log(LogLevel.TRACE, 'TRACE', msg, *args)

    def debug(self, msg: str, *args) -> None:
        self._log(LogLevel.DEBUG, 'DEBUG', msg, *args)

    def info(self, msg: str, *args) -> None:
        self._log(LogLevel.INFO, 'INFO', msg, *args)

    def warning(self, msg: str, *args) -> None:
        self._log(LogLevel.WARNING, 'WARN', msg, *args)

    def error(self, msg: str, *args) -> None:
        self._log(LogLevel.ERROR, 'ERROR', msg, *args)


@lru_cache(maxsize=64)
def get_logger(module: str) -> PhotoOpLogger:
    """
    Get a logger for the specified module.

    Loggers are cached, so calling get_logger('foo') multiple times
    returns the same logger instance.
    """
    return PhotoOpLogger(module)
