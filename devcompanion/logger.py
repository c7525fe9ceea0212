"""
Structured logging for devcompanion.

Every process (the control process, each UI process, a one-shot
``find-module`` run) appends JSON objects, one per line, to
``<log_directory>/devcompanion_<session_id>.jsonl``. Processes started
with the same ``DEVCOMPANION_SESSION_ID`` share one file, which is how a
tool switch can be followed from the request to every mirror.

Usage:
    from devcompanion.logger import get_logger

    logger = get_logger()
    logger.info("authority", "tool_switched", {"to": "codex"})

    with logger.span("structure", "load", {"path": path}) as span:
        index = StructureIndex.from_dict(data)
        span.set_data({"modules": len(index.modules)})
"""

import json
import os
import sys
import tempfile
import threading
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, TextIO

DEFAULT_LOG_DIRECTORY = Path(tempfile.gettempdir()) / "devcompanion_logs"


class LogLevel(IntEnum):
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @classmethod
    def from_string(cls, name: str) -> "LogLevel":
        """Level for a name such as "debug" or "WARNING"; INFO if unknown."""
        name = str(name).upper()
        if name == "WARNING":
            return cls.WARN
        return cls.__members__.get(name, cls.INFO)


class LogSpan:
    """Data collected while a timed block runs."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = dict(data or {})

    def set_data(self, data: Dict[str, Any]) -> None:
        self.data.update(data)


class StructuredLogger:
    """JSON-lines logger shared by every component of a process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._stream: Optional[TextIO] = None
        self.enabled = True
        self.level = LogLevel.INFO
        self.log_directory: Optional[Path] = None
        self.console_output = False
        self.session_id = f"{datetime.now():%Y%m%d_%H%M%S}_{os.getpid()}"

    @property
    def log_path(self) -> Path:
        directory = self.log_directory or DEFAULT_LOG_DIRECTORY
        return directory / f"devcompanion_{self.session_id}.jsonl"

    def configure(
        self,
        enabled: bool = True,
        level: str = "INFO",
        log_directory: Optional[str] = None,
        console_output: bool = False,
        session_id: Optional[str] = None,
    ) -> None:
        """Replace the logger settings; the next entry reopens the log file."""
        with self._lock:
            self._close_stream()
            self.enabled = enabled
            self.level = LogLevel.from_string(level)
            self.log_directory = Path(log_directory) if log_directory else None
            self.console_output = console_output
            if session_id:
                self.session_id = session_id

    def close(self) -> None:
        with self._lock:
            self._close_stream()

    def error(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.ERROR, component, event, data)

    def warn(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.WARN, component, event, data)

    def info(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.INFO, component, event, data)

    def debug(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.DEBUG, component, event, data)

    def trace(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.TRACE, component, event, data)

    @contextmanager
    def span(
        self,
        component: str,
        event: str,
        data: Optional[Dict[str, Any]] = None,
        level: LogLevel = LogLevel.DEBUG,
    ) -> Iterator[LogSpan]:
        """Time a block and log ``<event>_complete`` or ``<event>_error``.

        Exceptions are logged at ERROR and re-raised.
        """
        span = LogSpan(data)
        started = time.perf_counter()
        try:
            yield span
        except BaseException as e:
            span.set_data({"error": str(e), "error_type": type(e).__name__})
            self.log(LogLevel.ERROR, component, f"{event}_error", span.data,
                     duration_ms=(time.perf_counter() - started) * 1000)
            raise
        self.log(level, component, f"{event}_complete", span.data,
                 duration_ms=(time.perf_counter() - started) * 1000)

    def log(
        self,
        level: LogLevel,
        component: str,
        event: str,
        data: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
    ) -> None:
        if not self.enabled or level < self.level:
            return

        entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": level.name,
            "session_id": self.session_id,
            "pid": os.getpid(),
            "component": component,
            "event": event,
        }
        if data:
            entry["data"] = data
        if duration_ms is not None:
            entry["duration_ms"] = round(duration_ms, 3)
        line = json.dumps(entry, default=str)

        if self.console_output:
            print(f"[{level.name}] {component}.{event} {line}", file=sys.stderr)
        self._write(line)

    def _write(self, line: str) -> None:
        with self._lock:
            try:
                if self._stream is None:
                    path = self.log_path
                    path.parent.mkdir(parents=True, exist_ok=True)
                    self._stream = open(path, "a", encoding="utf-8")
                self._stream.write(line + "\n")
                self._stream.flush()
            except OSError as e:
                # A broken log sink must not take the command down with it
                self._close_stream()
                if self.console_output:
                    print(f"devcompanion: cannot write log: {e}", file=sys.stderr)

    def _close_stream(self) -> None:
        if self._stream is not None:
            stream, self._stream = self._stream, None
            try:
                stream.close()
            except OSError:
                pass


_logger: Optional[StructuredLogger] = None
_logger_lock = threading.Lock()


def get_logger() -> StructuredLogger:
    """Process-wide logger instance."""
    global _logger
    with _logger_lock:
        if _logger is None:
            _logger = StructuredLogger()
        return _logger


def configure_logger(
    enabled: bool = True,
    level: str = "INFO",
    log_directory: Optional[str] = None,
    console_output: bool = False,
    session_id: Optional[str] = None,
) -> None:
    """Configure the process-wide logger."""
    get_logger().configure(
        enabled=enabled,
        level=level,
        log_directory=log_directory,
        console_output=console_output,
        session_id=session_id,
    )
