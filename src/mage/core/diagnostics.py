"""
Diagnostic Stream for Gnosis Mage

Writes the engine's internal events (captures, overrides, hooks, restores,
creations) to a line-oriented debug stream, and the alert lines produced by
``sub_alert``/``tag`` to an alert stream. Debug output only happens once the
diagnostic flag has been switched on; alerts are always written.
"""

import itertools
import json
import logging
import sys
import threading
from collections import deque
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set, Union

_logger_ids = itertools.count(1)


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


class DiagnosticFormat(Enum):
    """Supported diagnostic output formats."""

    CONSOLE = "console"
    STRUCTURED = "structured"


class DiagnosticStream:
    """Bounded buffer of recent diagnostic entries with subscribers."""

    def __init__(self, buffer_size: int = 1000):
        self.buffer = deque(maxlen=buffer_size)
        self.subscribers: Set[Callable] = set()
        self._lock = threading.RLock()

    def add(self, entry: Dict[str, Any]):
        """Add an entry and notify subscribers."""
        with self._lock:
            self.buffer.append(entry)
            subscribers = list(self.subscribers)
        for subscriber in subscribers:
            subscriber(entry)

    def subscribe(self, callback: Callable):
        """Subscribe to the stream."""
        with self._lock:
            self.subscribers.add(callback)

    def unsubscribe(self, callback: Callable):
        """Unsubscribe from the stream."""
        with self._lock:
            self.subscribers.discard(callback)

    def recent(self, count: int = 100, type: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get recent entries, optionally only those of one type."""
        with self._lock:
            entries = list(self.buffer)
        if type is not None:
            entries = [e for e in entries if e["type"] == type]
        return entries[-count:]

    def clear(self):
        with self._lock:
            self.buffer.clear()


class DiagnosticLogger:
    """Debug and alert channels of a grimoire."""

    def __init__(
        self,
        enabled: bool = False,
        prefix: str = "[debug]",
        format: Union[str, DiagnosticFormat] = DiagnosticFormat.CONSOLE,
        level: Union[int, str] = logging.DEBUG,
        name: str = "mage.debug",
        alert_name: str = "mage.alert",
        to_stdout: bool = True,
        buffer_size: int = 1000,
    ):
        """Initialize the diagnostic logger."""
        self.prefix = prefix
        self.format = DiagnosticFormat(format)
        self.level = _resolve_level(level)
        self.to_stdout = to_stdout
        self.stream = DiagnosticStream(buffer_size)
        # one child logger pair per instance; handlers are never shared
        suffix = next(_logger_ids)
        self.logger = self._setup_logger(f"{name}.{suffix}", self.level)
        self.alert_logger = self._setup_logger(f"{alert_name}.{suffix}", logging.INFO)
        self._enabled = False

        if enabled:
            self.enable()

    def _setup_logger(self, name: str, level: int) -> logging.Logger:
        """Set up a Python logger writing bare lines."""
        logger = logging.getLogger(name)
        logger.setLevel(level)

        if self.to_stdout:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter("%(message)s"))
            logger.addHandler(handler)

        return logger

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self):
        """Switch debug output on. There is no way to switch it off again."""
        if self._enabled:
            return
        self._enabled = True
        self.debug("debug_on", "Gnosis Mage debugging ON")

    def debug(self, event: str, message: str, **fields: Any):
        """Write a debug line if debugging is on."""
        if not self._enabled:
            return

        entry = {
            "type": "debug",
            "event": event,
            "timestamp": datetime.now().isoformat(),
            "message": message,
        }
        entry.update(fields)
        self.stream.add(entry)
        self.logger.log(self.level, self._format(entry))

    def alert(self, namespace: str, message: str, function: Optional[str] = None):
        """Write an alert line for an instrumented function call."""
        entry = {
            "type": "alert",
            "timestamp": datetime.now().isoformat(),
            "namespace": namespace,
            "function": function,
            "message": message,
        }
        self.stream.add(entry)
        self.alert_logger.info(self._format(entry))

    def _format(self, entry: Dict[str, Any]) -> str:
        if self.format == DiagnosticFormat.STRUCTURED:
            return self._format_structured(entry)
        return self._format_console(entry)

    def _format_console(self, entry: Dict[str, Any]) -> str:
        """Format an entry as a console line."""
        if entry["type"] == "alert":
            return f"[{entry['namespace']}] {entry['message']}"
        return f"{self.prefix} {entry['message']}"

    def _format_structured(self, entry: Dict[str, Any]) -> str:
        """Format as structured log."""
        parts = [self.prefix] if entry["type"] == "debug" else []
        for key, value in entry.items():
            if isinstance(value, (dict, list)):
                value = json.dumps(value, default=str)
            parts.append(f"{key}={value}")
        return " ".join(parts)

    def lines(self, type: str = "debug") -> List[str]:
        """Recent entries of one type, rendered as console lines."""
        return [self._format_console(e) for e in self.stream.recent(self.stream.buffer.maxlen, type)]
