"""In-memory status log shown in the server window's log panel.

Collects short human-readable lines ("Loading settings", "Whitelist
restored, 1 IPs restored", ...) and re-emits each one as a Qt signal so the
UI can append it without polling.
"""
from __future__ import annotations

import logging
import time
from collections import deque
from typing import Deque, List, Optional

from PySide6.QtCore import QObject, Signal


class StatusLog(QObject):
    """Bounded list of timestamped status lines."""

    message_added = Signal(str)

    def __init__(self, max_lines: int = 500, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._lines: Deque[str] = deque(maxlen=max_lines)

    def add(self, message: str) -> None:
        line = f"{time.strftime('%H:%M:%S')} {message}"
        self._lines.append(line)
        self.message_added.emit(line)

    def lines(self) -> List[str]:
        return list(self._lines)

    def clear(self) -> None:
        self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)


class StatusLogHandler(logging.Handler):
    """Logging handler forwarding records to a StatusLog.

    Only the message text is forwarded; logger names and levels are noise in
    the UI panel. Warnings and errors keep a short level prefix.
    """

    def __init__(self, status_log: StatusLog, level: int = logging.INFO):
        super().__init__(level)
        self._status_log = status_log

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            if record.levelno >= logging.WARNING:
                message = f"{record.levelname.capitalize()}: {message}"
            self._status_log.add(message)
        except Exception:
            self.handleError(record)
