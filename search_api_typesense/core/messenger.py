"""
User-facing notices collected while handling lifecycle events
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import List


class MessageLevel(str, Enum):
    STATUS = "status"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Message:
    level: MessageLevel
    text: str


class Messenger:
    """
    In-memory message bus. The host displays whatever has been collected
    and clears it afterwards.
    """

    def __init__(self):
        self._messages: List[Message] = []
        self._lock = threading.Lock()

    def _add(self, level: MessageLevel, text: str) -> None:
        with self._lock:
            self._messages.append(Message(level=level, text=text))

    def add_status(self, text: str) -> None:
        self._add(MessageLevel.STATUS, text)

    def add_warning(self, text: str) -> None:
        self._add(MessageLevel.WARNING, text)

    def add_error(self, text: str) -> None:
        self._add(MessageLevel.ERROR, text)

    def messages(self, level: MessageLevel | None = None) -> List[Message]:
        """Get collected messages, optionally only those of one level"""
        with self._lock:
            if level is None:
                return list(self._messages)
            return [m for m in self._messages if m.level == level]

    def clear(self) -> None:
        with self._lock:
            self._messages.clear()
