"""One-line user-visible notices raised by the services."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    level: str
    message: str


class Notifier:
    """Collects notices until the presentation layer drains them."""

    def __init__(self, maxlen: int = 100) -> None:
        self._notices: Deque[Notice] = deque(maxlen=maxlen)

    def push(self, level: str, message: str) -> Notice:
        notice = Notice(level=level, message=message)
        self._notices.append(notice)
        logger.debug("notice %s: %s", level, message)
        return notice

    def success(self, message: str) -> Notice:
        return self.push("success", message)

    def error(self, message: str) -> Notice:
        return self.push("error", message)

    def info(self, message: str) -> Notice:
        return self.push("info", message)

    def peek(self) -> List[Notice]:
        return list(self._notices)

    def drain(self) -> List[Notice]:
        notices = list(self._notices)
        self._notices.clear()
        return notices
