"""
Transient user notices (the storefront's toasts).

Every failure the client surfaces to a person goes through a NoticeBoard.
Notices are also logged so headless runs (scripts, kiosks) keep a trail.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notice:
    """A single transient notice."""
    title: str
    level: NoticeLevel = NoticeLevel.INFO
    description: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)


class NoticeBoard:
    """Keeps the most recent notices, oldest dropped first."""

    def __init__(self, max_notices: int = 20):
        self._notices: deque[Notice] = deque(maxlen=max_notices)

    def post(
        self,
        title: str,
        level: NoticeLevel = NoticeLevel.INFO,
        description: Optional[str] = None,
    ) -> Notice:
        notice = Notice(title=title, level=level, description=description)
        self._notices.append(notice)

        log = logger.warning if level == NoticeLevel.ERROR else logger.info
        log(f"{title}: {description}" if description else title)
        return notice

    def success(self, title: str, description: Optional[str] = None) -> Notice:
        return self.post(title, NoticeLevel.SUCCESS, description)

    def error(self, title: str, description: Optional[str] = None) -> Notice:
        return self.post(title, NoticeLevel.ERROR, description)

    @property
    def notices(self) -> list[Notice]:
        return list(self._notices)

    @property
    def latest(self) -> Optional[Notice]:
        return self._notices[-1] if self._notices else None

    def clear(self) -> None:
        self._notices.clear()
