from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from .logger import AppLogger, get_logger

SUCCESS = "success"
INFO = "info"
WARNING = "warning"
ERROR = "error"

LEVELS = (SUCCESS, INFO, WARNING, ERROR)

logger = get_logger(__name__).bind(component="common", layer="notifications")


@dataclass(frozen=True)
class Notification:
    level: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Notifier:
    """
    Collects the transient toast messages produced while handling one request.

    The widget shows whatever ends up in the response; nothing here affects
    cart or catalog state.
    """

    def __init__(self, log: Optional[AppLogger] = None):
        self._items: List[Notification] = []
        self.logger = log or logger

    def notify(self, level: str, message: str) -> Notification:
        if level not in LEVELS:
            raise ValueError(f"Unknown notification level: {level}")
        note = Notification(level=level, message=str(message))
        self._items.append(note)
        log_method = self.logger.warning if level in (WARNING, ERROR) else self.logger.debug
        log_method("Notification emitted", level=level, text=note.message)
        return note

    def success(self, message: str) -> Notification:
        return self.notify(SUCCESS, message)

    def info(self, message: str) -> Notification:
        return self.notify(INFO, message)

    def warning(self, message: str) -> Notification:
        return self.notify(WARNING, message)

    def error(self, message: str) -> Notification:
        return self.notify(ERROR, message)

    @property
    def items(self) -> List[Notification]:
        return list(self._items)

    def as_payload(self) -> List[Dict[str, Any]]:
        return [n.to_dict() for n in self._items]

    def __len__(self) -> int:
        return len(self._items)
