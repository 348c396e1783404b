"""Security events and the sinks that receive them.

The engine only decides when an event happens. Delivery (push, webhook,
e-mail) belongs to handlers registered on a NotificationCenter, and a
failing handler never reaches back into the tracking loop.
"""
from __future__ import annotations

import json
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Deque, Dict, Iterable, List, Optional, Protocol

from loguru import logger

if TYPE_CHECKING:
    from .config import EventConfig


class EventCategory(str, Enum):
    NEW_OBJECT = "new-object"
    ZONE_VIOLATION = "zone-violation"
    SPEED_VIOLATION = "speed-violation"
    NIGHT_ACTIVITY = "night-activity"
    STATIONARY_OBJECT = "stationary-object"
    FACE_RECOGNIZED = "face-recognized"
    SYSTEM_STATUS = "system-status"


class Severity(IntEnum):
    INFO = 1  # low
    NOTICE = 2  # medium
    ALERT = 3  # high
    CRITICAL = 4
    EMERGENCY = 5


def current_timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


@dataclass
class SecurityEvent:
    category: EventCategory
    message: str
    severity: Severity
    timestamp: str = field(default_factory=current_timestamp)
    image_ref: str = ""
    track_id: Optional[int] = None
    camera_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.category.value,
            "message": self.message,
            "severity": int(self.severity),
            "timestamp": self.timestamp,
            "image_ref": self.image_ref,
            "track_id": self.track_id,
            "camera_id": self.camera_id,
        }


class EventSink(Protocol):
    def send(self, event: SecurityEvent) -> None:
        ...


EventHandler = Callable[[SecurityEvent], None]


class NotificationCenter:
    """Default event sink with filtering, recent history and handler fan-out."""

    def __init__(self, min_severity: Severity = Severity.INFO, recent_capacity: int = 100):
        self.min_severity = min_severity
        self._enabled: Dict[EventCategory, bool] = {category: True for category in EventCategory}
        self._recent: Deque[SecurityEvent] = deque(maxlen=recent_capacity)
        self._handlers: List[EventHandler] = []
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, cfg: "EventConfig") -> "NotificationCenter":
        center = cls(min_severity=cfg.min_severity, recent_capacity=cfg.recent_capacity)
        if cfg.enable_file_logging:
            center.add_handler(JsonlEventLog(cfg.log_dir, cfg.camera_id))
        return center

    def add_handler(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def set_min_severity(self, severity: Severity) -> None:
        self.min_severity = Severity(severity)

    def enable_category(self, category: EventCategory, enable: bool = True) -> None:
        self._enabled[category] = enable

    def is_enabled(self, category: EventCategory) -> bool:
        return self._enabled[category]

    def send(self, event: SecurityEvent) -> None:
        if event.severity < self.min_severity or not self._enabled[event.category]:
            return
        with self._lock:
            self._recent.append(event)
        for handler in self._handlers:
            try:
                handler(event)
            except Exception as e:
                logger.warning(f"Event handler {handler!r} failed: {e}")

    def recent(self, count: int = 10) -> List[SecurityEvent]:
        """Most recent accepted events, oldest first."""
        with self._lock:
            items = list(self._recent)
        return items[-count:] if count > 0 else []

    def clear(self) -> None:
        with self._lock:
            self._recent.clear()


class JsonlEventLog:
    """Handler appending events to logs/<camera_id>_events.jsonl."""

    def __init__(self, log_dir: Path, camera_id: str = "CAM_01"):
        self.path = Path(log_dir) / f"{camera_id}_events.jsonl"
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        logger.info(f"Event log at {self.path}")

    def __call__(self, event: SecurityEvent) -> None:
        line = json.dumps(event.to_dict(), ensure_ascii=False)
        with self._lock, self.path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")


def count_by_category(events: Iterable[SecurityEvent]) -> Dict[EventCategory, int]:
    counts: Dict[EventCategory, int] = {}
    for event in events:
        counts[event.category] = counts.get(event.category, 0) + 1
    return counts
