#
# conftest.py: shared fixtures for security_tracker tests
#

from typing import List

import pytest

from security_tracker.detection import Detection
from security_tracker.events import EventCategory, SecurityEvent
from security_tracker.geometry import Rect


class RecordingSink:
    """Sink that keeps every event it is sent"""

    def __init__(self):
        self.events: List[SecurityEvent] = []

    def send(self, event: SecurityEvent) -> None:
        self.events.append(event)

    def of(self, category: EventCategory) -> List[SecurityEvent]:
        return [e for e in self.events if e.category == category]


@pytest.fixture
def sink():
    return RecordingSink()


def det(x, y, w=20, h=20, class_name="person", **kwargs) -> Detection:
    """Shorthand detection factory"""
    return Detection(bbox=Rect(x, y, w, h), class_name=class_name, **kwargs)
