#
# test_events.py: unit tests for security events and the notification center
#

import json

from security_tracker.config import EventConfig
from security_tracker.events import (
    EventCategory,
    JsonlEventLog,
    NotificationCenter,
    SecurityEvent,
    Severity,
    count_by_category,
)


def make_event(category=EventCategory.NEW_OBJECT, severity=Severity.INFO, message="msg"):
    return SecurityEvent(category=category, message=message, severity=severity, track_id=3)


def test_event_to_dict():
    event = make_event(EventCategory.ZONE_VIOLATION, Severity.ALERT, "entered")
    d = event.to_dict()
    assert d["type"] == "zone-violation"
    assert d["severity"] == 3
    assert d["message"] == "entered"
    assert d["track_id"] == 3
    assert d["image_ref"] == ""
    assert len(d["timestamp"]) == len("2024-01-01 00:00:00")


def test_min_severity_filter():
    center = NotificationCenter(min_severity=Severity.NOTICE)
    center.send(make_event(severity=Severity.INFO))
    center.send(make_event(severity=Severity.ALERT))
    assert [e.severity for e in center.recent()] == [Severity.ALERT]

    center.set_min_severity(Severity.INFO)
    center.send(make_event(severity=Severity.INFO))
    assert len(center.recent()) == 2


def test_category_toggle():
    center = NotificationCenter()
    center.enable_category(EventCategory.SPEED_VIOLATION, False)
    assert not center.is_enabled(EventCategory.SPEED_VIOLATION)

    center.send(make_event(EventCategory.SPEED_VIOLATION))
    center.send(make_event(EventCategory.NEW_OBJECT))
    assert [e.category for e in center.recent()] == [EventCategory.NEW_OBJECT]


def test_recent_is_bounded():
    center = NotificationCenter(recent_capacity=5)
    for i in range(12):
        center.send(make_event(message=str(i)))
    assert [e.message for e in center.recent(10)] == ["7", "8", "9", "10", "11"]
    assert [e.message for e in center.recent(2)] == ["10", "11"]
    assert center.recent(0) == []

    center.clear()
    assert center.recent() == []


def test_handler_failure_isolated():
    received = []

    def broken(event):
        raise RuntimeError("smtp down")

    center = NotificationCenter()
    center.add_handler(broken)
    center.add_handler(received.append)
    center.send(make_event())
    assert len(received) == 1


def test_filtered_events_not_delivered():
    received = []
    center = NotificationCenter(min_severity=Severity.ALERT)
    center.add_handler(received.append)
    center.send(make_event(severity=Severity.NOTICE))
    assert received == []


def test_jsonl_log(tmp_path):
    log = JsonlEventLog(tmp_path / "events", camera_id="GATE")
    log(make_event(message="first"))
    log(make_event(EventCategory.NIGHT_ACTIVITY, Severity.NOTICE, "second"))

    lines = (tmp_path / "events" / "GATE_events.jsonl").read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert [r["message"] for r in records] == ["first", "second"]
    assert records[1]["type"] == "night-activity"


def test_from_config_file_logging(tmp_path):
    cfg = EventConfig(camera_id="LOBBY", log_dir=tmp_path, enable_file_logging=True)
    center = NotificationCenter.from_config(cfg)
    center.send(make_event())
    assert (tmp_path / "LOBBY_events.jsonl").exists()


def test_count_by_category():
    events = [make_event(), make_event(), make_event(EventCategory.FACE_RECOGNIZED)]
    assert count_by_category(events) == {
        EventCategory.NEW_OBJECT: 2,
        EventCategory.FACE_RECOGNIZED: 1,
    }
