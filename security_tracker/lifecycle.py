from __future__ import annotations

from typing import List, Sequence

from loguru import logger

from .config import TrackingConfig
from .detection import Detection
from .events import EventCategory, SecurityEvent, Severity
from .tracking import TrackedObject, TrackStore


class LifecycleManager:
    """Creates, refreshes and expires tracks. The only writer of store membership."""

    def __init__(self, store: TrackStore, cfg: TrackingConfig):
        self.store = store
        self.cfg = cfg

    def apply_match(self, track: TrackedObject, det: Detection, now: float) -> None:
        """Continue a track with this frame's detection."""
        track.bbox = det.bbox
        track.class_name = det.class_name
        track.last_seen = now
        track.trajectory.append(det.center)
        track.speed = det.velocity
        track.is_in_restricted_zone = self.store.in_restricted_zone(det.center)

    def create_tracks(self, detections: Sequence[Detection], now: float) -> List[SecurityEvent]:
        events = []
        for det in detections:
            track = TrackedObject(
                track_id=self.store.allocate_id(),
                bbox=det.bbox,
                class_name=det.class_name,
                last_seen=now,
                last_moved=now,
                trajectory=[det.center],
            )
            self.store.add(track)
            logger.info(f"New track {track.track_id} ({track.class_name}) at {det.center}")
            events.append(
                SecurityEvent(
                    category=EventCategory.NEW_OBJECT,
                    message=f"New object detected: {track.class_name}",
                    severity=Severity.INFO,
                    track_id=track.track_id,
                )
            )
        return events

    def remove_stale(self, now: float) -> List[TrackedObject]:
        """Silently drop tracks unseen for longer than the configured age."""
        max_age = self.cfg.max_track_age_s
        removed = self.store.remove_where(lambda t: now - t.last_seen > max_age)
        for track in removed:
            logger.debug(f"Track {track.track_id} expired after {now - track.last_seen:.2f}s")
        return removed
