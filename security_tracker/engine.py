"""Per-frame tracking and security-violation engine.

This is the single entry point callers use: feed it each frame's detections
and it keeps track identities, kinematics and zone compliance up to date,
handing security events to the configured sink.
"""
from __future__ import annotations

import time
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from .association import build_matcher
from .behavior import ViolationDetector
from .config import EngineConfig, MotionConfig
from .detection import Detection
from .events import EventCategory, EventSink, NotificationCenter, SecurityEvent, Severity
from .faces import FaceIdentityResolver
from .geometry import Rect
from .lifecycle import LifecycleManager
from .motion import MotionEstimator
from .prediction import predict_trajectory
from .tracking import RestrictedZone, TrackedObject, TrackStore


class TrackingEngine:
    """Multi-object tracker with restricted-zone and behavior alerts.

    Per frame:
    1. Expire tracks unseen for longer than the staleness window
    2. Match detections to the survivors (greedy IoU by default)
    3. Refresh matched tracks and create tracks for leftover detections
    4. Recompute speed/heading for tracks seen this frame
    5. Evaluate zone, speed, night-activity and stationary conditions

    Not thread-safe: zone and threshold changes must not overlap update().
    """

    def __init__(
        self,
        cfg: Optional[EngineConfig] = None,
        sink: Optional[EventSink] = None,
        face_resolver: Optional[FaceIdentityResolver] = None,
    ):
        self.cfg = cfg or EngineConfig()
        self.cfg.validate()

        self.sink: EventSink = sink if sink is not None else NotificationCenter.from_config(self.cfg.events)
        self.store = TrackStore()
        self.matcher = build_matcher(self.cfg.tracking.matcher, self.cfg.tracking.iou_threshold)
        self.lifecycle = LifecycleManager(self.store, self.cfg.tracking)
        self.motion = MotionEstimator(self.cfg.motion, self.cfg.tracking)
        self.violations = ViolationDetector(self.store, self.cfg.behavior, self.cfg.motion, face_resolver)
        self.frame_count = 0

        logger.info(
            f"Tracking engine ready ({self.cfg.tracking.matcher} matcher, "
            f"IoU>{self.cfg.tracking.iou_threshold}, max age {self.cfg.tracking.max_track_age_s:.2f}s)"
        )

    def update(
        self,
        detections: Sequence[Detection],
        frame: Optional[np.ndarray] = None,
        now: Optional[float] = None,
    ) -> List[SecurityEvent]:
        """Process one frame of detections and return the events it produced.

        `frame` is accepted for pipeline symmetry; face crops are expected to
        arrive already cut out on each Detection. `now` is a monotonic
        timestamp in seconds and defaults to time.monotonic().
        """
        if now is None:
            now = time.monotonic()
        self.frame_count += 1
        events: List[SecurityEvent] = []

        self.lifecycle.remove_stale(now)
        tracks = list(self.store.tracks)
        result = self.matcher.match(tracks, detections)

        matched: List[TrackedObject] = []
        for track_idx, det_idx in result.matches:
            track = tracks[track_idx]
            det = detections[det_idx]
            self.lifecycle.apply_match(track, det, now)
            face_event = self.violations.process_face(track, det)
            if face_event is not None:
                events.append(face_event)
            matched.append(track)

        events.extend(self.lifecycle.create_tracks([detections[j] for j in result.unmatched_detections], now))

        for track in matched:
            self.motion.update(track, now)

        events.extend(self.violations.check(now))

        self._dispatch(events)
        return events

    # Configuration

    def add_restricted_zone(self, zone: Rect, name: str = "") -> None:
        if zone.area == 0:
            raise ValueError(f"Restricted zone must have positive area: {zone}")
        self.store.add_zone(RestrictedZone(zone, name))
        self._notify_status("New restricted zone added")

    def clear_restricted_zones(self) -> None:
        self.store.clear_zones()
        self._notify_status("All restricted zones cleared")

    @property
    def restricted_zones(self) -> Tuple[RestrictedZone, ...]:
        return self.store.zones

    def set_motion_thresholds(self, max_velocity: float, min_movement: float) -> None:
        MotionConfig(max_allowed_velocity=max_velocity, min_movement_px=min_movement).validate()
        self.cfg.motion.max_allowed_velocity = max_velocity
        self.cfg.motion.min_movement_px = min_movement
        logger.info(f"Motion thresholds: max velocity {max_velocity} m/s, min movement {min_movement}px")

    def set_max_track_age(self, frames: int) -> None:
        replace(self.cfg.tracking, max_track_age_frames=frames).validate()
        self.cfg.tracking.max_track_age_frames = frames
        logger.info(f"Max track age: {frames} frames ({self.cfg.tracking.max_track_age_s:.2f}s)")

    def enable_night_vision(self, enable: bool) -> None:
        if self.cfg.behavior.night_vision == enable:
            return
        self.cfg.behavior.night_vision = enable
        self._notify_status("Night vision enabled" if enable else "Night vision disabled")

    @property
    def night_vision_enabled(self) -> bool:
        return self.cfg.behavior.night_vision

    # Queries

    def get_tracks(self) -> List[TrackedObject]:
        """Read-only snapshot of the live tracks."""
        return self.store.snapshot()

    def get_track(self, track_id: int) -> Optional[TrackedObject]:
        track = self.store.get(track_id)
        return self.store.snapshot_of(track) if track is not None else None

    def predict_trajectory(self, track_id: int, frames: int = 30) -> List[Tuple[float, float]]:
        track = self.store.get(track_id)
        if track is None:
            raise KeyError(f"Unknown track id: {track_id}")
        return predict_trajectory(track, frames, self.cfg.tracking.frame_interval_s)

    def reset(self) -> None:
        """Forget every live track. Ids keep counting up."""
        self.store.clear_tracks()
        logger.info("Tracking engine reset")

    def _notify_status(self, message: str) -> None:
        self._dispatch([SecurityEvent(EventCategory.SYSTEM_STATUS, message, Severity.INFO)])

    def _dispatch(self, events: List[SecurityEvent]) -> None:
        for event in events:
            event.camera_id = self.cfg.events.camera_id
            try:
                self.sink.send(event)
            except Exception as e:
                logger.warning(f"Event sink rejected {event.category.value} event: {e}")
