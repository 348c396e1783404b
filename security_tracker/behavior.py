from __future__ import annotations

from typing import List, Optional

from loguru import logger

from .config import BehaviorConfig, MotionConfig
from .detection import Detection
from .events import EventCategory, SecurityEvent, Severity
from .faces import FaceIdentityResolver
from .tracking import Condition, TrackedObject, TrackStore


class ViolationDetector:
    """Evaluates security conditions for every live track once per frame.

    Zone, night-activity and stationary alerts fire once per episode and
    the episode lasts for the life of the track. The speed alarm has no
    guard and repeats on every frame the track is over the limit.
    """

    def __init__(
        self,
        store: TrackStore,
        behavior_cfg: BehaviorConfig,
        motion_cfg: MotionConfig,
        face_resolver: Optional[FaceIdentityResolver] = None,
    ):
        self.store = store
        self.behavior_cfg = behavior_cfg
        self.motion_cfg = motion_cfg
        self.face_resolver = face_resolver

    def check(self, now: float) -> List[SecurityEvent]:
        events: List[SecurityEvent] = []
        for track in self.store:
            events.extend(self._check_track(track, now))
        return events

    def _check_track(self, track: TrackedObject, now: float) -> List[SecurityEvent]:
        events = []

        if track.is_in_restricted_zone:
            track.mark_active(Condition.ZONE_VIOLATION)
            if not track.violation_reported:
                events.append(self._event(
                    track,
                    EventCategory.ZONE_VIOLATION,
                    f"Object ID {track.track_id} ({track.class_name}) entered restricted zone",
                    Severity.ALERT,
                ))
                track.mark_reported(Condition.ZONE_VIOLATION)

        if track.speed > self.motion_cfg.max_allowed_velocity:
            events.append(self._event(
                track,
                EventCategory.SPEED_VIOLATION,
                f"High speed movement detected: {int(track.speed)} m/s",
                Severity.NOTICE,
            ))

        if self.behavior_cfg.night_vision and track.is_moving:
            track.mark_active(Condition.NIGHT_ACTIVITY)
            if not track.night_activity_reported:
                events.append(self._event(
                    track,
                    EventCategory.NIGHT_ACTIVITY,
                    f"Night activity detected: {track.class_name}",
                    Severity.NOTICE,
                ))
                track.mark_reported(Condition.NIGHT_ACTIVITY)

        if len(track.trajectory) > 1 and now - track.last_moved > self.behavior_cfg.stationary_timeout_s:
            track.mark_active(Condition.STATIONARY)
            if not track.stationary_reported:
                events.append(self._event(
                    track,
                    EventCategory.STATIONARY_OBJECT,
                    f"Suspicious stationary object: {track.class_name}",
                    Severity.NOTICE,
                ))
                track.mark_reported(Condition.STATIONARY)

        return events

    def process_face(self, track: TrackedObject, det: Detection) -> Optional[SecurityEvent]:
        """Run the face resolver for a matched detection that carries a face crop."""
        if not det.has_face():
            return None
        track.face_image = det.face_image
        if self.face_resolver is None:
            return None

        try:
            result = self.face_resolver.resolve(det.face_image)
        except Exception as e:
            logger.warning(f"Face resolver failed for track {track.track_id}: {e}")
            return None

        if result is None or result.confidence >= self.behavior_cfg.face_confidence_threshold:
            return None

        track.recognized_person = result.label
        logger.info(f"Track {track.track_id} recognized as {result.label} ({result.confidence:.1f})")
        return self._event(
            track,
            EventCategory.FACE_RECOGNIZED,
            f"Recognized person: {result.label}",
            Severity.NOTICE,
        )

    def _event(
        self, track: TrackedObject, category: EventCategory, message: str, severity: Severity
    ) -> SecurityEvent:
        if severity >= Severity.NOTICE:
            logger.warning(f"{category.value.upper()}: {message}")
        return SecurityEvent(category=category, message=message, severity=severity, track_id=track.track_id)
