"""Track store: live tracked objects and the restricted zones they are checked against."""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Tuple

import numpy as np
from loguru import logger

from .geometry import Point, Rect


class Condition(Enum):
    """Conditions reported once per episode."""
    ZONE_VIOLATION = "zone_violation"
    NIGHT_ACTIVITY = "night_activity"
    STATIONARY = "stationary"


class ReportState(Enum):
    QUIESCENT = "quiescent"
    ACTIVE_UNREPORTED = "active_unreported"
    ACTIVE_REPORTED = "active_reported"


def _quiescent_reports() -> Dict[Condition, ReportState]:
    return {condition: ReportState.QUIESCENT for condition in Condition}


@dataclass
class TrackedObject:
    track_id: int
    bbox: Rect
    class_name: str
    last_seen: float  # monotonic seconds
    last_moved: float
    trajectory: List[Tuple[int, int]] = field(default_factory=list)
    speed: float = 0.0  # m/s
    direction: float = 0.0  # radians
    is_in_restricted_zone: bool = False
    is_moving: bool = False
    recognized_person: Optional[str] = None
    face_image: Optional[np.ndarray] = None
    reports: Dict[Condition, ReportState] = field(default_factory=_quiescent_reports)

    @property
    def center(self) -> Tuple[int, int]:
        return self.trajectory[-1] if self.trajectory else self.bbox.center

    def report_state(self, condition: Condition) -> ReportState:
        return self.reports[condition]

    def is_reported(self, condition: Condition) -> bool:
        return self.reports[condition] is ReportState.ACTIVE_REPORTED

    def mark_active(self, condition: Condition) -> None:
        if self.reports[condition] is ReportState.QUIESCENT:
            self.reports[condition] = ReportState.ACTIVE_UNREPORTED

    def mark_reported(self, condition: Condition) -> None:
        self.reports[condition] = ReportState.ACTIVE_REPORTED

    @property
    def violation_reported(self) -> bool:
        return self.is_reported(Condition.ZONE_VIOLATION)

    @property
    def night_activity_reported(self) -> bool:
        return self.is_reported(Condition.NIGHT_ACTIVITY)

    @property
    def stationary_reported(self) -> bool:
        return self.is_reported(Condition.STATIONARY)


@dataclass(frozen=True)
class RestrictedZone:
    rect: Rect
    name: str = ""

    def contains(self, point: Point) -> bool:
        return self.rect.contains(point)


class TrackStore:
    """Owns every live TrackedObject plus the configured restricted zones.

    Track ids come from a counter that only ever moves forward, so an id is
    never handed out twice for the lifetime of the store.
    """

    def __init__(self):
        self._tracks: List[TrackedObject] = []
        self._zones: List[RestrictedZone] = []
        self._next_id = 0

    def __len__(self) -> int:
        return len(self._tracks)

    def __iter__(self) -> Iterator[TrackedObject]:
        return iter(self._tracks)

    @property
    def tracks(self) -> List[TrackedObject]:
        return self._tracks

    @property
    def zones(self) -> Tuple[RestrictedZone, ...]:
        return tuple(self._zones)

    def allocate_id(self) -> int:
        track_id = self._next_id
        self._next_id += 1
        return track_id

    def add(self, track: TrackedObject) -> None:
        self._tracks.append(track)

    def get(self, track_id: int) -> Optional[TrackedObject]:
        for track in self._tracks:
            if track.track_id == track_id:
                return track
        return None

    def remove_where(self, predicate: Callable[[TrackedObject], bool]) -> List[TrackedObject]:
        """Drop every track matching predicate, keeping the order of the rest."""
        removed = [t for t in self._tracks if predicate(t)]
        if removed:
            self._tracks = [t for t in self._tracks if not predicate(t)]
        return removed

    def snapshot(self) -> List[TrackedObject]:
        """Deep copies of the live tracks, safe to hand to callers."""
        return copy.deepcopy(self._tracks)

    def snapshot_of(self, track: TrackedObject) -> TrackedObject:
        return copy.deepcopy(track)

    def clear_tracks(self) -> None:
        self._tracks.clear()

    # Zones

    def add_zone(self, zone: RestrictedZone) -> None:
        self._zones.append(zone)
        logger.info(f"Restricted zone added: {zone.rect} ({len(self._zones)} total)")

    def clear_zones(self) -> None:
        self._zones.clear()
        logger.info("Restricted zones cleared")

    def in_restricted_zone(self, point: Point) -> bool:
        return any(zone.contains(point) for zone in self._zones)
