from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .events import Severity


class ConfigError(ValueError):
    """Raised when a configuration value is out of range."""


def _require_positive(name: str, value: float) -> None:
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")


def _require_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ConfigError(f"{name} must be non-negative, got {value}")


@dataclass
class TrackingConfig:
    # Minimum IoU for a detection to continue an existing track
    iou_threshold: float = 0.3
    # Tracks unmatched for longer than this many frames are dropped
    max_track_age_frames: int = 30
    frame_interval_s: float = 0.033  # ~30 FPS
    pixel_to_meter_ratio: float = 0.01  # meters per pixel
    # "greedy" (first-best IoU per track) or "optimal" (Hungarian)
    matcher: str = "greedy"

    @property
    def max_track_age_s(self) -> float:
        return self.max_track_age_frames * self.frame_interval_s

    def validate(self) -> None:
        if not 0.0 <= self.iou_threshold < 1.0:
            raise ConfigError(f"iou_threshold must be in [0, 1), got {self.iou_threshold}")
        _require_positive("max_track_age_frames", self.max_track_age_frames)
        _require_positive("frame_interval_s", self.frame_interval_s)
        _require_positive("pixel_to_meter_ratio", self.pixel_to_meter_ratio)
        if self.matcher not in ("greedy", "optimal"):
            raise ConfigError(f"Unknown matcher: {self.matcher!r}")


@dataclass
class MotionConfig:
    max_allowed_velocity: float = 5.0  # m/s, above this every frame raises an alarm
    min_movement_px: float = 5.0  # displacement per frame to count as moving

    def validate(self) -> None:
        _require_non_negative("max_allowed_velocity", self.max_allowed_velocity)
        _require_non_negative("min_movement_px", self.min_movement_px)


@dataclass
class BehaviorConfig:
    stationary_timeout_s: float = 300.0  # 5 minutes without movement
    # Resolver scores below this are accepted (lower is better)
    face_confidence_threshold: float = 100.0
    night_vision: bool = False

    def validate(self) -> None:
        _require_positive("stationary_timeout_s", self.stationary_timeout_s)
        _require_positive("face_confidence_threshold", self.face_confidence_threshold)


@dataclass
class EventConfig:
    camera_id: str = "CAM_01"
    log_dir: Path = Path("logs")
    enable_file_logging: bool = False
    min_severity: Severity = Severity.INFO
    recent_capacity: int = 100  # events kept for recent()

    def validate(self) -> None:
        _require_positive("recent_capacity", self.recent_capacity)


@dataclass
class EngineConfig:
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    motion: MotionConfig = field(default_factory=MotionConfig)
    behavior: BehaviorConfig = field(default_factory=BehaviorConfig)
    events: EventConfig = field(default_factory=EventConfig)

    def validate(self) -> None:
        self.tracking.validate()
        self.motion.validate()
        self.behavior.validate()
        self.events.validate()
