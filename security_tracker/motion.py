from __future__ import annotations

import math

from .config import MotionConfig, TrackingConfig
from .geometry import distance
from .tracking import TrackedObject


class MotionEstimator:
    """Speed, heading and moving/stationary state from the last two trajectory points."""

    def __init__(self, motion_cfg: MotionConfig, tracking_cfg: TrackingConfig):
        self.motion_cfg = motion_cfg
        self.tracking_cfg = tracking_cfg

    def update(self, track: TrackedObject, now: float) -> bool:
        """Recompute kinematics in place. Returns False when history is too short."""
        if len(track.trajectory) < 2:
            return False

        prev = track.trajectory[-2]
        current = track.trajectory[-1]
        pixel_displacement = distance(prev, current)

        track.speed = (
            pixel_displacement * self.tracking_cfg.pixel_to_meter_ratio / self.tracking_cfg.frame_interval_s
        )
        track.direction = math.atan2(current[1] - prev[1], current[0] - prev[0])

        if pixel_displacement > self.motion_cfg.min_movement_px:
            track.is_moving = True
            track.last_moved = now
        else:
            track.is_moving = False
        return True
