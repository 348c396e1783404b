#
# test_config.py: unit tests for configuration validation
#

import pytest

from security_tracker.config import (
    BehaviorConfig,
    ConfigError,
    EngineConfig,
    EventConfig,
    MotionConfig,
    TrackingConfig,
)


def test_defaults_are_valid():
    cfg = EngineConfig()
    cfg.validate()
    assert cfg.tracking.iou_threshold == 0.3
    assert cfg.tracking.max_track_age_frames == 30
    assert cfg.tracking.max_track_age_s == pytest.approx(30 * 0.033)
    assert cfg.motion.max_allowed_velocity == 5.0
    assert cfg.motion.min_movement_px == 5.0
    assert cfg.behavior.stationary_timeout_s == 300.0
    assert cfg.behavior.face_confidence_threshold == 100.0


@pytest.mark.parametrize(
    "section",
    [
        TrackingConfig(iou_threshold=-0.1),
        TrackingConfig(iou_threshold=1.0),
        TrackingConfig(max_track_age_frames=0),
        TrackingConfig(frame_interval_s=0.0),
        TrackingConfig(pixel_to_meter_ratio=-1.0),
        TrackingConfig(matcher="hungarian"),
        MotionConfig(max_allowed_velocity=-0.5),
        MotionConfig(min_movement_px=-2.0),
        BehaviorConfig(stationary_timeout_s=0.0),
        BehaviorConfig(face_confidence_threshold=-1.0),
        EventConfig(recent_capacity=0),
    ],
)
def test_invalid_values(section):
    with pytest.raises(ConfigError):
        section.validate()


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)


def test_zero_thresholds_allowed():
    MotionConfig(max_allowed_velocity=0.0, min_movement_px=0.0).validate()
    TrackingConfig(iou_threshold=0.0).validate()
