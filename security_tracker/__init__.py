"""
Multi-object tracking and security-violation engine.

Modules:
- config: tunable parameters.
- geometry: rectangles and IoU.
- detection: per-frame detection records.
- tracking: tracked objects, restricted zones and the track store.
- association: detection-to-track matching.
- lifecycle: track creation and expiry.
- motion: speed, heading and moving state.
- behavior: zone, speed, night-activity, stationary and face alerts.
- faces: face identity resolver seam.
- prediction: trajectory extrapolation.
- events: security events and sinks.
- engine: per-frame orchestration.
- runner: replay command line tool.
"""

from .config import ConfigError, EngineConfig
from .detection import Detection
from .engine import TrackingEngine
from .events import EventCategory, NotificationCenter, SecurityEvent, Severity
from .faces import FaceMatch, LabelMapResolver
from .geometry import Rect, iou
from .tracking import RestrictedZone, TrackedObject

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "Detection",
    "EngineConfig",
    "EventCategory",
    "FaceMatch",
    "LabelMapResolver",
    "NotificationCenter",
    "Rect",
    "RestrictedZone",
    "SecurityEvent",
    "Severity",
    "TrackedObject",
    "TrackingEngine",
    "iou",
]
