"""Per-frame observations handed to the engine by the perception source."""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .geometry import Rect


@dataclass
class Detection:
    bbox: Rect
    class_name: str
    velocity: float = 0.0  # instantaneous estimate from the detector, m/s
    confidence: float = 0.0
    face_image: Optional[np.ndarray] = None  # cropped face, if one was found
    is_moving: bool = False

    @property
    def center(self) -> Tuple[int, int]:
        return self.bbox.center

    def has_face(self) -> bool:
        return self.face_image is not None and self.face_image.size > 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Detection":
        """Build a detection from a JSON record, e.g. one line of a replay log."""
        x, y, w, h = (int(v) for v in data["bbox"])
        return cls(
            bbox=Rect(x, y, w, h),
            class_name=str(data.get("class_name", "object")),
            velocity=float(data.get("velocity", 0.0)),
            confidence=float(data.get("confidence", 0.0)),
            is_moving=bool(data.get("is_moving", False)),
        )
