"""Rectangle helpers shared by matching and zone checks.

Boxes are integer pixel rectangles in (x, y, width, height) form, the way
the perception source reports them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from shapely.geometry import box as shapely_box

Point = Tuple[float, float]


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_xyxy(cls, x1: float, y1: float, x2: float, y2: float) -> "Rect":
        return cls(int(x1), int(y1), int(x2 - x1), int(y2 - y1))

    @property
    def area(self) -> int:
        if self.width <= 0 or self.height <= 0:
            return 0
        return self.width * self.height

    @property
    def center(self) -> Tuple[int, int]:
        """Integer center, rounded toward the top-left corner."""
        return self.x + self.width // 2, self.y + self.height // 2

    def xyxy(self) -> np.ndarray:
        return np.array([self.x, self.y, self.x + self.width, self.y + self.height], dtype=float)

    def contains(self, point: Point) -> bool:
        """Half-open containment: left/top edges inside, right/bottom outside."""
        px, py = point
        return self.x <= px < self.x + self.width and self.y <= py < self.y + self.height


def iou(a: Rect, b: Rect) -> float:
    """Calculate Intersection over Union between two rectangles.

    Degenerate (zero or negative area) rectangles never overlap anything.
    """
    if a.area == 0 or b.area == 0:
        return 0.0
    poly_a = shapely_box(*a.xyxy())
    poly_b = shapely_box(*b.xyxy())
    inter = poly_a.intersection(poly_b).area
    if inter <= 0:
        return 0.0
    union = a.area + b.area - inter
    return float(inter / union)


def distance(p1: Point, p2: Point) -> float:
    """Euclidean distance between two points."""
    return float(np.hypot(p2[0] - p1[0], p2[1] - p1[1]))
