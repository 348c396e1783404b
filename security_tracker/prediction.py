from __future__ import annotations

from typing import List, Tuple

import numpy as np

from .tracking import TrackedObject


def predict_trajectory(
    track: TrackedObject, frames: int = 30, frame_interval_s: float = 0.033
) -> List[Tuple[float, float]]:
    """Extrapolate future centers along the track's current speed and heading.

    Each step advances speed * frame_interval_s along `direction`. Tracks
    with fewer than two trajectory points have no heading and yield [].
    The track is not modified.
    """
    if frames < 0:
        raise ValueError(f"frames must be non-negative, got {frames}")
    if len(track.trajectory) < 2 or frames == 0:
        return []

    step = track.speed * frame_interval_s
    steps = np.arange(1, frames + 1, dtype=float) * step
    x0, y0 = track.trajectory[-1]
    xs = x0 + steps * np.cos(track.direction)
    ys = y0 + steps * np.sin(track.direction)
    return [(float(x), float(y)) for x, y in zip(xs, ys)]
