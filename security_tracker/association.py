"""Detection-to-track association.

Key features:
1. Greedy IoU matching in track-store order (default)
2. Optional optimal assignment (Hungarian) behind the same interface
3. Unmatched detections are returned for track creation, unmatched tracks
   are left for staleness expiry
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol, Sequence, Tuple

import numpy as np
from loguru import logger
from scipy.optimize import linear_sum_assignment

from .detection import Detection
from .geometry import iou
from .tracking import TrackedObject


@dataclass
class AssociationResult:
    matches: List[Tuple[int, int]] = field(default_factory=list)  # (track index, detection index)
    unmatched_tracks: List[int] = field(default_factory=list)
    unmatched_detections: List[int] = field(default_factory=list)


class Matcher(Protocol):
    def match(
        self, tracks: Sequence[TrackedObject], detections: Sequence[Detection]
    ) -> AssociationResult:
        ...


def iou_matrix(tracks: Sequence[TrackedObject], detections: Sequence[Detection]) -> np.ndarray:
    """IoU of every track box against every detection box, shape (tracks, detections)."""
    matrix = np.zeros((len(tracks), len(detections)), dtype=float)
    for i, track in enumerate(tracks):
        for j, det in enumerate(detections):
            matrix[i, j] = iou(track.bbox, det.bbox)
    return matrix


class GreedyIoUMatcher:
    """Each track, in store order, takes the best still-free detection.

    Not a maximum-weight matching: with many overlapping objects an early
    track can claim a detection that a later track overlaps better.
    Among equal IoUs the first detection wins.
    """

    def __init__(self, iou_threshold: float = 0.3):
        self.iou_threshold = iou_threshold

    def match(
        self, tracks: Sequence[TrackedObject], detections: Sequence[Detection]
    ) -> AssociationResult:
        result = AssociationResult()
        detection_matched = [False] * len(detections)

        for i, track in enumerate(tracks):
            best_iou = self.iou_threshold
            best_match = -1
            for j, det in enumerate(detections):
                if detection_matched[j]:
                    continue
                score = iou(track.bbox, det.bbox)
                if score > best_iou:
                    best_iou = score
                    best_match = j

            if best_match == -1:
                result.unmatched_tracks.append(i)
                continue
            detection_matched[best_match] = True
            result.matches.append((i, best_match))
            logger.debug(f"Track {track.track_id} matched detection {best_match} (IoU {best_iou:.2f})")

        result.unmatched_detections = [j for j, m in enumerate(detection_matched) if not m]
        return result


class OptimalIoUMatcher:
    """Globally optimal assignment maximizing total IoU."""

    def __init__(self, iou_threshold: float = 0.3):
        self.iou_threshold = iou_threshold

    def match(
        self, tracks: Sequence[TrackedObject], detections: Sequence[Detection]
    ) -> AssociationResult:
        result = AssociationResult()
        if not tracks or not detections:
            result.unmatched_tracks = list(range(len(tracks)))
            result.unmatched_detections = list(range(len(detections)))
            return result

        scores = iou_matrix(tracks, detections)
        rows, cols = linear_sum_assignment(-scores)

        matched_tracks = set()
        matched_detections = set()
        for i, j in sorted(zip(rows.tolist(), cols.tolist())):
            if scores[i, j] > self.iou_threshold:
                result.matches.append((i, j))
                matched_tracks.add(i)
                matched_detections.add(j)

        result.unmatched_tracks = [i for i in range(len(tracks)) if i not in matched_tracks]
        result.unmatched_detections = [j for j in range(len(detections)) if j not in matched_detections]
        return result


def build_matcher(kind: str, iou_threshold: float) -> Matcher:
    if kind == "optimal":
        return OptimalIoUMatcher(iou_threshold)
    return GreedyIoUMatcher(iou_threshold)
