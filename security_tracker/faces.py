"""Face identity resolution seam.

The engine never owns a recognition model. Callers inject a resolver; the
engine only decides when to call it and what to do with the answer.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Tuple

import numpy as np
from loguru import logger


@dataclass(frozen=True)
class FaceMatch:
    label: str
    confidence: float  # resolver's native distance, lower is better


class FaceIdentityResolver(Protocol):
    def resolve(self, face_image: np.ndarray) -> Optional[FaceMatch]:
        """Return the best identity for a face crop, or None for unknown."""
        ...


class LabelMapResolver:
    """Adapt a numeric-label recognizer plus a table of known faces.

    `predict` takes a face crop and returns (label, confidence), the shape
    of most classic recognizers (LBPH, Eigen, Fisher). Labels missing from
    `known_faces` resolve to None.
    """

    def __init__(
        self,
        predict: Callable[[np.ndarray], Tuple[int, float]],
        known_faces: Optional[Dict[int, str]] = None,
    ):
        self._predict = predict
        self.known_faces: Dict[int, str] = dict(known_faces or {})
        logger.info(f"Face resolver ready with {len(self.known_faces)} known identities")

    def register(self, label: int, name: str) -> None:
        self.known_faces[label] = name

    def resolve(self, face_image: np.ndarray) -> Optional[FaceMatch]:
        label, confidence = self._predict(face_image)
        name = self.known_faces.get(int(label))
        if name is None:
            return None
        return FaceMatch(label=name, confidence=float(confidence))
