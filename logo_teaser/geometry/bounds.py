"""
Axis-aligned bounding boxes for the framing engine.

Provides:
- BoundingBox with size/center helpers
- calculate_bounding_box for a vertex array
- merge of several boxes (one per mesh in a scene subtree)
"""

import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


@dataclass
class BoundingBox:
    """Axis-Aligned Bounding Box (AABB).

    An empty box has min_point = +inf and max_point = -inf; its dimensions
    and center read as zero.

    Attributes:
        min_point: Minimum corner (x_min, y_min, z_min)
        max_point: Maximum corner (x_max, y_max, z_max)
    """
    min_point: NDArray[np.float64]
    max_point: NDArray[np.float64]

    def __post_init__(self):
        self.min_point = np.asarray(self.min_point, dtype=np.float64)
        self.max_point = np.asarray(self.max_point, dtype=np.float64)

    @classmethod
    def empty(cls) -> 'BoundingBox':
        return cls(np.full(3, np.inf), np.full(3, -np.inf))

    @property
    def is_empty(self) -> bool:
        return bool(np.any(self.max_point < self.min_point))

    @property
    def dimensions(self) -> NDArray[np.float64]:
        """Per-axis extent (width, height, depth)."""
        if self.is_empty:
            return np.zeros(3)
        return self.max_point - self.min_point

    @property
    def center(self) -> NDArray[np.float64]:
        if self.is_empty:
            return np.zeros(3)
        return (self.min_point + self.max_point) / 2

    def union(self, other: 'BoundingBox') -> 'BoundingBox':
        """Smallest box containing both boxes."""
        if other.is_empty:
            return BoundingBox(self.min_point.copy(), self.max_point.copy())
        if self.is_empty:
            return BoundingBox(other.min_point.copy(), other.max_point.copy())
        return BoundingBox(
            np.minimum(self.min_point, other.min_point),
            np.maximum(self.max_point, other.max_point),
        )


def calculate_bounding_box(vertices: NDArray[np.float64]) -> BoundingBox:
    """Calculate axis-aligned bounding box for an (N, 3) vertex array.

    An empty array yields an empty box.
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    if vertices.size == 0:
        return BoundingBox.empty()

    return BoundingBox(
        min_point=np.min(vertices, axis=0),
        max_point=np.max(vertices, axis=0)
    )


def merge_bounding_boxes(boxes: Iterable[BoundingBox]) -> BoundingBox:
    result = BoundingBox.empty()
    for box in boxes:
        result = result.union(box)
    return result
