"""Geometric primitives: bounding boxes."""

from logo_teaser.geometry.bounds import (
    BoundingBox,
    calculate_bounding_box,
    merge_bounding_boxes,
)

__all__ = [
    "BoundingBox",
    "calculate_bounding_box",
    "merge_bounding_boxes",
]
