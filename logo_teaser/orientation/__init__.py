"""Rotation math shared by the scene graph and the orientation controller."""

from logo_teaser.orientation.rotation import (
    Euler,
    Rotation3D,
    compose_transform,
)

__all__ = [
    "Euler",
    "Rotation3D",
    "compose_transform",
]
