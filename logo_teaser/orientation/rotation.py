"""
Rotation utilities for the scene graph.

Provides:
- Euler: mutable (x, y, z) angle triple, XYZ order, radians
- Rotation3D: rotation matrix wrapper with constructors and composition
- compose_transform: 4x4 matrix from translation, rotation and scale

Euler angles follow the intrinsic XYZ convention used by WebGL scene
graphs: R = Rx @ Ry @ Rz, so the Z rotation is applied to a point first.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


@dataclass
class Euler:
    """Rotation angles in radians (XYZ order)."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def set(self, x: float, y: float, z: float) -> 'Euler':
        self.x, self.y, self.z = float(x), float(y), float(z)
        return self

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def copy(self) -> 'Euler':
        return Euler(self.x, self.y, self.z)


@dataclass
class Rotation3D:
    """3D rotation represented as a rotation matrix.

    Attributes:
        matrix: 3x3 orthogonal rotation matrix (det = +1)
    """
    matrix: NDArray[np.float64]

    def __post_init__(self):
        self.matrix = np.asarray(self.matrix, dtype=np.float64)
        if self.matrix.shape != (3, 3):
            raise ValueError(f"Rotation matrix must be 3x3, got {self.matrix.shape}")

    @classmethod
    def around_x(cls, angle_rad: float) -> 'Rotation3D':
        c, s = np.cos(angle_rad), np.sin(angle_rad)
        return cls(np.array([[1, 0, 0], [0, c, -s], [0, s, c]]))

    @classmethod
    def around_y(cls, angle_rad: float) -> 'Rotation3D':
        c, s = np.cos(angle_rad), np.sin(angle_rad)
        return cls(np.array([[c, 0, s], [0, 1, 0], [-s, 0, c]]))

    @classmethod
    def around_z(cls, angle_rad: float) -> 'Rotation3D':
        c, s = np.cos(angle_rad), np.sin(angle_rad)
        return cls(np.array([[c, -s, 0], [s, c, 0], [0, 0, 1]]))

    @classmethod
    def from_euler(cls, euler: Euler) -> 'Rotation3D':
        """Rotation for XYZ-ordered Euler angles: Rx @ Ry @ Rz."""
        return (
            cls.around_x(euler.x)
            @ cls.around_y(euler.y)
            @ cls.around_z(euler.z)
        )

    def compose(self, other: 'Rotation3D') -> 'Rotation3D':
        """self * other: applies `other` first, then `self`."""
        return Rotation3D(self.matrix @ other.matrix)

    def __matmul__(self, other: 'Rotation3D') -> 'Rotation3D':
        return self.compose(other)


def compose_transform(
    position: NDArray[np.float64],
    rotation: Rotation3D,
    scale: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Build a 4x4 local transform T @ R @ S."""
    matrix = np.eye(4)
    matrix[:3, :3] = rotation.matrix * np.asarray(scale, dtype=np.float64)
    matrix[:3, 3] = np.asarray(position, dtype=np.float64)
    return matrix
