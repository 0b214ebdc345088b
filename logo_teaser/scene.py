"""
Minimal scene graph: transform nodes, meshes and a perspective camera.

Only what the teaser needs is modelled: a node hierarchy with
position / Euler rotation / scale, triangle meshes, and a camera with
mutable fov / aspect / near / far / position and look_at().
"""

import logging
import math
from typing import Iterator, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from logo_teaser import config as cfg
from logo_teaser.geometry.bounds import BoundingBox, calculate_bounding_box, merge_bounding_boxes
from logo_teaser.orientation.rotation import Euler, Rotation3D, compose_transform

logger = logging.getLogger(__name__)


class Object3D:
    """Transform node with children.

    Attributes:
        name: Node label (for logs)
        position: Local translation, float64 3-vector
        rotation: Local Euler rotation, radians, XYZ order
        scale: Local per-axis scale
        parent: Parent node or None
        children: Attached child nodes
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.position: NDArray[np.float64] = np.zeros(3)
        self.rotation = Euler()
        self.scale: NDArray[np.float64] = np.ones(3)
        self.parent: Optional['Object3D'] = None
        self.children: List['Object3D'] = []

    def add(self, child: 'Object3D') -> 'Object3D':
        """Attach child, detaching it from any previous parent."""
        if child is self:
            raise ValueError("Object cannot be added to itself")
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        return self

    def remove(self, child: 'Object3D') -> 'Object3D':
        if child in self.children:
            self.children.remove(child)
            child.parent = None
        return self

    def traverse(self) -> Iterator['Object3D']:
        """Depth-first iteration over this node and all descendants."""
        yield self
        for child in self.children:
            yield from child.traverse()

    @property
    def local_matrix(self) -> NDArray[np.float64]:
        return compose_transform(self.position, Rotation3D.from_euler(self.rotation), self.scale)

    @property
    def world_matrix(self) -> NDArray[np.float64]:
        if self.parent is None:
            return self.local_matrix
        return self.parent.world_matrix @ self.local_matrix

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, children={len(self.children)})"


class Group(Object3D):
    """Grouping node; the teaser rig is a Group."""


class Scene(Object3D):
    """Scene root.

    Attributes:
        environment: Image-based lighting map, set once loaded (or None)
        background: Clear color, hex string
    """

    def __init__(self, name: str = "scene"):
        super().__init__(name)
        self.environment = None
        self.background = cfg.BACKGROUND_COLOR


class DirectionalLight(Object3D):
    """Directional light; carried in the graph, the wireframe renderer ignores it."""

    def __init__(
        self,
        color: str = cfg.LIGHT_COLOR,
        intensity: float = cfg.LIGHT_INTENSITY,
        name: str = "light",
    ):
        super().__init__(name)
        self.color = color
        self.intensity = float(intensity)


class Mesh(Object3D):
    """Triangle mesh.

    Attributes:
        vertices: (N, 3) float64 local-space vertices
        faces: (M, 3) int32 vertex indices
    """

    def __init__(self, vertices: NDArray[np.float64], faces: NDArray[np.int32], name: str = ""):
        super().__init__(name)
        self.vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
        self.faces = np.asarray(faces, dtype=np.int32).reshape(-1, 3)

    def world_vertices(self) -> NDArray[np.float64]:
        """Vertices transformed by the full parent chain."""
        if len(self.vertices) == 0:
            return self.vertices
        matrix = self.world_matrix
        return self.vertices @ matrix[:3, :3].T + matrix[:3, 3]

    def edges(self) -> NDArray[np.int32]:
        """Unique undirected edges as (K, 2) index pairs."""
        if len(self.faces) == 0:
            return np.zeros((0, 2), dtype=np.int32)
        pairs = np.concatenate([
            self.faces[:, [0, 1]],
            self.faces[:, [1, 2]],
            self.faces[:, [2, 0]],
        ])
        pairs.sort(axis=1)
        return np.unique(pairs, axis=0)


def compute_world_bounding_box(obj: Object3D) -> BoundingBox:
    """World-space AABB of every mesh under obj (obj included)."""
    return merge_bounding_boxes(
        calculate_bounding_box(node.world_vertices())
        for node in obj.traverse()
        if isinstance(node, Mesh)
    )


class PerspectiveCamera:
    """Perspective camera with a vertical field of view in degrees."""

    def __init__(
        self,
        fov: float = cfg.CAMERA_FOV_DEG,
        aspect: float = 1.0,
        near: float = cfg.CAMERA_INITIAL_NEAR,
        far: float = cfg.CAMERA_INITIAL_FAR,
    ):
        self.fov = float(fov)
        self.aspect = float(aspect)
        self.near = float(near)
        self.far = float(far)
        self.position: NDArray[np.float64] = np.zeros(3)
        self.target: NDArray[np.float64] = np.array([0.0, 0.0, -1.0])
        self.up: NDArray[np.float64] = np.array([0.0, 1.0, 0.0])
        self.projection_matrix: NDArray[np.float64] = np.eye(4)
        self.update_projection_matrix()

    def update_projection_matrix(self) -> None:
        """Recompute the OpenGL-style projection from fov/aspect/near/far."""
        f = 1.0 / math.tan(math.radians(self.fov) / 2)
        aspect = self.aspect or 1.0
        near, far = self.near, self.far
        self.projection_matrix = np.array([
            [f / aspect, 0.0, 0.0, 0.0],
            [0.0, f, 0.0, 0.0],
            [0.0, 0.0, (far + near) / (near - far), 2 * far * near / (near - far)],
            [0.0, 0.0, -1.0, 0.0],
        ])

    def look_at(self, point) -> None:
        self.target = np.asarray(point, dtype=np.float64).copy()

    @property
    def view_matrix(self) -> NDArray[np.float64]:
        """World-to-camera transform for the current position/target."""
        eye = self.position
        forward = self.target - eye
        norm = np.linalg.norm(forward)
        forward = forward / norm if norm > 1e-12 else np.array([0.0, 0.0, -1.0])

        up = self.up
        if abs(float(np.dot(forward, up))) > 0.9999:
            up = np.array([0.0, 0.0, 1.0])
        side = np.cross(forward, up)
        side /= np.linalg.norm(side)
        true_up = np.cross(side, forward)

        view = np.eye(4)
        view[0, :3] = side
        view[1, :3] = true_up
        view[2, :3] = -forward
        view[:3, 3] = -view[:3, :3] @ eye
        return view

    def project(self, points: NDArray[np.float64]) -> Tuple[NDArray[np.float64], NDArray[np.bool_]]:
        """Project world points to normalized device coordinates.

        Returns:
            ndc: (N, 3) x, y in [-1, 1] when on screen, z depth
            visible: (N,) mask of points in front of the camera
        """
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        homogeneous = np.hstack([points, np.ones((len(points), 1))])
        clip = homogeneous @ (self.projection_matrix @ self.view_matrix).T
        w = clip[:, 3]
        visible = w > 1e-9
        safe_w = np.where(visible, w, 1.0)
        ndc = clip[:, :3] / safe_w[:, None]
        return ndc, visible
