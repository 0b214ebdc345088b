"""
Camera auto-fit: place the camera so an object fills the viewport.

The object is re-centered on its visual centroid first, so that rig
rotation happens about the middle of the logo rather than the asset's
authoring pivot. The camera distance is the larger of the height- and
width-limited distances times a margin factor; clip planes scale with
the distance to keep depth precision constant across asset sizes.
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from logo_teaser import config as cfg
from logo_teaser.scene import Object3D, PerspectiveCamera, compute_world_bounding_box

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FitResult:
    """Outcome of one fit_camera_to_object call.

    Attributes:
        distance: Camera distance along +Z
        near: Near clip plane
        far: Far clip plane
        max_size: Largest bounding-box extent used (after the epsilon floor)
        center: World-space box center before re-centering
        degenerate: True when the box had no volume along its largest axis
    """
    distance: float
    near: float
    far: float
    max_size: float
    center: NDArray[np.float64]
    degenerate: bool = False


def fit_distance(max_size: float, fov_deg: float, aspect: float, margin: float) -> float:
    """Camera distance at which a cube of edge max_size fits the frustum."""
    fov_rad = math.radians(fov_deg)
    fit_height_distance = (max_size / 2) / math.tan(fov_rad / 2)
    fit_width_distance = fit_height_distance / (aspect or 1.0)
    return margin * max(fit_height_distance, fit_width_distance)


def _recenter(obj: Object3D, world_center: NDArray[np.float64]) -> None:
    """Shift obj so that world_center lands on its parent's origin."""
    if obj.parent is None:
        obj.position = obj.position - world_center
        return

    parent_matrix = obj.parent.world_matrix
    linear = parent_matrix[:3, :3]
    offset = world_center - parent_matrix[:3, 3]
    obj.position = obj.position - np.linalg.solve(linear, offset)


def fit_camera_to_object(
    camera: PerspectiveCamera,
    obj: Object3D,
    margin_factor: float = cfg.FIT_MARGIN,
) -> FitResult:
    """Re-center obj and move the camera so obj fits the viewport.

    Mutates obj.position and the camera (position, near, far, target,
    projection matrix). Repeated calls on an unchanged object and
    viewport give the same camera state.

    Args:
        camera: Camera to place; its fov and aspect are read, not changed
        obj: Object already attached to the scene graph
        margin_factor: Headroom multiplier, >= 1

    Returns:
        FitResult describing the new camera placement

    Raises:
        ValueError: if margin_factor < 1
    """
    if margin_factor < 1.0:
        raise ValueError(f"margin_factor must be >= 1, got {margin_factor}")

    box = compute_world_bounding_box(obj)
    size = box.dimensions
    center = box.center.copy()

    _recenter(obj, center)

    max_size = float(np.max(size))
    degenerate = max_size < cfg.MIN_FIT_EXTENT
    if degenerate:
        logger.warning(
            "Degenerate bounding box for %r (max extent %.3g), using default distance %.3g",
            obj.name, max_size, cfg.DEGENERATE_FIT_DISTANCE,
        )
        max_size = cfg.MIN_FIT_EXTENT
        distance = cfg.DEGENERATE_FIT_DISTANCE
    else:
        distance = fit_distance(max_size, camera.fov, camera.aspect, margin_factor)

    camera.position = np.array([0.0, 0.0, distance])
    camera.near = distance / cfg.CLIP_RATIO
    camera.far = distance * cfg.CLIP_RATIO
    camera.update_projection_matrix()
    camera.look_at((0.0, 0.0, 0.0))

    logger.debug(
        "Camera fitted: distance=%.4f near=%.4g far=%.4g aspect=%.3f",
        distance, camera.near, camera.far, camera.aspect,
        extra={"camera_position": camera.position, "box_center": center},
    )

    return FitResult(
        distance=distance,
        near=camera.near,
        far=camera.far,
        max_size=max_size,
        center=center,
        degenerate=degenerate,
    )
